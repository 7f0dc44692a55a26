import logging

WIDTH = 1280
HEIGHT = 720
FULLSCREEN = False
RESIZABLE = True
BACKGROUND = (0.0, 0.0, 0.0, 1.0)
FPS = 60
VSYNC = True
# Device pixel ratio is clamped so high-density displays don't quadruple fill cost
MAX_PIXEL_RATIO = 2.0

# Camera
FOV = 75
NEAR = 0.1
FAR = 1000
STARTING_POS = (0, 0, 10)
CAMERA_TARGET = (0, 0, 0)
ENABLE_DAMPING = True
DAMPING_FACTOR = 0.05
ROTATE_SPEED = 1.0
ZOOM_SPEED = 1.0

# Hearts
NUM_HEARTS = 180
SPREAD_RANGE = 100
HEART_RADIUS = 30  # radius of the spherical distribution
HEART_SPIN_SPEED = 0.5  # radians/sec around Y
HEART_COLOR = (0.85, 0.1, 0.2)

# Flower + text group
FLOWER_SIZE = 5.0
FLOWER_OFFSET = (0.0, -6.9, 0.0)
TEXT_GROUP_OFFSET = (0.0, 5.0, 0.0)
FLOWER_ALPHA_TEST = 0.1
GROWTH_RATE = 0.02  # uniform scale gained per second
DRIFT_SPEED = 1.0  # world units/sec up and away from the camera

TEXT_LINES = [
    "Maman",
    "Apsveicu",
    "Tevi",
    "Valentindiena",
    "PS: Maman ei Bezdet!!!",
    "Atbildot uz tavu jautajumu,",
    "Talab, kad gribu sutit BEZDET!!!",
]
LINE_HEIGHT = 1.5
TEXT_SIZE = 0.5
TEXT_DEPTH = 0.2
TEXT_CURVE_SEGMENTS = 12
TEXT_BEVEL_ENABLED = True
TEXT_BEVEL_THICKNESS = 0.03
TEXT_BEVEL_SIZE = 0.02
TEXT_BEVEL_OFFSET = 0.0
TEXT_BEVEL_SEGMENTS = 5

# Lights
AMBIENT_COLOR = (1.0, 1.0, 1.0)
AMBIENT_INTENSITY = 2.4
DIRECTIONAL_COLOR = (1.0, 1.0, 1.0)
DIRECTIONAL_INTENSITY = 1.8
DIRECTIONAL_POSITION = (5, 5, 5)
SHADOW_MAP_SIZE = 1024
SHADOW_CAMERA_FAR = 15
SHADOW_CAMERA_EXTENT = 7

# Asset loading
LOADER_WORKERS = 4

LOG_LEVEL = logging.INFO
LOG_FILE = None
