ASSETS_PATH: str = "./assets/"
MODELS_PATH: str = ASSETS_PATH + "models/"
TEXTURES_PATH: str = ASSETS_PATH + "textures/"
FONTS_PATH: str = ASSETS_PATH + "fonts/"

HEART_MODEL_PATH: str = MODELS_PATH + "Heart.glb"

MATCAP_TEXTURE_PATH: str = TEXTURES_PATH + "matcaps/8.png"
FLOWER_TEXTURE_PATH: str = TEXTURES_PATH + "test.png"

# load_font() treats an empty path as pygame's bundled default font
FONT_PATH: str = FONTS_PATH + "helvetiker_regular.ttf"
