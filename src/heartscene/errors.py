"""Exception types shared by the loader, scene graph and animation loop."""

from __future__ import annotations


class HeartSceneError(Exception):
    """Base class for every error raised by this package."""


class LoadFailure(HeartSceneError):
    """An asset could not be fetched or decoded.

    Terminal for the one request that produced it; other requests and the
    animation loop carry on.
    """

    def __init__(self, kind, source: str, cause: BaseException | None = None) -> None:
        self.kind = kind
        self.source = source
        self.cause = cause
        kind_name = getattr(kind, "value", kind)
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"failed to load {kind_name} asset '{source}'{detail}")


class SceneGraphError(HeartSceneError):
    """Invalid ownership change (double owner, cycle, unknown parent)."""


class ConcurrentMutationError(HeartSceneError):
    """Scene mutation attempted from a thread that doesn't own the graph."""


__all__ = [
    "HeartSceneError",
    "LoadFailure",
    "SceneGraphError",
    "ConcurrentMutationError",
]
