"""
Core module - Geometric model, configuration, errors and logging.
"""

from trianglekit.core.config import TriangleSettings, load_settings
from trianglekit.core.exceptions import (
    ConfigurationError,
    DecodeError,
    DecodeIndexError,
    EncodeError,
    EngineError,
    EngineTimeoutError,
    TriangleKitError,
    WorkspaceError,
)
from trianglekit.core.model import Hole, Point, Region, Segment, Triangle, Triangulation

__all__ = [
    # Config
    "TriangleSettings",
    "load_settings",
    # Exceptions
    "TriangleKitError",
    "ConfigurationError",
    "WorkspaceError",
    "EncodeError",
    "EngineError",
    "EngineTimeoutError",
    "DecodeError",
    "DecodeIndexError",
    # Model
    "Point",
    "Segment",
    "Triangle",
    "Hole",
    "Region",
    "Triangulation",
]
