"""
trianglekit - Input/output codecs and process orchestration for Shewchuk's Triangle.

Encodes 2D geometry into triangle's .node/.poly input files, runs the external
``triangle`` binary in a scratch workspace, and decodes its .node/.poly/.ele
output back into the same in-memory model.
"""

__version__ = "0.1.0"

from trianglekit.core.config import TriangleSettings, load_settings
from trianglekit.core.model import Hole, Point, Region, Segment, Triangle, Triangulation
from trianglekit.engine import SubprocessEngine, TriangleEngine
from trianglekit.runner import RunReport, Triangulator, triangulate

__all__ = [
    "__version__",
    "Hole",
    "Point",
    "Region",
    "Segment",
    "Triangle",
    "Triangulation",
    "TriangleSettings",
    "load_settings",
    "TriangleEngine",
    "SubprocessEngine",
    "Triangulator",
    "RunReport",
    "triangulate",
]
