"""
Geometric model exchanged with the triangle engine.

A :class:`Triangulation` is both the input of a run (points, segments, holes,
regions) and its output (refined points, segments and triangles). All point
references held by the model are 0-based list positions; conversion to the
engine's 1-based numbering happens only in the codecs.
"""

import copy
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np


@dataclass
class Point:
    """
    A 2D vertex.

    Attributes:
        x: X coordinate
        y: Y coordinate
        marker: Boundary marker, passed through unchanged
    """

    x: float
    y: float
    marker: int = 0


@dataclass
class Segment:
    """
    A constrained edge between two points.

    Attributes:
        n1: 0-based index of the first endpoint
        n2: 0-based index of the second endpoint
        marker: Boundary marker, passed through unchanged
    """

    n1: int
    n2: int
    marker: int = 0


@dataclass
class Triangle:
    """
    A mesh element.

    Attributes:
        nodes: 0-based point indices; three corners, or six nodes for
               second-order elements (corners first, then midpoints)
        marker: First element attribute reported by the engine, if any
    """

    nodes: Tuple[int, ...]
    marker: Optional[int] = None


@dataclass
class Hole:
    """A seed point inside a region to be removed from the mesh."""

    x: float
    y: float


@dataclass
class Region:
    """
    A seed point tagging a mesh area.

    Attributes:
        x: X coordinate
        y: Y coordinate
        marker: Regional attribute copied to the triangles of the area
        max_area: Optional area constraint for the area
    """

    x: float
    y: float
    marker: int = 0
    max_area: Optional[float] = None


@dataclass
class Triangulation:
    """
    Input and output mesh of a triangle run.

    Example:
        >>> mesh = Triangulation(points=[Point(0, 0), Point(1, 0), Point(0, 1)])
        >>> mesh.is_point_cloud
        True
    """

    points: List[Point] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)
    holes: List[Hole] = field(default_factory=list)
    triangles: List[Triangle] = field(default_factory=list)
    regions: List[Region] = field(default_factory=list)

    @property
    def is_point_cloud(self) -> bool:
        """True when the model has no segments (unconstrained triangulation)."""
        return len(self.segments) == 0

    def vertices(self) -> np.ndarray:
        """Return point coordinates as an ``(N, 2)`` float array."""
        if not self.points:
            return np.zeros((0, 2), dtype=float)
        return np.array([(p.x, p.y) for p in self.points], dtype=float)

    def markers(self) -> np.ndarray:
        """Return point markers as an ``(N,)`` int array."""
        return np.array([p.marker for p in self.points], dtype=int)

    def triangle_nodes(self) -> np.ndarray:
        """
        Return triangle connectivity as an ``(M, k)`` int array.

        Raises:
            ValueError: If triangles have differing node counts
        """
        if not self.triangles:
            return np.zeros((0, 3), dtype=int)
        sizes = {len(t.nodes) for t in self.triangles}
        if len(sizes) != 1:
            raise ValueError(f"Triangles have mixed node counts: {sorted(sizes)}")
        return np.array([t.nodes for t in self.triangles], dtype=int)

    @classmethod
    def from_arrays(
        cls,
        vertices: Sequence[Sequence[float]],
        segments: Optional[Sequence[Sequence[int]]] = None,
        holes: Optional[Sequence[Sequence[float]]] = None,
        markers: Optional[Sequence[int]] = None,
        segment_markers: Optional[Sequence[int]] = None,
        regions: Optional[Sequence[Sequence[float]]] = None,
    ) -> "Triangulation":
        """
        Build a model from array-likes.

        Args:
            vertices: ``(N, 2)`` coordinates
            segments: ``(S, 2)`` 0-based endpoint indices
            holes: ``(H, 2)`` hole seed coordinates
            markers: ``(N,)`` point markers (default 0)
            segment_markers: ``(S,)`` segment markers (default 0)
            regions: ``(R, 2..4)`` rows of ``x, y[, marker[, max_area]]``;
                a non-positive area means no constraint
        """
        verts = np.asarray(vertices, dtype=float).reshape(-1, 2)
        point_markers = (
            np.zeros(len(verts), dtype=int)
            if markers is None
            else np.asarray(markers, dtype=int)
        )
        if len(point_markers) != len(verts):
            raise ValueError("markers must have one entry per vertex")

        points = [
            Point(float(x), float(y), int(m))
            for (x, y), m in zip(verts, point_markers)
        ]

        segs: List[Segment] = []
        if segments is not None:
            seg_arr = np.asarray(segments, dtype=int).reshape(-1, 2)
            seg_markers = (
                np.zeros(len(seg_arr), dtype=int)
                if segment_markers is None
                else np.asarray(segment_markers, dtype=int)
            )
            if len(seg_markers) != len(seg_arr):
                raise ValueError("segment_markers must have one entry per segment")
            segs = [
                Segment(int(a), int(b), int(m))
                for (a, b), m in zip(seg_arr, seg_markers)
            ]

        hole_list: List[Hole] = []
        if holes is not None:
            hole_arr = np.asarray(holes, dtype=float).reshape(-1, 2)
            hole_list = [Hole(float(x), float(y)) for x, y in hole_arr]

        region_list: List[Region] = []
        if regions is not None:
            for row in regions:
                values = [float(v) for v in row]
                if not 2 <= len(values) <= 4:
                    raise ValueError("region rows must hold 2 to 4 values")
                marker = int(values[2]) if len(values) > 2 else 0
                max_area = values[3] if len(values) > 3 and values[3] > 0 else None
                region_list.append(Region(values[0], values[1], marker, max_area))

        return cls(points=points, segments=segs, holes=hole_list, regions=region_list)

    def copy(self) -> "Triangulation":
        """Return a deep copy of the model."""
        return copy.deepcopy(self)

    def __str__(self) -> str:
        lines = []
        for i, p in enumerate(self.points):
            lines.append(f"Point    {i:03d}: {{{p.x:+12e} {p.y:+12e}}} {p.marker:3d}")
        for i, s in enumerate(self.segments):
            lines.append(f"Segment  {i:03d}: {{{s.n1:03d} {s.n2:03d}}} {s.marker:3d}")
        for i, h in enumerate(self.holes):
            lines.append(f"Hole     {i:03d}: {{{h.x:+12e} {h.y:+12e}}}")
        for i, t in enumerate(self.triangles):
            nodes = " ".join(f"{n:03d}" for n in t.nodes)
            marker = "" if t.marker is None else f" {t.marker:3d}"
            lines.append(f"Triangle {i:03d}: {{{nodes}}}{marker}")
        for i, r in enumerate(self.regions):
            lines.append(f"Region   {i:03d}: {{{r.x:+12e} {r.y:+12e}}} {r.marker:3d}")
        return "\n".join(lines)
