"""
Readers for triangle's output dialects.

.node files
    First line: ``<# of vertices> <dimension (2)> <# of attributes> <# of markers (0 or 1)>``
    Remaining lines: ``<vertex #> <x> <y> [attributes] [boundary marker]``

.ele files
    First line: ``<# of triangles> <nodes per triangle> <# of attributes>``
    Remaining lines: ``<triangle #> <node> <node> <node> ... [attributes]``

.poly files
    The block structure written by :func:`trianglekit.io.encoders.encode_poly`.
    Triangle's own .poly output declares zero vertices when the vertices
    were written to the companion .node file.

Every body line is split into tokens first; which token means what is then
decided from the token count and the header. Declared sizes are enforced:
each declared slot must be filled exactly once, and an index outside the
declared range is a :class:`DecodeIndexError`. All indices are converted to
0-based before they reach the model.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from trianglekit.core.exceptions import DecodeError, DecodeIndexError
from trianglekit.core.logging import get_logger
from trianglekit.core.model import Hole, Point, Region, Segment, Triangle, Triangulation
from trianglekit.io.sanitize import strip_comments

logger = get_logger(__name__)

FIRST_INDEX = 1

Content = Union[str, bytes]


class _Lines:
    """Cursor over the tokenized data lines of a sanitized file."""

    def __init__(self, content: Content, artifact: str) -> None:
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError("File is not valid text", artifact=artifact) from e
        text = strip_comments(content)
        self.artifact = artifact
        self.rows: List[List[str]] = [line.split() for line in text.split("\n") if line.strip()]
        self.pos = 0

    @property
    def line(self) -> int:
        """1-based number of the data line returned last."""
        return self.pos

    def exhausted(self) -> bool:
        return self.pos >= len(self.rows)

    def next(self, what: str) -> List[str]:
        if self.exhausted():
            raise DecodeError(
                f"Unexpected end of file, expected {what}",
                artifact=self.artifact,
                line=self.pos,
            )
        row = self.rows[self.pos]
        self.pos += 1
        return row

    def error(self, message: str, **details) -> DecodeError:
        return DecodeError(message, artifact=self.artifact, line=self.line, details=details)

    def integer(self, token: str, what: str) -> int:
        try:
            return int(token)
        except ValueError:
            pass
        try:
            value = float(token)
        except ValueError:
            raise self.error(f"Invalid {what}: {token!r}") from None
        if not value.is_integer():
            raise self.error(f"Invalid {what}: {token!r} is not an integer")
        return int(value)

    def real(self, token: str, what: str) -> float:
        try:
            return float(token)
        except ValueError:
            raise self.error(f"Invalid {what}: {token!r}") from None

    def count(self, token: str, what: str) -> int:
        value = self.integer(token, what)
        if value < 0:
            raise self.error(f"Negative {what}: {value}")
        return value

    def node(self, token: str) -> int:
        """Parse a 1-based point reference and return it 0-based."""
        value = self.integer(token, "point index")
        if value < FIRST_INDEX:
            raise DecodeIndexError(
                f"Point index {value} is below {FIRST_INDEX}",
                artifact=self.artifact,
                line=self.line,
            )
        return value - FIRST_INDEX


class _Slots:
    """
    Destination sized by a header count.

    Entries are keyed by position and stored as they are read; nothing is
    allocated from the declared count.
    """

    def __init__(self, size: int, kind: str, lines: _Lines) -> None:
        self.size = size
        self.items: Dict[int, object] = {}
        self.kind = kind
        self.lines = lines

    def put(self, index: int, value: object) -> None:
        position = index - FIRST_INDEX
        if not 0 <= position < self.size:
            raise DecodeIndexError(
                f"{self.kind.capitalize()} #{index} is outside the declared "
                f"range 1..{self.size}",
                artifact=self.lines.artifact,
                line=self.lines.line,
            )
        if position in self.items:
            raise self.lines.error(f"{self.kind.capitalize()} #{index} is defined twice")
        self.items[position] = value

    def collect(self) -> list:
        if len(self.items) != self.size:
            # the first gaps lie within len(items) + 10 positions
            missing = [
                i + FIRST_INDEX
                for i in range(min(self.size, len(self.items) + 10))
                if i not in self.items
            ]
            raise DecodeError(
                f"Declared {self.size} {self.kind}s but "
                f"{self.size - len(self.items)} are missing",
                artifact=self.lines.artifact,
                details={"missing": missing[:10]},
            )
        return [self.items[i] for i in range(self.size)]


@contextmanager
def _decoding(artifact: str) -> Iterator[None]:
    # Parsing faults that slip past the explicit checks still surface as DecodeError.
    try:
        yield
    except (ValueError, IndexError, TypeError) as e:
        raise DecodeError(f"Malformed file: {e}", artifact=artifact) from e


def _read_points(lines: _Lines, until_end: bool) -> Tuple[int, List[Point]]:
    header = lines.next("point header")
    count = lines.count(header[0], "point count")
    dimension = lines.integer(header[1], "dimension") if len(header) > 1 else 2
    attributes = lines.count(header[2], "attribute count") if len(header) > 2 else 0
    has_markers = lines.integer(header[3], "marker flag") if len(header) > 3 else 0
    if dimension != 2:
        raise lines.error(f"Only 2D files are supported, got dimension {dimension}")

    slots = _Slots(count, "point", lines)
    read = 0
    while not lines.exhausted() if until_end else read < count:
        fields = lines.next("point line")
        read += 1
        if len(fields) < 3:
            raise lines.error(f"Point line needs at least 3 fields, got {len(fields)}")
        index = lines.integer(fields[0], "point number")
        x = lines.real(fields[1], "x coordinate")
        y = lines.real(fields[2], "y coordinate")
        if len(fields) == 3:
            marker = 0
        elif len(fields) == 4:
            # a lone trailing column is always the marker
            marker = lines.integer(fields[3], "point marker")
        elif not has_markers and len(fields) == 3 + attributes:
            marker = 0
        else:
            marker = lines.integer(fields[-1], "point marker")
        slots.put(index, Point(x, y, marker))
    return count, slots.collect()


def _read_segments(lines: _Lines) -> List[Segment]:
    header = lines.next("segment header")
    count = lines.count(header[0], "segment count")
    slots = _Slots(count, "segment", lines)
    for _ in range(count):
        fields = lines.next("segment line")
        if len(fields) < 3:
            raise lines.error(f"Segment line needs at least 3 fields, got {len(fields)}")
        index = lines.integer(fields[0], "segment number")
        n1 = lines.node(fields[1])
        n2 = lines.node(fields[2])
        marker = lines.integer(fields[3], "segment marker") if len(fields) > 3 else 0
        slots.put(index, Segment(n1, n2, marker))
    return slots.collect()


def _read_holes(lines: _Lines) -> List[Hole]:
    header = lines.next("hole header")
    count = lines.count(header[0], "hole count")
    slots = _Slots(count, "hole", lines)
    for _ in range(count):
        fields = lines.next("hole line")
        if len(fields) < 3:
            raise lines.error(f"Hole line needs 3 fields, got {len(fields)}")
        index = lines.integer(fields[0], "hole number")
        slots.put(index, Hole(lines.real(fields[1], "x coordinate"), lines.real(fields[2], "y coordinate")))
    return slots.collect()


def _read_regions(lines: _Lines) -> List[Region]:
    header = lines.next("region header")
    count = lines.count(header[0], "region count")
    slots = _Slots(count, "region", lines)
    for _ in range(count):
        fields = lines.next("region line")
        if len(fields) < 3:
            raise lines.error(f"Region line needs at least 3 fields, got {len(fields)}")
        index = lines.integer(fields[0], "region number")
        x = lines.real(fields[1], "x coordinate")
        y = lines.real(fields[2], "y coordinate")
        marker = lines.integer(fields[3], "region attribute") if len(fields) > 3 else 0
        max_area: Optional[float] = None
        if len(fields) > 4:
            max_area = lines.real(fields[4], "region area")
            if max_area <= 0:
                max_area = None
        slots.put(index, Region(x, y, marker, max_area))
    return slots.collect()


def _read_triangles(lines: _Lines) -> List[Triangle]:
    header = lines.next("triangle header")
    count = lines.count(header[0], "triangle count")
    corners = lines.integer(header[1], "nodes per triangle") if len(header) > 1 else 3
    if corners < 3:
        raise lines.error(f"Nodes per triangle must be at least 3, got {corners}")

    slots = _Slots(count, "triangle", lines)
    while not lines.exhausted():
        fields = lines.next("triangle line")
        if len(fields) < 1 + corners:
            raise lines.error(
                f"Triangle line needs {1 + corners} fields, got {len(fields)}"
            )
        index = lines.integer(fields[0], "triangle number")
        nodes = tuple(lines.node(token) for token in fields[1:1 + corners])
        marker: Optional[int] = None
        if len(fields) > 1 + corners:
            marker = lines.integer(fields[1 + corners], "triangle attribute")
        slots.put(index, Triangle(nodes, marker))
    return slots.collect()


def decode_node(content: Content, mesh: Triangulation, artifact: str = ".node") -> None:
    """
    Decode a .node file into ``mesh.points``, replacing them.

    Args:
        content: File content (comments allowed)
        mesh: Destination model, mutated in place
        artifact: Name used in error messages

    Raises:
        DecodeError: If the file is malformed or sizes disagree
        DecodeIndexError: If a point number is outside the declared range
    """
    with _decoding(artifact):
        lines = _Lines(content, artifact)
        if lines.exhausted():
            raise DecodeError("File is empty", artifact=artifact)
        _, mesh.points = _read_points(lines, until_end=True)
    logger.debug("node_decoded", artifact=artifact, points=len(mesh.points))


def decode_poly(content: Content, mesh: Triangulation, artifact: str = ".poly") -> None:
    """
    Decode a .poly file into ``mesh``.

    Segments, holes and regions are replaced. Points are replaced unless the
    file declares zero points, in which case the points already in the model
    (read from the companion .node file) are kept.

    Args:
        content: File content (comments allowed)
        mesh: Destination model, mutated in place
        artifact: Name used in error messages

    Raises:
        DecodeError: If the file is malformed or sizes disagree
        DecodeIndexError: If a number is outside its declared range
    """
    with _decoding(artifact):
        lines = _Lines(content, artifact)
        if lines.exhausted():
            raise DecodeError("File is empty", artifact=artifact)
        count, points = _read_points(lines, until_end=False)
        if count:
            mesh.points = points
        mesh.segments = _read_segments(lines)
        mesh.holes = _read_holes(lines)
        mesh.regions = [] if lines.exhausted() else _read_regions(lines)
        if not lines.exhausted():
            raise DecodeError(
                "Unexpected content after the region section",
                artifact=artifact,
                line=lines.pos + 1,
            )
    logger.debug(
        "poly_decoded",
        artifact=artifact,
        points=len(mesh.points),
        segments=len(mesh.segments),
        holes=len(mesh.holes),
        regions=len(mesh.regions),
    )


def decode_ele(content: Content, mesh: Triangulation, artifact: str = ".ele") -> None:
    """
    Decode a .ele file into ``mesh.triangles``, replacing them.

    ``nodes per triangle`` from the header decides how many node columns each
    line has (3 for linear, 6 for second-order elements). The first column
    after the nodes, if any, becomes the triangle marker.

    Args:
        content: File content (comments allowed)
        mesh: Destination model, mutated in place
        artifact: Name used in error messages

    Raises:
        DecodeError: If the file is malformed or sizes disagree
        DecodeIndexError: If a number is outside its declared range
    """
    with _decoding(artifact):
        lines = _Lines(content, artifact)
        if lines.exhausted():
            raise DecodeError("File is empty", artifact=artifact)
        mesh.triangles = _read_triangles(lines)
    logger.debug("ele_decoded", artifact=artifact, triangles=len(mesh.triangles))


def _read_file(path: Union[str, Path]) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise DecodeError(f"Cannot read file: {e}", artifact=Path(path).name) from e


def read_node_file(path: Union[str, Path], mesh: Triangulation) -> None:
    """Read a .node file from disk into ``mesh``."""
    decode_node(_read_file(path), mesh, artifact=Path(path).name)


def read_poly_file(path: Union[str, Path], mesh: Triangulation) -> None:
    """Read a .poly file from disk into ``mesh``."""
    decode_poly(_read_file(path), mesh, artifact=Path(path).name)


def read_ele_file(path: Union[str, Path], mesh: Triangulation) -> None:
    """Read a .ele file from disk into ``mesh``."""
    decode_ele(_read_file(path), mesh, artifact=Path(path).name)
