"""
Writers for triangle's input dialects.

.node files
    First line: ``<# of vertices> <dimension (2)> <# of attributes> <# of markers (0 or 1)>``
    Remaining lines: ``<vertex #> <x> <y> [attributes] [boundary marker]``

.poly files
    A .node section, then
    one line: ``<# of segments> <# of boundary markers (0 or 1)>``,
    following lines: ``<segment #> <endpoint> <endpoint> [boundary marker]``,
    one line: ``<# of holes>``,
    following lines: ``<hole #> <x> <y>``,
    optional line: ``<# of regions>``,
    optional following lines: ``<region #> <x> <y> <attribute> [maximum area]``

See https://www.cs.cmu.edu/~quake/triangle.node.html and
https://www.cs.cmu.edu/~quake/triangle.poly.html.

All numbering in the written files starts at 1; the model is 0-based.
"""

from typing import List

from trianglekit.core.exceptions import EncodeError
from trianglekit.core.model import Triangulation

FIRST_INDEX = 1


def _coord(value: float) -> str:
    # 14 significant digits
    return f"{value:.13e}"


def encode_node(mesh: Triangulation) -> str:
    """
    Serialize the points of ``mesh`` as a .node file.

    Args:
        mesh: Model to encode

    Returns:
        File content, newline terminated
    """
    lines: List[str] = [f"{len(mesh.points)} 2 0 1"]
    for i, p in enumerate(mesh.points):
        lines.append(
            f"{i + FIRST_INDEX} {_coord(p.x)} {_coord(p.y)} {p.marker}"
        )
    return "\n".join(lines) + "\n"


def encode_poly(mesh: Triangulation) -> str:
    """
    Serialize ``mesh`` as a .poly file.

    The point section is the .node encoding of the same model. The region
    section is only written when the model has regions.

    Args:
        mesh: Model to encode

    Returns:
        File content, newline terminated

    Raises:
        EncodeError: If a segment references a point that does not exist
    """
    n_points = len(mesh.points)
    for j, seg in enumerate(mesh.segments):
        for node in (seg.n1, seg.n2):
            if not 0 <= node < n_points:
                raise EncodeError(
                    f"Segment {j} references point {node}, "
                    f"but the model has {n_points} points",
                    artifact=".poly",
                    details={"segment": j, "point": node},
                )

    body = encode_node(mesh) + "\n"

    lines: List[str] = [f"{len(mesh.segments)} 1"]
    for j, seg in enumerate(mesh.segments):
        lines.append(
            f"{j + FIRST_INDEX} {seg.n1 + FIRST_INDEX} "
            f"{seg.n2 + FIRST_INDEX} {seg.marker}"
        )
    body += "\n".join(lines) + "\n\n"

    lines = [f"{len(mesh.holes)}"]
    for h, hole in enumerate(mesh.holes):
        lines.append(f"{h + FIRST_INDEX} {_coord(hole.x)} {_coord(hole.y)}")
    body += "\n".join(lines) + "\n"

    if mesh.regions:
        lines = [f"{len(mesh.regions)}"]
        for r, region in enumerate(mesh.regions):
            line = (
                f"{r + FIRST_INDEX} {_coord(region.x)} {_coord(region.y)} "
                f"{region.marker}"
            )
            if region.max_area is not None:
                line += f" {_coord(region.max_area)}"
            lines.append(line)
        body += "\n".join(lines) + "\n"

    return body
