"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from trianglekit.core.model import Hole, Point, Region, Segment, Triangulation
from trianglekit.engine import TriangleEngine


class FakeEngine(TriangleEngine):
    """
    Engine double that records its calls and writes canned output files.

    Args:
        outputs: Mapping of file suffix (e.g. ``".1.node"``) to content
        status: Exit status returned by :meth:`run`
        stderr: Diagnostic text reported for every run
    """

    def __init__(
        self,
        outputs: dict[str, str] | None = None,
        status: int = 0,
        stderr: str = "",
    ):
        self.outputs = outputs or {}
        self.status = status
        self.stderr = stderr
        self.calls: list[dict] = []

    def run(self, workspace, basename, flags):
        workspace = Path(workspace)
        inputs = {
            p.name: p.read_text() for p in workspace.iterdir() if p.is_file()
        }
        self.calls.append(
            {
                "workspace": workspace,
                "basename": basename,
                "flags": flags,
                "inputs": inputs,
            }
        )
        for suffix, content in self.outputs.items():
            (workspace / f"{basename}{suffix}").write_text(content)
        self.last_stderr = self.stderr
        return self.status


# Output triangle writes for a unit square point cloud with -c.
SQUARE_CLOUD_OUTPUT = {
    ".1.node": (
        "4  2  0  1\n"
        "   1    0  0    1\n"
        "   2    1  0    1\n"
        "   3    1  1    1\n"
        "   4    0  1    1\n"
        "# Generated by triangle -cqY mesh.node\n"
    ),
    ".1.ele": (
        "2  3  0\n"
        "   1       3     4     1\n"
        "   2       1     2     3\n"
        "# Generated by triangle -cqY mesh.node\n"
    ),
}

SQUARE_CLOUD_HULL = (
    "0  2  0  1\n"
    "4  1\n"
    "   1       1     2     1\n"
    "   2       2     3     1\n"
    "   3       3     4     1\n"
    "   4       4     1     1\n"
    "0\n"
    "# Generated by triangle -cqY mesh.node\n"
)

# Output for the diamond ("square") topology with -pqa0.2AYs, no Steiner points.
DIAMOND_OUTPUT = {
    ".1.node": (
        "5  2  0  1\n"
        "   1    1  0    2\n"
        "   2    0  1    2\n"
        "   3    -1  0    10\n"
        "   4    0  -1    5\n"
        "   5    0  0    0\n"
        "# Generated by triangle -pqa0.2AYs mesh.poly\n"
    ),
    ".1.poly": (
        "0  2  0  1\n"
        "4  1\n"
        "   1       1     2     2\n"
        "   2       2     3     0\n"
        "   3       3     4     5\n"
        "   4       4     1     0\n"
        "0\n"
        "# Generated by triangle -pqa0.2AYs mesh.poly\n"
    ),
    ".1.ele": (
        "4  3  1\n"
        "   1       5     1     2    0\n"
        "   2       5     2     3    0\n"
        "   3       5     3     4    0\n"
        "   4       5     4     1    0\n"
        "# Generated by triangle -pqa0.2AYs mesh.poly\n"
    ),
}


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_engine_factory():
    """Build FakeEngine instances."""
    return FakeEngine


@pytest.fixture
def square_cloud_output():
    """Canned triangle output for the unit square point cloud."""
    return dict(SQUARE_CLOUD_OUTPUT)


@pytest.fixture
def square_cloud_hull():
    """Canned .1.poly holding the convex hull of the unit square."""
    return SQUARE_CLOUD_HULL


@pytest.fixture
def diamond_output():
    """Canned triangle output for the diamond topology."""
    return dict(DIAMOND_OUTPUT)


@pytest.fixture
def square_cloud():
    """Unit square point cloud, all markers zero."""
    return Triangulation(
        points=[Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)],
    )


@pytest.fixture
def spiral_mesh():
    """Point cloud from https://www.cs.cmu.edu/~quake/spiral.node."""
    return Triangulation(
        points=[
            Point(0, 0, 0),
            Point(-0.416, 0.909, 0),
            Point(-1.35, 0.436, 0),
            Point(-1.64, -0.549, 0),
            Point(-1.31, -1.51, 0),
            Point(-0.532, -2.17, 0),
            Point(0.454, -2.41, 0),
            Point(1.45, -2.21, 4),
            Point(2.29, -1.66, 0),
            Point(2.88, -0.838, 0),
            Point(3.16, 0.131, 0),
            Point(3.12, 1.14, 0),
            Point(2.77, 2.08, 0),
            Point(2.16, 2.89, 0),
            Point(1.36, 3.49, 0),
        ],
    )


@pytest.fixture
def box_mesh():
    """Box with a square hole, from https://www.cs.cmu.edu/~quake/box.poly."""
    return Triangulation(
        points=[
            Point(0, 0, 0),
            Point(0, 3, 0),
            Point(3, 0, 0),
            Point(3, 3, 33),
            Point(1, 1, 0),
            Point(1, 2, 0),
            Point(2, 1, 0),
            Point(2, 2, 0),
        ],
        segments=[
            Segment(0, 1, 5),
            Segment(4, 6, 0),
            Segment(6, 7, 0),
            Segment(7, 5, 10),
            Segment(5, 4, 0),
        ],
        holes=[Hole(1.5, 1.5)],
    )


@pytest.fixture
def diamond_mesh():
    """Diamond outline with a center vertex."""
    return Triangulation(
        points=[
            Point(1, 0, 0),
            Point(0, 1, 0),
            Point(-1, 0, 10),
            Point(0, -1, 0),
            Point(0, 0, 0),
        ],
        segments=[
            Segment(0, 1, 2),
            Segment(1, 2, 0),
            Segment(2, 3, 5),
            Segment(3, 0, 0),
        ],
    )


@pytest.fixture
def nested_diamonds_mesh():
    """Diamond inside a diamond with two region seeds."""
    return Triangulation(
        points=[
            Point(1, 0, 0),
            Point(0, 1, 0),
            Point(-1, 0, 11),
            Point(0, -1, 0),
            Point(0, 0, 0),
            Point(2, 0, 0),
            Point(0, 2, 20),
            Point(-2, 0, 0),
            Point(0, -2, 0),
        ],
        segments=[
            Segment(0, 1, 0),
            Segment(1, 2, 0),
            Segment(2, 3, 0),
            Segment(3, 0, 0),
            Segment(5, 6, 5),
            Segment(6, 7, 0),
            Segment(7, 8, 0),
            Segment(8, 5, 0),
        ],
        regions=[
            Region(0.5, 0.1, 2),
            Region(0, -1.8, 9),
        ],
    )
