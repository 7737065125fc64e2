"""
Tests for .node and .poly encoding.
"""

import pytest

from trianglekit.core.exceptions import EncodeError
from trianglekit.core.model import Point, Region, Segment, Triangulation
from trianglekit.io.encoders import encode_node, encode_poly


class TestEncodeNode:
    """Tests for encode_node."""

    def test_header(self, spiral_mesh):
        """Header declares count, 2 dimensions, no attributes, markers."""
        lines = encode_node(spiral_mesh).split("\n")
        assert lines[0] == "15 2 0 1"

    def test_one_based_lines(self, spiral_mesh):
        """Each point is written with its 1-based number and marker."""
        lines = encode_node(spiral_mesh).split("\n")
        assert lines[1] == "1 0.0000000000000e+00 0.0000000000000e+00 0"
        assert lines[2] == "2 -4.1600000000000e-01 9.0900000000000e-01 0"
        assert lines[8] == "8 1.4500000000000e+00 -2.2100000000000e+00 4"
        assert lines[15].startswith("15 ")

    def test_fourteen_significant_digits(self):
        """Coordinates keep 14 significant digits."""
        mesh = Triangulation(points=[Point(1.0 / 3.0, 123456.78901234, 7)])
        line = encode_node(mesh).split("\n")[1]
        assert line == "1 3.3333333333333e-01 1.2345678901234e+05 7"

    def test_empty_model(self):
        """An empty model still gets a header."""
        assert encode_node(Triangulation()) == "0 2 0 1\n"

    def test_newline_terminated(self, spiral_mesh):
        """Content ends with a newline."""
        assert encode_node(spiral_mesh).endswith("\n")


class TestEncodePoly:
    """Tests for encode_poly."""

    def test_box_section_headers(self, box_mesh):
        """The box model gives the documented section headers."""
        lines = encode_poly(box_mesh).split("\n")
        assert lines[0] == "8 2 0 1"
        assert lines[9] == ""
        assert lines[10] == "5 1"
        assert lines[16] == ""
        assert lines[17] == "1"
        assert lines[18] == "1 1.5000000000000e+00 1.5000000000000e+00"
        assert lines[19:] == [""]

    def test_point_section_matches_node_encoding(self, box_mesh):
        """The leading section is the .node encoding of the same model."""
        assert encode_poly(box_mesh).startswith(encode_node(box_mesh) + "\n")

    def test_segment_indices_are_one_based(self, box_mesh):
        """Every segment is written as <j+1> <n1+1> <n2+1> <marker>."""
        lines = encode_poly(box_mesh).split("\n")
        segment_lines = lines[11:16]
        for j, seg in enumerate(box_mesh.segments):
            assert segment_lines[j] == f"{j + 1} {seg.n1 + 1} {seg.n2 + 1} {seg.marker}"
        assert segment_lines[0] == "1 1 2 5"
        assert segment_lines[3] == "4 8 6 10"

    def test_model_not_modified(self, box_mesh):
        """Encoding never stores converted indices in the model."""
        before = box_mesh.copy()
        encode_poly(box_mesh)
        assert box_mesh == before

    def test_no_region_block_without_regions(self, diamond_mesh):
        """Region section is omitted when the model has none."""
        content = encode_poly(diamond_mesh)
        assert content.endswith("\n\n0\n")

    def test_region_block(self, nested_diamonds_mesh):
        """Regions are written with 1-based numbers and markers."""
        lines = encode_poly(nested_diamonds_mesh).rstrip("\n").split("\n")
        assert lines[-3] == "2"
        assert lines[-2] == "1 5.0000000000000e-01 1.0000000000000e-01 2"
        assert lines[-1] == "2 0.0000000000000e+00 -1.8000000000000e+00 9"

    def test_region_max_area(self):
        """A region area constraint adds a fifth column."""
        mesh = Triangulation(
            points=[Point(0, 0), Point(1, 0), Point(0, 1)],
            segments=[Segment(0, 1), Segment(1, 2), Segment(2, 0)],
            regions=[Region(0.2, 0.2, 3, max_area=0.05)],
        )
        last = encode_poly(mesh).rstrip("\n").split("\n")[-1]
        assert last == "1 2.0000000000000e-01 2.0000000000000e-01 3 5.0000000000000e-02"

    @pytest.mark.parametrize("bad", [Segment(0, 8), Segment(-1, 2)])
    def test_invalid_segment_index(self, box_mesh, bad):
        """A segment pointing outside the point list cannot be encoded."""
        box_mesh.segments.append(bad)
        with pytest.raises(EncodeError) as excinfo:
            encode_poly(box_mesh)
        assert excinfo.value.artifact == ".poly"
        assert excinfo.value.details["segment"] == 5
