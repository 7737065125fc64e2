"""
Codecs for triangle's plain-text file dialects.

- encoders: .node and .poly input files
- decoders: .node, .poly and .ele output files
- sanitize: comment and blank-line removal shared by the decoders
"""

from trianglekit.io.decoders import (
    decode_ele,
    decode_node,
    decode_poly,
    read_ele_file,
    read_node_file,
    read_poly_file,
)
from trianglekit.io.encoders import encode_node, encode_poly
from trianglekit.io.sanitize import strip_comments

__all__ = [
    "encode_node",
    "encode_poly",
    "decode_node",
    "decode_poly",
    "decode_ele",
    "read_node_file",
    "read_poly_file",
    "read_ele_file",
    "strip_comments",
]
