"""
Comment and blank-line removal for triangle's plain-text files.

Every file triangle reads or writes may carry ``#`` comments (triangle itself
appends a ``# Generated by ...`` trailer). Decoders run their input through
:func:`strip_comments` first so they only ever see data lines.
"""

from typing import AnyStr


def strip_comments(content: AnyStr) -> AnyStr:
    """
    Remove ``#`` comments and blank lines from a file buffer.

    Everything from the first ``#`` on a line to the end of that line is
    dropped, then lines that are empty or whitespace-only are removed. The
    remaining lines keep their order and are joined with ``\\n``.

    Args:
        content: Raw file content, ``bytes`` or ``str``

    Returns:
        Sanitized content of the same type as the input
    """
    if isinstance(content, bytes):
        hash_, newline = b"#", b"\n"
    else:
        hash_, newline = "#", "\n"

    kept = []
    for line in content.splitlines():
        line = line.split(hash_, 1)[0]
        if line.strip():
            kept.append(line)
    return newline.join(kept)
