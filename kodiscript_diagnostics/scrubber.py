"""
Text scrubbing for line-oriented scans.

``scrub`` blanks string literals and trailing ``//`` comments with spaces so
later regex scans cannot misfire inside literals, while every remaining
character keeps its original column.

Strings are scrubbed before the comment marker is searched, so a ``//``
inside a literal never starts a comment.  Escapes are not interpreted: the
next matching quote always closes a literal (``"a\\"b"`` ends after ``a\\``).
"""

from __future__ import annotations

from typing import List

_QUOTES = ('"', "'")
_COMMENT = "//"


def scrub_strings(line: str) -> str:
    """Replace every quoted literal, quotes included, with spaces.

    An unterminated literal is blanked to the end of the line.
    """
    out: List[str] = []
    quote = None
    for ch in line:
        if quote is None:
            if ch in _QUOTES:
                quote = ch
                out.append(" ")
            else:
                out.append(ch)
        else:
            if ch == quote:
                quote = None
            out.append(" ")
    return "".join(out)


def strip_comment(line: str) -> str:
    """Blank everything from the first ``//`` to the end of the line."""
    idx = line.find(_COMMENT)
    if idx == -1:
        return line
    return line[:idx] + " " * (len(line) - idx)


def scrub(line: str) -> str:
    """Scrub strings, then comments.  The result has the same length."""
    return strip_comment(scrub_strings(line))


def is_comment_line(line: str) -> bool:
    return line.lstrip().startswith(_COMMENT)
