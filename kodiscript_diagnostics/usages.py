"""
Usage scanning.

Second pass of the semantic check.  Every identifier token of a scrubbed
line is classified as a declaration site, a property access, a call target,
or a plain use; plain uses of names that are neither keywords, natives nor
declared produce one ``Undefined variable`` warning per distinct name.

The scan is intentionally unsound: it has no scopes, no declaration
ordering and no shadowing.  It is a lint layer over a syntactically valid
file, not a resolver.
"""

from __future__ import annotations

import logging
import re
from typing import AbstractSet, List, Optional, Sequence, Set

from kodiscript_diagnostics.diagnostics import (
    UNDEFINED_VARIABLE_ID,
    Diagnostic,
    Severity,
)
from kodiscript_diagnostics.language import KEYWORDS, NATIVE_FUNCTIONS
from kodiscript_diagnostics.scrubber import is_comment_line, scrub

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"\b([A-Za-z_]\w*)\b", re.ASCII)

# Text before the token ends with "let " → declaration site
_AFTER_LET_RE = re.compile(r"\blet\s+$", re.ASCII)

# Text before the token ends with "." or "?." → property access
_AFTER_DOT_RE = re.compile(r"\.\s*$")

# Text after the token starts with "(" → call target
_BEFORE_CALL_RE = re.compile(r"^\s*\(")


def _is_plain_use(line: str, start: int, end: int) -> bool:
    before = line[:start]
    if _AFTER_LET_RE.search(before):
        return False
    if _AFTER_DOT_RE.search(before):
        return False
    if _BEFORE_CALL_RE.match(line[end:]):
        return False
    return True


def scan_usages(
    lines: Sequence[str],
    declared: AbstractSet[str],
    *,
    keywords: AbstractSet[str] = KEYWORDS,
    natives: AbstractSet[str] = NATIVE_FUNCTIONS,
    reported: Optional[Set[str]] = None,
) -> List[Diagnostic]:
    """
    Report plain uses of unknown identifiers.

    ``declared`` must already hold every name declared in the file.  Names
    in ``reported`` are never reported again; the set is updated in place,
    and a fresh one is used when omitted.
    """
    if reported is None:
        reported = set()
    diagnostics: List[Diagnostic] = []

    for line_no, raw in enumerate(lines, start=1):
        if is_comment_line(raw):
            continue
        line = scrub(raw)
        for match in _IDENTIFIER_RE.finditer(line):
            name = match.group(1)
            if name in reported:
                continue
            if name in keywords or name in natives or name in declared:
                continue
            if not _is_plain_use(line, match.start(), match.end()):
                continue
            diagnostics.append(Diagnostic(
                line=line_no,
                column=match.start() + 1,
                message=f"Undefined variable '{name}'",
                severity=Severity.WARNING,
                error_id=UNDEFINED_VARIABLE_ID,
            ))
            reported.add(name)

    logger.debug("usage scan reported %d undefined names", len(diagnostics))
    return diagnostics
