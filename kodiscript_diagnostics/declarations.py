"""
Declaration collection.

One forward pass over the raw lines of a file, collecting every identifier
bound by ``let <name> =`` or listed as a parameter of a ``fn(...)`` literal.
The resulting set is file-global: no block or function nesting is modelled,
so a declaration anywhere in the file covers every use of that name.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Set

logger = logging.getLogger(__name__)

# Matches: let total =
_LET_RE = re.compile(r"\blet\s+([A-Za-z_]\w*)\s*=", re.ASCII)

# Matches: fn(a, b)  /  fn (x)  /  fn()
_FN_PARAMS_RE = re.compile(r"\bfn\s*\(([^)]*)\)", re.ASCII)

# Leading identifier of one parameter, tolerating "name: Type" annotations
_PARAM_NAME_RE = re.compile(r"^([A-Za-z_]\w*)", re.ASCII)


def _params(param_list: str) -> Iterable[str]:
    for raw in param_list.split(","):
        param = raw.strip()
        if not param:
            continue
        match = _PARAM_NAME_RE.match(param)
        if match:
            yield match.group(1)


def collect_declarations(lines: Iterable[str]) -> Set[str]:
    """Return the set of names declared anywhere in ``lines``."""
    declared: Set[str] = set()
    for line in lines:
        for match in _LET_RE.finditer(line):
            declared.add(match.group(1))
        for match in _FN_PARAMS_RE.finditer(line):
            declared.update(_params(match.group(1)))
    logger.debug("collected %d declared names", len(declared))
    return declared
