"""Static name tables of the KodiScript language."""

from __future__ import annotations

from typing import FrozenSet

KEYWORDS: FrozenSet[str] = frozenset({
    "let", "if", "else", "return",
    "true", "false", "null",
    "and", "or", "not",
    "fn", "for", "in", "while",
})

NATIVE_FUNCTIONS: FrozenSet[str] = frozenset({
    # serialization
    "json", "parseJson",
    "base64Encode", "base64Decode",
    "urlEncode", "urlDecode",
    # conversion / output
    "toString", "toNumber", "print",
    # strings and collections
    "length", "substring", "upper", "lower", "trim",
    "split", "join", "keys", "values", "contains", "replace",
    # math
    "abs", "round", "floor", "ceil",
})
