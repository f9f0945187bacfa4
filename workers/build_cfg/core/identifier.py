"""
Identifier validation for predicate names.

Names follow the cfg identifier grammar accepted in directives:
ASCII letters, digits and underscore, not starting with a digit.
"""
from __future__ import annotations

import re

from build_cfg.core.errors import InvalidName

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_valid_name(candidate: object) -> bool:
    """Return True if *candidate* is a legal predicate name."""
    return isinstance(candidate, str) and _IDENT_RE.fullmatch(candidate) is not None


def validate_name(candidate: object) -> str:
    """
    Validate a proposed predicate name.

    Returns the name unchanged, or raises ``InvalidName`` for empty
    strings, whitespace, punctuation, a leading digit, or non-str input.
    """
    if not is_valid_name(candidate):
        raise InvalidName(candidate)
    return candidate  # type: ignore[return-value]
