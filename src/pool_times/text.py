"""Whitespace normalization shared by every extraction step."""

import re
from typing import Any

_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: Any = None) -> str:
    """Collapse whitespace runs to single spaces and trim.

    None becomes "", other non-strings are stringified first.
    normalize_text(normalize_text(x)) == normalize_text(x).
    """
    if value is None:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip()
