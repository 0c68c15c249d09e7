"""Stripping of characters that must never reach raw SQL text.

Only used where a string is interpolated into the statement instead of being
bound: ``ORDER BY`` field names and free-text search terms.
"""
from __future__ import annotations

import re

_SPECIAL_SYMBOLS = re.compile(r"""[\][}{!\\<|>,"#&*+?`$)(^%~':;№=]""")


def remove_special_symbols(text: str) -> str:
    """Remove bracket, quote and punctuation symbols, then trim whitespace.

    >>> remove_special_symbols("  first_name; DROP TABLE users --  ")
    'first_name DROP TABLE users --'
    """
    return _SPECIAL_SYMBOLS.sub("", text).strip()
