"""Helpers for safe diagnostic logging.

Identifiers and stores are arbitrary user objects. Their ``repr`` can be
huge or can raise, so everything that ends up in a log message goes through
:func:`describe` first.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def describe(value: Any, *, max_length: int = 200) -> str:
    """Return a bounded ``repr`` of *value* suitable for log messages."""
    try:
        text = repr(value)
    except Exception:  # noqa: BLE001
        text = f"<{type(value).__name__} at {id(value):#x}>"
    if max_length > 0 and len(text) > max_length:
        return f"{text[:max_length]}…<truncated>"
    return text


def describe_all(values: Iterable[Any], *, max_length: int = 200) -> str:
    """Render several values as a bracketed, comma separated list."""
    return "[" + ", ".join(describe(v, max_length=max_length) for v in values) + "]"
