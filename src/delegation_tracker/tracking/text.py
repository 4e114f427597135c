"""Fold union-shaped tool payloads into plain text."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _fragment(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        if "text" not in item:
            return ""
        value = item["text"]
    elif hasattr(item, "text"):
        value = getattr(item, "text")
    else:
        return ""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def extract_text(content: Any) -> str:
    """Return the trimmed text carried by ``content``.

    ``content`` may be a bare string, a single object exposing ``text`` (a
    mapping key or an attribute, e.g. an SDK ``TextBlock``), or a list/tuple of
    such items. List items are joined with single spaces; items that carry no
    text are skipped. Any other shape yields an empty string.
    """

    if isinstance(content, (list, tuple)):
        fragments = (_fragment(entry).strip() for entry in content)
        return " ".join(fragment for fragment in fragments if fragment)
    return _fragment(content).strip()


__all__ = ["extract_text"]
