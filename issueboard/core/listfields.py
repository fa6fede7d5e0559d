"""Encoding for list-valued issue fields (labels, attachments).

On the wire these travel as one comma-joined string. A comma or backslash that
belongs to an element is escaped with a backslash, so ``["a,b", "c"]`` becomes
``"a\\,b,c"``. Legacy unescaped strings such as ``"UI,Login"`` still decode to
``["UI", "Login"]``.
"""

from __future__ import annotations

from typing import Any, Iterable

SEPARATOR = ","
ESCAPE = "\\"

LIST_FIELDS = ("labels", "attachments")


def normalize_items(items: Iterable[Any]) -> list[str]:
    """Strip whitespace, drop blanks and duplicates, keep first-seen order."""

    seen: set[str] = set()
    cleaned: list[str] = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if not text or text in seen:
            continue
        seen.add(text)
        cleaned.append(text)
    return cleaned


def _escape(item: str) -> str:
    return item.replace(ESCAPE, ESCAPE * 2).replace(SEPARATOR, ESCAPE + SEPARATOR)


def _split_escaped(value: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    chars = iter(value)
    for char in chars:
        if char == ESCAPE:
            following = next(chars, None)
            if following is None:
                current.append(ESCAPE)
            elif following in (ESCAPE, SEPARATOR):
                current.append(following)
            else:
                current.append(ESCAPE)
                current.append(following)
        elif char == SEPARATOR:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def join_list(items: Iterable[Any] | None) -> str | None:
    """Encode ``items`` as a wire string; empty input encodes as ``None``."""

    if items is None:
        return None
    cleaned = normalize_items(items)
    if not cleaned:
        return None
    return SEPARATOR.join(_escape(item) for item in cleaned)


def split_list(value: Any) -> list[str]:
    """Decode a wire string (or accept an already-split sequence)."""

    if value is None:
        return []
    if isinstance(value, str):
        return normalize_items(_split_escaped(value))
    if isinstance(value, (list, tuple, set, frozenset)):
        return normalize_items(value)
    raise TypeError(f"expected a string or a list, got {type(value).__name__}")


__all__ = ["LIST_FIELDS", "join_list", "normalize_items", "split_list"]
