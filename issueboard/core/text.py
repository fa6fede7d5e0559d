"""Free-text checks shared by the record service."""

from __future__ import annotations

import re
from typing import Any

from .errors import ValidationError

# C0 control characters other than tab, newline and carriage return. Neither
# workbooks nor most terminals can hold them.
CONTROL_CHARACTERS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def clean_text(field: str, value: Any) -> str | None:
    """Strip ``value``; blanks become ``None`` and control characters are rejected."""

    if value is None:
        return None
    text = str(value).strip()
    if CONTROL_CHARACTERS_RE.search(text):
        raise ValidationError(f"{field} contains a control character", details={"field": field})
    return text or None


__all__ = ["CONTROL_CHARACTERS_RE", "clean_text"]
