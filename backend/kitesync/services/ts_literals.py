from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from typing import Any

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_TEMPLATE_TRIGGERS = ('"', "'", "\n", "<")


def quote_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def encode_string(value: str) -> str:
    """Encode ``value`` as a TypeScript string literal.

    Text carrying quotes, newlines or markup is written as a template literal so
    the generated file stays readable. Anything with a backtick falls back to a
    double-quoted literal, since template literals are never nested.
    """
    if "`" in value:
        return quote_string(value)
    if any(token in value for token in _TEMPLATE_TRIGGERS):
        escaped = value.replace("\\", "\\\\").replace("${", "\\${")
        return f"`{escaped}`"
    return quote_string(value)


def format_number(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite number cannot be written to source: {value!r}")
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    raise ValueError(f"Expected a number, got '{type(value).__name__}'")


def _format_key(key: str) -> str:
    return key if _IDENTIFIER_RE.match(key) else quote_string(key)


def _format_style_value(key: str, value: Any) -> str:
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, (bool, int, float)):
        return format_number(value)
    raise ValueError(f"Style value for '{key}' must be a string or number, got '{type(value).__name__}'")


def encode_style(style: Mapping[str, Any]) -> str:
    entries = [(key, value) for key, value in style.items() if value is not None]
    if not entries:
        return "{}"
    inner = ", ".join(f"{_format_key(key)}: {_format_style_value(key, value)}" for key, value in entries)
    return f"{{ {inner} }}"


def has_style_entries(style: Mapping[str, Any] | None) -> bool:
    if not style:
        return False
    return any(value is not None for value in style.values())
