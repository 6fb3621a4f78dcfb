"""Helpers for weakly typed JSON values produced by agents."""

from __future__ import annotations

import json
import logging
import math
import re
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n([\s\S]*?)```$", re.IGNORECASE)

Number = Union[int, float]


class JsonKind(str, Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    OTHER = "other"


def json_kind(value: Any) -> JsonKind:
    # bool is checked before numbers: True must never count as 1
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    return JsonKind.OTHER


def extract_json_candidate(text: str) -> Optional[str]:
    """Return the ``{...}`` span of ``text``, unwrapping a fenced block first."""

    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    fence = _FENCE_RE.match(trimmed)
    if fence:
        trimmed = fence.group(1).strip()
    start = trimmed.find("{")
    end = trimmed.rfind("}")
    if start == -1 or end <= start:
        return None
    return trimmed[start:end + 1]


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {token}")


def _finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range {token}")
    return value


def safe_parse_json(text: Optional[str]) -> Optional[Dict[str, Any]]:
    if not text:
        return None
    try:
        parsed = json.loads(text, parse_float=_finite_float, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        logger.debug("Embedded JSON rejected: %s", exc)
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_embedded_json(text: str) -> Optional[Dict[str, Any]]:
    return safe_parse_json(extract_json_candidate(text))


def safe_stringify(value: Any, fallback: Optional[str] = None) -> str:
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError) as exc:
        logger.debug("Value could not be serialised to JSON: %s", exc)
        return fallback if fallback is not None else str(value)


def json_compatible(value: Any) -> Any:
    """Plain JSON data for ``value``; its repr when it cannot be serialised."""
    try:
        return json.loads(json.dumps(value, ensure_ascii=False, default=str))
    except (TypeError, ValueError, RecursionError) as exc:
        logger.debug("Value exported as repr: %s", exc)
    try:
        return repr(value)
    except RecursionError:
        return f"<unserialisable {type(value).__name__}>"


def finite_number(value: Any) -> Optional[Number]:
    if json_kind(value) is not JsonKind.NUMBER:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def coerce_count(value: Any) -> Optional[Number]:
    """Loose count used by the stats blocks: numbers, numeric strings, list lengths."""

    kind = json_kind(value)
    if kind is JsonKind.NUMBER:
        return finite_number(value)
    if kind is JsonKind.ARRAY:
        return len(value)
    if kind is JsonKind.STRING:
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(parsed):
            return None
        return int(parsed) if parsed.is_integer() else parsed
    return None


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def first_string(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value
    return None


__all__ = [
    "JsonKind",
    "json_kind",
    "extract_json_candidate",
    "safe_parse_json",
    "parse_embedded_json",
    "safe_stringify",
    "json_compatible",
    "finite_number",
    "coerce_count",
    "as_dict",
    "first_string",
]
