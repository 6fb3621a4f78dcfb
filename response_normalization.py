"""Turn raw agent responses into a canonical ``(structured, text)`` pair."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from config import ReportConfig
from json_values import JsonKind, json_kind, parse_embedded_json, safe_stringify
from payload_locator import find_recommendation_payload

logger = logging.getLogger(__name__)


@dataclass
class NormalizedResponse:
    structured: Optional[Dict[str, Any]]
    text: str

    @property
    def has_structured(self) -> bool:
        return bool(self.structured)


def _normalize_object(raw: Dict[str, Any]) -> NormalizedResponse:
    payload = find_recommendation_payload(raw)
    structured = dict(raw)
    if payload is not None and payload is not raw:
        structured.update(payload)
    return NormalizedResponse(structured=structured, text=safe_stringify(raw))


def _normalize(raw: Any, depth: int) -> NormalizedResponse:
    kind = json_kind(raw)

    if kind is JsonKind.NULL:
        return NormalizedResponse(structured={}, text="")

    if kind is JsonKind.STRING:
        parsed = parse_embedded_json(raw)
        if parsed is None:
            return NormalizedResponse(structured=None, text=raw)
        nested = _normalize(parsed, depth + 1)
        return NormalizedResponse(structured=nested.structured, text=safe_stringify(parsed, raw))

    if kind is JsonKind.OBJECT:
        output_text = raw.get(ReportConfig.OUTPUT_TEXT_FIELD)
        if isinstance(output_text, str) and depth < ReportConfig.MAX_SEARCH_DEPTH:
            nested = _normalize(output_text, depth + 1)
            if nested.structured:
                merged = dict(nested.structured)
                merged.update(raw)
                return NormalizedResponse(structured=merged, text=nested.text)
        return _normalize_object(raw)

    if kind is JsonKind.ARRAY:
        return NormalizedResponse(structured=None, text=safe_stringify(list(raw)))

    return NormalizedResponse(structured=None, text=str(raw))


def normalize_run_response(raw: Any) -> NormalizedResponse:
    """Normalize any response shape; never raises."""

    try:
        return _normalize(raw, 0)
    except (RecursionError, ValueError, TypeError) as exc:
        logger.debug("Response normalization fell back to text: %s", exc)
        text = raw if isinstance(raw, str) else safe_stringify(raw, fallback="")
        return NormalizedResponse(structured=None, text=text)


def briefing_markdown(structured: Optional[Dict[str, Any]]) -> Optional[str]:
    if not isinstance(structured, dict):
        return None
    # agents still emit the legacy misspelling
    for key in ("breafing_markdown", "briefing_markdown"):
        value = structured.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def recommendation_entries(structured: Optional[Dict[str, Any]]) -> List[Any]:
    if not isinstance(structured, dict):
        return []
    entries = structured.get(ReportConfig.RECOMMENDATIONS_FIELD)
    return list(entries) if isinstance(entries, list) else []


__all__ = [
    "NormalizedResponse",
    "normalize_run_response",
    "briefing_markdown",
    "recommendation_entries",
]
