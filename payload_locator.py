"""Depth-bounded search for the recommendation-bearing part of an agent response."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Optional

from config import ReportConfig
from json_values import JsonKind, json_kind, parse_embedded_json

logger = logging.getLogger(__name__)


class RecommendationLocator:
    """Visitor over the JSON kinds with an explicit depth counter.

    Rules on an object node, first match wins:
    1. the node carries a list under the recommendations field;
    2. its ``optimized`` sub-object carries that list;
    3. each ``outputs`` entry (its ``data`` when present);
    4. ``result``, ``metadata``, the elements of a list ``data``, then every
       other value in declaration order.
    Strings are searched through their embedded JSON, arrays element by element.
    """

    def __init__(self, max_depth: Optional[int] = None, field: Optional[str] = None) -> None:
        self.max_depth = ReportConfig.MAX_SEARCH_DEPTH if max_depth is None else max_depth
        self.field = field or ReportConfig.RECOMMENDATIONS_FIELD
        self._handlers: Dict[JsonKind, Callable[[Any, int], Optional[Dict[str, Any]]]] = {
            JsonKind.OBJECT: self._visit_object,
            JsonKind.ARRAY: self._visit_array,
            JsonKind.STRING: self._visit_string,
        }

    def locate(self, value: Any, depth: int = 0) -> Optional[Dict[str, Any]]:
        if depth > self.max_depth:
            return None
        handler = self._handlers.get(json_kind(value))
        if handler is None:
            return None
        return handler(value, depth)

    def carries_recommendations(self, node: Any) -> bool:
        return isinstance(node, dict) and isinstance(node.get(self.field), list)

    def _first(self, values: Iterable[Any], depth: int) -> Optional[Dict[str, Any]]:
        for value in values:
            found = self.locate(value, depth)
            if found is not None:
                return found
        return None

    def _visit_string(self, value: str, depth: int) -> Optional[Dict[str, Any]]:
        parsed = parse_embedded_json(value)
        if parsed is None:
            return None
        return self.locate(parsed, depth + 1)

    def _visit_array(self, value: Any, depth: int) -> Optional[Dict[str, Any]]:
        return self._first(value, depth + 1)

    def _visit_object(self, node: Dict[str, Any], depth: int) -> Optional[Dict[str, Any]]:
        if self.carries_recommendations(node):
            return node

        optimized = node.get("optimized")
        if self.carries_recommendations(optimized):
            return optimized

        outputs = node.get("outputs")
        if isinstance(outputs, list):
            targets = [
                entry.get("data") if isinstance(entry, dict) and entry.get("data") is not None else entry
                for entry in outputs
            ]
            found = self._first(targets, depth + 1)
            if found is not None:
                return found

        probed = set()
        candidates = []
        for key in ("result", "metadata"):
            if isinstance(node.get(key), dict):
                probed.add(key)
                candidates.append(node[key])
        if isinstance(node.get("data"), list):
            probed.add("data")
            candidates.extend(node["data"])
        candidates.extend(value for key, value in node.items() if key not in probed)
        return self._first(candidates, depth + 1)


def find_recommendation_payload(value: Any, max_depth: Optional[int] = None) -> Optional[Dict[str, Any]]:
    found = RecommendationLocator(max_depth=max_depth).locate(value)
    if found is None:
        logger.debug("No recommendation payload located")
    return found


__all__ = ["RecommendationLocator", "find_recommendation_payload"]
