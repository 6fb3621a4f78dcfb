"""Renderer registry."""

from __future__ import annotations

from typing import List

from .base import BaseRenderer


def _normalized(name: str) -> str:
    return (name or "").strip().lower()


def get_renderer(name: str) -> BaseRenderer:
    normalized = _normalized(name)
    if normalized in {"report_html", "html"}:
        from .report_html import HtmlReportRenderer

        return HtmlReportRenderer()
    if normalized in {"json_export", "json"}:
        from .json_export import JsonExportRenderer

        return JsonExportRenderer()
    raise ValueError(f"Unknown renderer '{name}'")


def available_renderers() -> List[str]:
    return ["report_html", "json_export"]
