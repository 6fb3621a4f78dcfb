"""Raw run record export."""

from __future__ import annotations

from json_values import safe_stringify

from .base import BaseRenderer
from .context import ReportDocument


class JsonExportRenderer(BaseRenderer):
    name = "json_export"
    media_type = "application/json"
    extension = "json"

    def render(self, document: ReportDocument) -> str:
        return safe_stringify(document.run.export_payload())
