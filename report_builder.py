"""Facade: one call from a run record to every report artifact."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from models import RunRecord, coerce_run
from renderers import get_renderer
from renderers.context import ReportDocument, ReportMode, build_report_document
from response_normalization import NormalizedResponse, normalize_run_response

logger = logging.getLogger(__name__)


@dataclass
class ReportArtifacts:
    document: ReportDocument
    html: str
    json_export: str
    html_filename: str
    json_filename: str


def build_report(
    run: Union[RunRecord, Mapping[str, Any]],
    mode: Union[ReportMode, str] = ReportMode.STATIC,
    memory: Any = None,
    generated_at: Optional[datetime] = None,
    auto_print: bool = False,
) -> ReportArtifacts:
    """Render the HTML report and the raw JSON export for ``run``."""

    document = build_report_document(
        run,
        mode=mode,
        memory=memory,
        generated_at=generated_at,
        auto_print=auto_print,
    )
    html_renderer = get_renderer("report_html")
    json_renderer = get_renderer("json_export")
    artifacts = ReportArtifacts(
        document=document,
        html=html_renderer.render(document),
        json_export=json_renderer.render(document),
        html_filename=html_renderer.filename(document),
        json_filename=json_renderer.filename(document),
    )
    logger.info(f"Report built for run {document.run_id} ({document.mode.value})")
    return artifacts


def normalize_view(run: Union[RunRecord, Mapping[str, Any]]) -> NormalizedResponse:
    """Normalized ``{structured, text}`` pair for an interactive display."""
    return normalize_run_response(coerce_run(run).response)


__all__ = ["ReportArtifacts", "build_report", "normalize_view"]
