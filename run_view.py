"""View-model for the interactive run panel."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from config import ReportConfig
from form_extraction import FormSnapshots, resolve_forms, summary_items
from formatting import PLACEHOLDER, format_count, format_currency, format_duration, format_percent
from html_converter import MarkdownConverter
from json_values import safe_stringify
from models import RecommendationView, RunRecord, RunStatus, SummaryItem, coerce_run
from recommendations import build_recommendation_views
from response_normalization import briefing_markdown, normalize_run_response
from run_stats import DiagnosticStats

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    RunStatus.PENDING: "Queued",
    RunStatus.RUNNING: "Running",
    RunStatus.SUCCESS: "Success",
    RunStatus.ERROR: "Error",
    RunStatus.BLOCKED: "Review",
}

PROGRESS_MESSAGE = "Run in progress. The timeline below refreshes automatically."
EMPTY_MESSAGE = "Result available in the panel."


class BodyKind(str, Enum):
    PROGRESS = "progress"
    STRUCTURED = "structured"
    MARKDOWN = "markdown"
    EMPTY = "empty"


@dataclass
class RunHeader:
    short_id: str
    agent: str
    status: RunStatus
    status_label: str
    in_progress: bool
    duration: Optional[str] = None
    cost: Optional[str] = None


@dataclass
class PitchDelivery:
    deck_links: List[Dict[str, str]]
    copy_blocks: List[Dict[str, str]]


@dataclass
class StructuredPanel:
    summary_items: List[SummaryItem] = field(default_factory=list)
    summary_subtitle: str = ""
    summary_details: List[Tuple[str, str]] = field(default_factory=list)
    diagnostic_pills: List[str] = field(default_factory=list)
    recommendations: List[RecommendationView] = field(default_factory=list)
    pitch_delivery: Optional[PitchDelivery] = None
    agent_state_json: Optional[str] = None
    briefing_html: Optional[str] = None
    raw_json: Optional[str] = None

    @property
    def show_summary(self) -> bool:
        return bool(self.summary_items) and self.briefing_html is None


@dataclass
class RunView:
    header: RunHeader
    body_kind: BodyKind
    trace_id: str
    structured: Optional[StructuredPanel] = None
    markdown_html: Optional[str] = None
    message: Optional[str] = None


def _summary_details(forms: FormSnapshots, variant: Optional[str]) -> List[Tuple[str, str]]:
    details: List[Tuple[str, Optional[str]]] = []
    if variant == "campaign":
        campaign = forms.campaign
        details = [
            ("Launch", campaign.launch_date),
            ("Milestones", campaign.deadline),
            ("Channels", ", ".join(campaign.channels) if campaign.channels else None),
            ("Tone notes", campaign.tone_notes),
            ("Notes", campaign.notes),
        ]
    elif variant == "journey":
        details = [
            ("Current tools", forms.journey.current_tools),
            ("Recent events", forms.journey.recent_events),
        ]
    return [(label, value) for label, value in details if value]


def _diagnostic_pills(diagnostic: DiagnosticStats) -> List[str]:
    if not diagnostic.present:
        return []
    return [
        f"Previous runs: {format_count(diagnostic.total_prev_runs)}",
        f"Exploration: {format_percent(diagnostic.exploration_pct)} • "
        f"Exploitation: {format_percent(diagnostic.exploitation_pct)}",
        f"Adopted filtered: {format_count(diagnostic.adopted_filtered)}",
        f"Rejected filtered: {format_count(diagnostic.rejected_filtered)}",
    ]


def build_structured_panel(
    run: RunRecord,
    structured: Dict[str, Any],
    memory: Any = None,
    converter: Optional[MarkdownConverter] = None,
) -> StructuredPanel:
    converter = converter or MarkdownConverter()
    forms = resolve_forms(structured, run.request)
    items, subtitle = summary_items(forms, run.agent)
    briefing = briefing_markdown(structured)
    recommendations = build_recommendation_views(structured, memory)

    agent_state = structured.get("agentState")
    pitch_delivery = None
    if (run.agent or "").lower() == ReportConfig.PITCH_AGENT:
        pitch_delivery = PitchDelivery(
            deck_links=[
                {"label": "Generate deck → Figma", "url": ReportConfig.PITCH_FIGMA_URL},
                {"label": "Generate deck → Canva", "url": ReportConfig.PITCH_CANVA_URL},
            ],
            copy_blocks=[dict(block) for block in ReportConfig.PITCH_COPY_BLOCKS],
        )

    panel = StructuredPanel(
        summary_items=items,
        summary_subtitle=subtitle,
        summary_details=_summary_details(forms, forms.summary_variant(run.agent)),
        diagnostic_pills=_diagnostic_pills(DiagnosticStats.from_payload(structured.get("diagnostico"))),
        recommendations=recommendations,
        pitch_delivery=pitch_delivery,
        agent_state_json=safe_stringify(agent_state) if isinstance(agent_state, dict) else None,
        briefing_html=converter.convert(briefing) if briefing else None,
    )
    if not recommendations and briefing is None and forms.is_empty():
        panel.raw_json = safe_stringify(structured)
    return panel


def build_run_view(run: Union[RunRecord, Mapping[str, Any]], memory: Any = None) -> RunView:
    record = coerce_run(run)
    header = RunHeader(
        short_id=record.short_id,
        agent=record.agent,
        status=record.status,
        status_label=STATUS_LABELS.get(record.status, STATUS_LABELS[RunStatus.SUCCESS]),
        in_progress=record.in_progress,
        duration=format_duration(record.took_ms) if record.took_ms is not None else None,
        cost=format_currency(record.cost_cents) if record.cost_cents is not None else None,
    )
    trace_id = record.trace_id or PLACEHOLDER

    if record.in_progress:
        return RunView(header=header, body_kind=BodyKind.PROGRESS, trace_id=trace_id, message=PROGRESS_MESSAGE)

    normalized = normalize_run_response(record.response)
    if normalized.structured:
        panel = build_structured_panel(record, normalized.structured, memory)
        return RunView(header=header, body_kind=BodyKind.STRUCTURED, trace_id=trace_id, structured=panel)
    if normalized.text:
        html = MarkdownConverter().convert(normalized.text)
        return RunView(header=header, body_kind=BodyKind.MARKDOWN, trace_id=trace_id, markdown_html=html)
    logger.debug("Run %s has neither structured output nor text", record.id)
    return RunView(header=header, body_kind=BodyKind.EMPTY, trace_id=trace_id, message=EMPTY_MESSAGE)


__all__ = [
    "STATUS_LABELS",
    "BodyKind",
    "RunHeader",
    "PitchDelivery",
    "StructuredPanel",
    "RunView",
    "build_structured_panel",
    "build_run_view",
]
