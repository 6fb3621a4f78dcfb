"""Helpers for building the shared run report document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from markupsafe import Markup

from config import ReportConfig
from form_extraction import (
    FormSnapshots,
    resolve_forms,
    signature_block,
    summary_definitions,
    summary_items,
)
from formatting import format_count, format_currency, format_duration, format_timestamp
from markdown_utils import extract_timeline_rows, find_section, parse_markdown_sections, split_section_content
from models import RecommendationView, RunRecord, SectionContent, TimelineRow, coerce_run
from recommendations import build_recommendation_views
from response_normalization import briefing_markdown, normalize_run_response
from run_stats import DiagnosticStats, MemoryStats, UsageStats
from structured_fallback import create_fallback_structured

from .templates import (
    CTA_TEMPLATE,
    DEFINITION_GRID_TEMPLATE,
    INSIGHTS_TEMPLATE,
    LINKS_TEMPLATE,
    MUTED_NOTICE_TEMPLATE,
    PARAGRAPHS_TEMPLATE,
    RECOMMENDATIONS_TABLE_TEMPLATE,
    SIGNATURE_TEMPLATE,
    SUMMARY_LIST_TEMPLATE,
    TIMELINE_TEMPLATE,
    render_markup,
)

logger = logging.getLogger(__name__)


class ReportMode(str, Enum):
    STATIC = "static"
    EDITABLE = "editable"


@dataclass
class ReportSection:
    key: str
    heading: Optional[str]
    body: Markup
    subtitle: Optional[str] = None
    css_class: str = ""


@dataclass
class ReportDocument:
    """Everything the HTML serializer needs; the run is kept for the JSON export."""

    run: RunRecord
    mode: ReportMode
    theme: Dict[str, str]
    title: str
    diagnostic_caption: str
    chips: List[str]
    badges: List[Dict[str, str]]
    metrics: List[Dict[str, str]]
    sections: List[ReportSection]
    footer_label: str
    footer_stamp: str
    generated_at: datetime
    auto_print: bool = False
    lang: str = field(default_factory=lambda: ReportConfig.DOCUMENT_LANG)

    @property
    def editable(self) -> bool:
        return self.mode is ReportMode.EDITABLE

    @property
    def run_id(self) -> str:
        return self.run.id

    @property
    def short_id(self) -> str:
        return self.run.short_id

    def section_keys(self) -> List[str]:
        return [section.key for section in self.sections]

    def section(self, key: str) -> Optional[ReportSection]:
        for section in self.sections:
            if section.key == key:
                return section
        return None


def resolve_theme(agent: str) -> Dict[str, str]:
    """Exact agent match, then keyword containment, then the default theme."""
    key = (agent or "").strip().lower()
    themes = ReportConfig.AGENT_THEMES
    if key in themes:
        return themes[key]
    for keyword, theme_key in ReportConfig.THEME_KEYWORDS:
        if keyword in key and theme_key in themes:
            return themes[theme_key]
    return themes["default"]


def timeline_progress(index: int, total: int) -> int:
    if total <= 0:
        return 10
    return min(100, max(10, round((index + 1) / total * 100)))


def _content_markup(content: SectionContent) -> Markup:
    return render_markup(PARAGRAPHS_TEMPLATE, paragraphs=content.paragraphs, bullets=content.bullets)


def _summary_section(
    briefing_sections: Dict[str, List[str]], forms: FormSnapshots, agent: str
) -> Optional[ReportSection]:
    items, subtitle = summary_items(forms, agent)
    content = split_section_content(find_section(briefing_sections, ReportConfig.SUMMARY_SECTION_TITLES))
    if not content.is_empty():
        body = _content_markup(content)
    elif items:
        body = render_markup(SUMMARY_LIST_TEMPLATE, items=items)
    else:
        definitions = summary_definitions(forms, agent)
        if not definitions:
            logger.debug("Summary section omitted: no briefing summary or form fields")
            return None
        body = render_markup(DEFINITION_GRID_TEMPLATE, entries=definitions)
    return ReportSection(key="summary", heading="Strategic summary", subtitle=subtitle, body=body)


def _signature_section(agent: str, forms: FormSnapshots) -> Optional[ReportSection]:
    block = signature_block(agent, forms)
    if block is None:
        return None
    return ReportSection(
        key="signature",
        heading=block.title,
        subtitle=block.subtitle,
        body=render_markup(SIGNATURE_TEMPLATE, entries=block.entries, variant=block.variant),
    )


def _recommendations_section(views: List[RecommendationView]) -> ReportSection:
    if not views:
        return ReportSection(
            key="recommendations",
            heading=None,
            body=render_markup(MUTED_NOTICE_TEMPLATE, message="No structured recommendations available."),
        )
    return ReportSection(
        key="recommendations",
        heading="Prioritized recommendations",
        subtitle="Table ordered by priority, score and next steps.",
        body=render_markup(RECOMMENDATIONS_TABLE_TEMPLATE, recommendations=views),
    )


def _timeline_section(rows: List[TimelineRow]) -> Optional[ReportSection]:
    if not rows:
        return None
    cards = [
        {
            "period": row.period,
            "activity": row.activity,
            "description": row.description,
            "progress": timeline_progress(index, len(rows)),
        }
        for index, row in enumerate(rows)
    ]
    return ReportSection(
        key="timeline",
        heading="Timeline and milestones",
        subtitle="Recommended periods and priority activities.",
        body=render_markup(TIMELINE_TEMPLATE, cards=cards),
    )


def _insights_section(content: SectionContent) -> ReportSection:
    insights = content.bullets or list(ReportConfig.DEFAULT_INSIGHTS)
    return ReportSection(
        key="insights",
        heading="Automated insights",
        subtitle="Points of attention detected during the run.",
        body=render_markup(INSIGHTS_TEMPLATE, insights=insights),
    )


def _cta_section(content: SectionContent) -> ReportSection:
    if content.is_empty():
        inner = render_markup(PARAGRAPHS_TEMPLATE, paragraphs=[ReportConfig.DEFAULT_CTA], bullets=[])
    else:
        inner = _content_markup(content)
    return ReportSection(
        key="cta",
        heading="CTA and next steps",
        subtitle="Suggested actions to keep going.",
        body=render_markup(CTA_TEMPLATE, content=inner),
    )


def _links_section() -> ReportSection:
    return ReportSection(
        key="links",
        heading="Useful links",
        subtitle="References and deliverables associated with this run.",
        body=render_markup(LINKS_TEMPLATE, links=ReportConfig.report_links()),
    )


def _audit_section(run: RunRecord, usage: UsageStats, memory: MemoryStats) -> ReportSection:
    entries = [
        ("Run ID", run.id),
        ("Trace ID", run.trace_id or "—"),
        ("Model", usage.model or run.agent),
        ("Tokens", usage.summary()),
        ("Memory", memory.summary()),
        ("Cursor", memory.cursor or "—"),
    ]
    return ReportSection(
        key="audit",
        heading="Audit trail",
        subtitle="Metadata for traceability and reprocessing.",
        body=render_markup(DEFINITION_GRID_TEMPLATE, entries=entries),
    )


def build_report_document(
    run: Union[RunRecord, Mapping[str, Any]],
    mode: Union[ReportMode, str] = ReportMode.STATIC,
    memory: Any = None,
    generated_at: Optional[datetime] = None,
    auto_print: bool = False,
) -> ReportDocument:
    """Assemble the themed report for one run.

    Args:
        run: The run record (model or raw mapping)
        mode: ``static`` or ``editable``; only the section wrappers differ
        memory: Optional prior memory block overriding the structured one
        generated_at: Footer timestamp, defaults to now
        auto_print: Open the print dialog when the document loads

    Returns:
        ReportDocument ready for any registered renderer
    """

    record = coerce_run(run)
    report_mode = ReportMode(mode)
    stamp = generated_at or datetime.now()

    normalized = normalize_run_response(record.response)
    structured = normalized.structured
    if not structured:
        logger.debug("Run %s has no structured output, using request fallback", record.id)
        structured = create_fallback_structured(record, normalized.text)

    forms = resolve_forms(structured, record.request)
    views = build_recommendation_views(structured, memory)
    usage = UsageStats.from_payload(structured.get("usage"))
    memory_stats = MemoryStats.from_payload(structured.get("memory"))
    diagnostic = DiagnosticStats.from_payload(structured.get("diagnostico"))

    briefing_sections = parse_markdown_sections(briefing_markdown(structured))
    timeline_rows = extract_timeline_rows(find_section(briefing_sections, ReportConfig.TIMELINE_SECTION_TITLES))
    insights = split_section_content(find_section(briefing_sections, ReportConfig.INSIGHTS_SECTION_TITLES))
    next_steps = split_section_content(find_section(briefing_sections, ReportConfig.NEXT_STEPS_SECTION_TITLES))

    candidates = [
        _summary_section(briefing_sections, forms, record.agent),
        _signature_section(record.agent, forms),
        _recommendations_section(views),
        _timeline_section(timeline_rows),
        _insights_section(insights),
        _cta_section(next_steps),
        _links_section(),
        _audit_section(record, usage, memory_stats),
    ]
    sections = [section for section in candidates if section is not None]

    items, _ = summary_items(forms, record.agent)
    status = record.status.value
    return ReportDocument(
        run=record,
        mode=report_mode,
        theme=resolve_theme(record.agent),
        title=f"Run {record.agent}",
        diagnostic_caption=diagnostic.caption(),
        chips=[item.label for item in items[:3]],
        badges=[
            {"label": status, "css_class": f"status-{status}"},
            {"label": f"Cost {format_currency(record.cost_cents)}", "css_class": ""},
            {"label": f"Tokens {format_count(usage.total_tokens)}", "css_class": ""},
            {"label": f"Time {format_duration(record.took_ms)}", "css_class": ""},
        ],
        metrics=[
            {"label": "Status", "value": status.upper(), "icon": "⦿"},
            {"label": "Estimated cost", "value": format_currency(record.cost_cents), "icon": "💰"},
            {"label": "Short memory", "value": format_count(memory_stats.short_term), "icon": "🧮"},
            {"label": "Long memory", "value": format_count(memory_stats.long_term), "icon": "🗂️"},
            {"label": "Vector memory", "value": format_count(memory_stats.vector_matches), "icon": "🧭"},
        ],
        sections=sections,
        footer_label=f"{ReportConfig.CONFIDENTIAL_LABEL} · {ReportConfig.BRAND_LABEL}",
        footer_stamp=f"{format_timestamp(stamp)} · Page 1 of 1",
        generated_at=stamp,
        auto_print=auto_print,
    )


__all__ = [
    "ReportMode",
    "ReportSection",
    "ReportDocument",
    "resolve_theme",
    "timeline_progress",
    "build_report_document",
]
