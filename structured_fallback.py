"""Synthesised structured output for runs whose response carries none."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from config import ReportConfig
from json_values import as_dict
from models import RunRecord

logger = logging.getLogger(__name__)

FALLBACK_TIMELINE = [
    "| Week 1 | Preparation | Configure connectors, validate tokens and health checks. |",
    "| Week 2 | Execution | Run pilots, watch the DLQ and persistent memory. |",
    "| Week 3 | Evaluation | Consolidate metrics and define the next cycle CTA. |",
]

FALLBACK_NEXT_STEPS = [
    "- Request a supervised pilot and enable persistent guardrails.",
    "- Set up token/cost dashboards for executives.",
]

PITCH_SUMMARY_FIELDS = [
    ("product", "Product / solution"),
    ("pain", "Main pain"),
    ("cta", "Desired CTA"),
    ("audience", "Audience"),
]


def _fallback_form(metadata: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    form = metadata.get("form")
    if isinstance(form, dict):
        return form
    raw_form = as_dict(metadata.get("rawPayload")).get("form")
    return raw_form if isinstance(raw_form, dict) else None


def _fallback_markdown(form: Dict[str, Any], text: str) -> str:
    summary_lines = [
        f"- {label}: {form[key]}" for key, label in PITCH_SUMMARY_FIELDS if isinstance(form.get(key), str)
    ]
    insights = text[: ReportConfig.FALLBACK_INSIGHT_CHARS] if text.strip() else "No additional content."
    lines: List[str] = [f"## {ReportConfig.SUMMARY_SECTION_TITLES[0]}"]
    lines.extend(summary_lines)
    lines.extend(["", f"## {ReportConfig.TIMELINE_SECTION_TITLES[0]}"])
    lines.extend(FALLBACK_TIMELINE)
    lines.extend(["", f"## {ReportConfig.NEXT_STEPS_SECTION_TITLES[0]}"])
    lines.extend(FALLBACK_NEXT_STEPS)
    lines.extend(["", f"## {ReportConfig.INSIGHTS_SECTION_TITLES[0]}", insights])
    return "\n".join(lines)


def create_fallback_structured(run: RunRecord, text: str) -> Dict[str, Any]:
    """Build a report-ready structured output from the run request and plain text."""

    request = as_dict(run.request)
    metadata = as_dict(request.get("metadata"))
    form = _fallback_form(metadata)
    pitch_source = as_dict(metadata.get("form"))
    text = text or ""

    diagnostic = as_dict(metadata.get("diagnostico"))
    recommendations: List[Dict[str, Any]] = []
    if text.strip():
        cta = pitch_source.get("cta")
        recommendations.append(
            {
                "tatica": "Text summary",
                "rationale": text[: ReportConfig.FALLBACK_RATIONALE_CHARS],
                "proximos_passos": cta if isinstance(cta, str) else None,
                "execucao": None,
                "score": None,
                "adopted": False,
            }
        )

    logger.debug("Synthesising structured output for run %s", run.id)
    return {
        "breafing_markdown": _fallback_markdown(pitch_source, text),
        "diagnostico": {
            "total_prev_runs": diagnostic.get("total_prev_runs", 0),
            "exploracao_pct": diagnostic.get("exploracao_pct", 0),
            "filtrados_adotados": diagnostic.get("filtrados_adotados", 0),
            "filtrados_rejeitados": diagnostic.get("filtrados_rejeitados", 0),
        },
        "usage": metadata.get("usage")
        or {
            "total_tokens": None,
            "prompt_tokens": None,
            "completion_tokens": None,
            "model": metadata.get("model") or run.agent,
        },
        "memory": metadata.get("memory")
        or {
            "shortTerm": [],
            "longTerm": [],
            "vectorMatches": [],
            "agentStateBefore": metadata.get("agentState"),
        },
        ReportConfig.RECOMMENDATIONS_FIELD: recommendations,
        "metadata": {"form": form},
    }


__all__ = ["create_fallback_structured"]
