"""Ranked, scored and diffed recommendation view-model.

Both the interactive list and the static report table are built from
``build_recommendation_views``; neither view applies rules of its own.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from config import ReportConfig
from formatting import PLACEHOLDER, format_score
from json_values import as_dict, finite_number, first_string
from models import ExecutionHint, RecommendationView
from response_normalization import recommendation_entries

logger = logging.getLogger(__name__)


def previous_scores(memory: Any) -> Dict[str, float]:
    """Prior score per recommendation key.

    Accepts a full memory block (``agentStateBefore.recommendations``), an
    agent state (``recommendations``) or the bare ``{key: {"score": ...}}``
    snapshot.
    """
    record = as_dict(memory)
    if isinstance(record.get("agentStateBefore"), dict):
        record = record["agentStateBefore"]
    elif "agentStateBefore" in record:
        return {}
    if isinstance(record.get("recommendations"), dict):
        record = record["recommendations"]
    recorded = record
    scores: Dict[str, float] = {}
    for key, entry in recorded.items():
        score = finite_number(as_dict(entry).get("score"))
        if score is not None:
            scores[str(key)] = float(score)
    return scores


def _execution_hint(raw: Any) -> Optional[ExecutionHint]:
    if not isinstance(raw, dict):
        return None
    tokens = finite_number(raw.get("custo_estimado_tokens"))
    if tokens is None:
        tokens = finite_number(raw.get("tokens"))
    return ExecutionHint(
        task_type=first_string(raw.get("tipo_tarefa"), raw.get("tipo")),
        api=first_string(raw.get("api_sugerida"), raw.get("api")),
        token_estimate=tokens,
    )


def execution_summary(hint: Optional[ExecutionHint]) -> str:
    if hint is None:
        return PLACEHOLDER
    tokens = f"{hint.token_estimate} tokens" if hint.token_estimate is not None else PLACEHOLDER
    return " • ".join([hint.task_type or PLACEHOLDER, hint.api or PLACEHOLDER, tokens])


def _shown_delta(delta: float) -> float:
    # adding 0.0 turns -0.0 into 0.0
    return round(delta, 2) + 0.0


def delta_label(delta: Optional[float]) -> Optional[str]:
    if delta is None:
        return None
    shown = _shown_delta(delta)
    if shown > 0:
        return f"+{shown:.2f}"
    return f"{shown:.2f}"


def delta_tone(delta: Optional[float]) -> Optional[str]:
    """Tone of the delta as labelled, so the two never disagree."""
    if delta is None:
        return None
    delta = _shown_delta(delta)
    if delta > 0:
        return "positive"
    if delta < 0:
        return "negative"
    return "neutral"


def build_recommendation_view(entry: Dict[str, Any], index: int, prior: Dict[str, float]) -> RecommendationView:
    key = first_string(entry.get("key"))
    priority = finite_number(entry.get("prioridade"))
    score = finite_number(entry.get("score"))
    score = float(score) if score is not None else 0.0

    previous = prior.get(key) if key is not None else None
    delta = score - previous if previous is not None else None
    # keep float noise out of the label (0.9 - 0.5 = 0.4000000000000001)
    if delta is not None:
        delta = round(delta, 10) + 0.0

    hint = _execution_hint(entry.get("execucao"))
    adopted = bool(entry.get("adopted"))
    return RecommendationView(
        key=key if key is not None else f"rec-{index}",
        index=index,
        title=first_string(entry.get("tatica"), key) or f"Recommendation {index + 1}",
        priority=priority if priority is not None else index + 1,
        score=score,
        previous_score=previous,
        delta=delta,
        critical=score >= ReportConfig.CRITICAL_SCORE_THRESHOLD,
        rationale=first_string(entry.get("rationale")),
        next_steps=first_string(entry.get("proximos_passos")),
        execution=hint,
        adopted=adopted,
        score_label=format_score(score),
        delta_label=delta_label(delta),
        delta_tone=delta_tone(delta),
        execution_summary=execution_summary(hint),
        status_label="Adopted" if adopted else "Pending",
    )


def build_recommendation_views(
    structured: Optional[Dict[str, Any]], memory: Any = None
) -> List[RecommendationView]:
    """Views in source order; an explicit ``memory`` overrides ``structured['memory']``."""
    source_memory = memory if memory is not None else as_dict(structured).get("memory")
    prior = previous_scores(source_memory)
    views: List[RecommendationView] = []
    for index, entry in enumerate(recommendation_entries(structured)):
        if not isinstance(entry, dict):
            logger.debug("Skipping non-object recommendation at index %d", index)
            continue
        views.append(build_recommendation_view(entry, index, prior))
    return views


__all__ = [
    "previous_scores",
    "execution_summary",
    "delta_label",
    "delta_tone",
    "build_recommendation_view",
    "build_recommendation_views",
]
