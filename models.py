from __future__ import annotations

import logging
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from json_values import json_compatible

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
    BLOCKED = "blocked"


IN_PROGRESS_STATUSES = frozenset({RunStatus.PENDING, RunStatus.RUNNING, RunStatus.BLOCKED})


class RunMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    took_ms: Optional[Union[int, float]] = Field(default=None, alias="tookMs")
    trace_id: Optional[str] = Field(default=None, alias="traceId")


class RunRecord(BaseModel):
    """One execution of an agent as handed over by the run service."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    agent: str
    status: RunStatus
    request: Any = None
    response: Any = None
    cost_cents: Optional[int] = Field(default=None, alias="costCents")
    meta: Optional[RunMeta] = None

    @field_validator("id")
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Run id cannot be empty")
        return v

    @property
    def in_progress(self) -> bool:
        return self.status in IN_PROGRESS_STATUSES

    @property
    def short_id(self) -> str:
        return self.id[:8]

    @property
    def took_ms(self) -> Optional[Union[int, float]]:
        return self.meta.took_ms if self.meta else None

    @property
    def trace_id(self) -> Optional[str]:
        return self.meta.trace_id if self.meta else None

    def export_payload(self) -> Dict[str, Any]:
        """Original record shape (camelCase keys, unset fields omitted).

        Values pydantic cannot serialise (cyclic or very deep payloads) are
        exported field by field, falling back to their repr.
        """
        try:
            return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        except (ValueError, RecursionError) as exc:
            logger.debug("Run %s exported field by field: %s", self.id, exc)

        payload: Dict[str, Any] = {}
        for name, info in type(self).model_fields.items():
            if name not in self.model_fields_set:
                continue
            value = getattr(self, name)
            if isinstance(value, BaseModel):
                value = value.model_dump(by_alias=True, exclude_unset=True)
            payload[info.alias or name] = json_compatible(value)
        for key, value in (self.model_extra or {}).items():
            payload[key] = json_compatible(value)
        return payload


class FormSnapshot(BaseModel):
    """Intake form fields recovered verbatim; missing fields stay ``None``."""

    model_config = ConfigDict(populate_by_name=True)

    LIST_FIELDS: ClassVar[Tuple[str, ...]] = ()

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class CampaignForm(FormSnapshot):
    LIST_FIELDS: ClassVar[Tuple[str, ...]] = ("channels",)

    goal: Optional[str] = None
    audience: Optional[str] = None
    budget: Optional[str] = None
    channels: Optional[List[str]] = None
    kpis: Optional[str] = None
    notes: Optional[str] = None
    tone_profile: Optional[str] = Field(default=None, alias="toneProfile")
    tone_notes: Optional[str] = Field(default=None, alias="toneNotes")
    launch_date: Optional[str] = Field(default=None, alias="launchDate")
    deadline: Optional[str] = None


class PitchForm(FormSnapshot):
    product: Optional[str] = None
    audience: Optional[str] = None
    pain: Optional[str] = None
    solution: Optional[str] = None
    proof: Optional[str] = None
    cta: Optional[str] = None


class CustomerJourneyForm(FormSnapshot):
    LIST_FIELDS: ClassVar[Tuple[str, ...]] = ("journeyStages",)

    customer_name: Optional[str] = Field(default=None, alias="customerName")
    segment: Optional[str] = None
    pain_points: Optional[str] = Field(default=None, alias="painPoints")
    current_tools: Optional[str] = Field(default=None, alias="currentTools")
    journey_stages: Optional[List[str]] = Field(default=None, alias="journeyStages")
    recent_events: Optional[str] = Field(default=None, alias="recentEvents")
    opportunities: Optional[str] = None
    risks: Optional[str] = None
    next_steps: Optional[str] = Field(default=None, alias="nextSteps")


class ExecutionHint(BaseModel):
    task_type: Optional[str] = None
    api: Optional[str] = None
    token_estimate: Optional[Union[int, float]] = None


class RecommendationView(BaseModel):
    """Ranked, scored and diffed recommendation shared by every view."""

    key: str
    index: int
    title: str
    priority: Union[int, float]
    score: float = Field(default=0.0, allow_inf_nan=False)
    previous_score: Optional[float] = None
    delta: Optional[float] = None
    critical: bool = False
    rationale: Optional[str] = None
    next_steps: Optional[str] = None
    execution: Optional[ExecutionHint] = None
    adopted: bool = False
    score_label: str = "0.00"
    delta_label: Optional[str] = None
    delta_tone: Optional[str] = None
    execution_summary: str = "—"
    status_label: str = "Pending"


class TimelineRow(BaseModel):
    period: str
    activity: str
    description: str


class SectionContent(BaseModel):
    paragraphs: List[str] = Field(default_factory=list)
    bullets: List[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.paragraphs and not self.bullets


class SummaryItem(BaseModel):
    key: str
    label: str
    icon: str
    value: Optional[str] = None


def coerce_run(run: Union[RunRecord, Mapping[str, Any]]) -> RunRecord:
    if isinstance(run, RunRecord):
        return run
    return RunRecord.model_validate(dict(run))
