"""Event feed state machine and timeline entries for a run.

The polling transport lives with the caller; this module only holds the pure
transitions (Idle -> Loading -> Ready/Error) and the display entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from config import ReportConfig
from json_values import safe_stringify
from models import IN_PROGRESS_STATUSES, RunStatus

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = ReportConfig.EVENT_POLL_INTERVAL_SECONDS
DEFAULT_LOAD_ERROR = "Failed to load events."

EVENT_LABELS = {
    "run.requested": "Briefing received",
    "run.enqueued": "Run enqueued",
    "run.started": "Execution started",
    "run.completed": "Execution completed",
    "run.failed": "Execution failed",
    "run.action.enqueued": "Action enqueued",
    "run.action.completed": "Action completed",
    "run.action.failed": "Action failed",
}

EVENT_TONES = {
    "run.requested": "neutral",
    "run.enqueued": "info",
    "run.started": "warning",
    "run.completed": "success",
    "run.failed": "danger",
    "run.action.enqueued": "info",
    "run.action.completed": "success",
    "run.action.failed": "danger",
}


class FeedPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class EventFeedState:
    phase: FeedPhase = FeedPhase.IDLE
    events: Tuple[Mapping[str, Any], ...] = ()
    error: Optional[str] = None
    loaded_once: bool = False

    @property
    def is_loading(self) -> bool:
        return self.phase is FeedPhase.LOADING


def begin_load(state: EventFeedState) -> EventFeedState:
    # later polls refresh silently
    if state.loaded_once:
        return state
    return replace(state, phase=FeedPhase.LOADING, error=None)


def load_succeeded(state: EventFeedState, events: Iterable[Mapping[str, Any]]) -> EventFeedState:
    return replace(state, phase=FeedPhase.READY, events=tuple(events), error=None, loaded_once=True)


def load_failed(state: EventFeedState, message: Optional[str] = None) -> EventFeedState:
    events = state.events if state.loaded_once else ()
    return replace(
        state,
        phase=FeedPhase.ERROR,
        events=events,
        error=message or DEFAULT_LOAD_ERROR,
        loaded_once=True,
    )


def reset() -> EventFeedState:
    return EventFeedState()


def _as_status(status: Union[RunStatus, str, None]) -> Optional[RunStatus]:
    if status is None or isinstance(status, RunStatus):
        return status
    try:
        return RunStatus(status)
    except ValueError:
        return None


def should_poll(status: Union[RunStatus, str, None]) -> bool:
    return _as_status(status) in IN_PROGRESS_STATUSES


def format_event_timestamp(value: Any) -> str:
    """``HH:MM:SS`` of an ISO timestamp; the raw value when it does not parse."""
    if not isinstance(value, str):
        return "" if value is None else str(value)
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return moment.strftime("%H:%M:%S")


@dataclass
class EventEntry:
    id: str
    type: str
    label: str
    tone: str
    timestamp: str
    payload_json: Optional[str] = None


def build_event_entries(events: Iterable[Mapping[str, Any]]) -> List[EventEntry]:
    entries: List[EventEntry] = []
    for index, event in enumerate(events):
        if not isinstance(event, Mapping):
            logger.debug("Skipping malformed event at index %d", index)
            continue
        event_type = str(event.get("type") or "")
        payload = event.get("payload")
        entries.append(
            EventEntry(
                id=str(event.get("id") or f"event-{index}"),
                type=event_type,
                label=EVENT_LABELS.get(event_type, event_type),
                tone=EVENT_TONES.get(event_type, "neutral"),
                timestamp=format_event_timestamp(event.get("createdAt")),
                payload_json=safe_stringify(payload) if payload else None,
            )
        )
    return entries


def empty_state_message(status: Union[RunStatus, str, None]) -> str:
    if should_poll(status):
        return "Waiting for worker events. The timeline updates as soon as the agent records progress."
    return "No events recorded for this run yet."


@dataclass
class TimelineView:
    loading: bool
    error: Optional[str]
    entries: List[EventEntry] = field(default_factory=list)
    empty_message: Optional[str] = None


def build_timeline_view(state: EventFeedState, status: Union[RunStatus, str, None]) -> TimelineView:
    entries = build_event_entries(state.events)
    empty = empty_state_message(status) if not entries and not state.error else None
    return TimelineView(loading=state.is_loading, error=state.error, entries=entries, empty_message=empty)


__all__ = [
    "POLL_INTERVAL_SECONDS",
    "EVENT_LABELS",
    "FeedPhase",
    "EventFeedState",
    "begin_load",
    "load_succeeded",
    "load_failed",
    "reset",
    "should_poll",
    "format_event_timestamp",
    "EventEntry",
    "build_event_entries",
    "empty_state_message",
    "TimelineView",
    "build_timeline_view",
]
