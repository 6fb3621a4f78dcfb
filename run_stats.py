"""Usage, memory and diagnostic statistics derived from a structured output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from formatting import format_count, format_percent
from json_values import as_dict, coerce_count, first_string

Number = Union[int, float]


def _first_present(record: dict, *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


@dataclass
class UsageStats:
    total_tokens: Optional[Number] = None
    prompt_tokens: Optional[Number] = None
    completion_tokens: Optional[Number] = None
    model: Optional[str] = None

    @classmethod
    def from_payload(cls, usage: Any) -> "UsageStats":
        record = as_dict(usage)
        return cls(
            total_tokens=coerce_count(_first_present(record, "total_tokens", "totalTokens")),
            prompt_tokens=coerce_count(_first_present(record, "prompt_tokens", "promptTokens")),
            completion_tokens=coerce_count(_first_present(record, "completion_tokens", "completionTokens")),
            model=first_string(record.get("model"), record.get("model_name")),
        )

    def summary(self) -> str:
        return (
            f"{format_count(self.total_tokens)} total · "
            f"{format_count(self.prompt_tokens)} prompt · "
            f"{format_count(self.completion_tokens)} completion"
        )


@dataclass
class MemoryStats:
    short_term: Optional[Number] = None
    long_term: Optional[Number] = None
    vector_matches: Optional[Number] = None
    cursor: Optional[str] = None

    @classmethod
    def from_payload(cls, memory: Any) -> "MemoryStats":
        record = as_dict(memory)
        return cls(
            short_term=coerce_count(_first_present(record, "shortTerm", "short", "lastShort")),
            long_term=coerce_count(_first_present(record, "longTerm", "long", "lastLong")),
            vector_matches=coerce_count(_first_present(record, "vectorMatches", "vector", "lastVector")),
            cursor=first_string(record.get("cursor")),
        )

    def summary(self) -> str:
        return (
            f"short {format_count(self.short_term)} · "
            f"long {format_count(self.long_term)} · "
            f"vector {format_count(self.vector_matches)}"
        )


@dataclass
class DiagnosticStats:
    """Exploration diagnostics of the agent's prior runs."""

    present: bool = False
    total_prev_runs: Optional[Number] = None
    exploration_pct: Optional[Number] = None
    adopted_filtered: Optional[Number] = None
    rejected_filtered: Optional[Number] = None

    @classmethod
    def from_payload(cls, diagnostic: Any) -> "DiagnosticStats":
        if not isinstance(diagnostic, dict):
            return cls()
        return cls(
            present=True,
            total_prev_runs=coerce_count(diagnostic.get("total_prev_runs")),
            exploration_pct=coerce_count(diagnostic.get("exploracao_pct")),
            adopted_filtered=coerce_count(diagnostic.get("filtrados_adotados")),
            rejected_filtered=coerce_count(diagnostic.get("filtrados_rejeitados")),
        )

    @property
    def exploitation_pct(self) -> Optional[Number]:
        if self.exploration_pct is None:
            return None
        return 100 - self.exploration_pct

    def caption(self) -> str:
        if not self.present:
            return "No history available."
        return (
            f"prevRuns: {format_count(self.total_prev_runs)} • "
            f"exploration: {format_percent(self.exploration_pct)} • "
            f"adopted filtered: {format_count(self.adopted_filtered)} • "
            f"rejected filtered: {format_count(self.rejected_filtered)}"
        )


__all__ = ["UsageStats", "MemoryStats", "DiagnosticStats"]
