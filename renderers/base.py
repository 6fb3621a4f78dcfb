"""Base classes for run report renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .context import ReportDocument


class BaseRenderer(ABC):
    """Shared interface for any report renderer."""

    name: str = "base"
    media_type: str = "text/plain"
    extension: str = "txt"

    @abstractmethod
    def render(self, document: ReportDocument) -> str:
        """Serialise the assembled document into a single string artifact."""

    def filename(self, document: ReportDocument) -> str:
        return f"run-{document.run_id}.{self.extension}"
