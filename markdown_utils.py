"""Utilities for reading agent briefing Markdown into report sections."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional

from config import ReportConfig
from models import SectionContent, TimelineRow

logger = logging.getLogger(__name__)

_HEADER_PREFIX = re.compile(r"^##\s*")
_BULLET_PREFIX = re.compile(r"^[-*]\s*")


def parse_markdown_sections(markdown: Optional[str]) -> Dict[str, List[str]]:
    """Split a briefing into ``{title: lines}`` keyed by its ``## `` headers.

    Lines before the first header land in the default bucket. A repeated
    title keeps appending to its first bucket.
    """

    current = ReportConfig.DEFAULT_SECTION_TITLE
    sections: Dict[str, List[str]] = {current: []}
    for line in (markdown or "").splitlines():
        stripped = line.strip()
        if stripped.startswith("## "):
            current = _HEADER_PREFIX.sub("", stripped).strip()
            sections.setdefault(current, [])
            continue
        sections[current].append(line)
    return sections


def _is_sentinel(trimmed: str) -> bool:
    return trimmed in (ReportConfig.DETAILS_OPEN_MARKER, ReportConfig.DETAILS_CLOSE_MARKER)


def split_section_content(lines: Iterable[str]) -> SectionContent:
    paragraphs: List[str] = []
    bullets: List[str] = []
    buffer: List[str] = []

    def flush() -> None:
        if buffer:
            paragraphs.append(" ".join(buffer))
            buffer.clear()

    for line in lines:
        trimmed = line.strip()
        if not trimmed or _is_sentinel(trimmed):
            flush()
            continue
        if trimmed.startswith("- ") or trimmed.startswith("* "):
            flush()
            bullets.append(_BULLET_PREFIX.sub("", trimmed).strip())
        elif not trimmed.startswith("|"):
            buffer.append(trimmed)
    flush()
    return SectionContent(paragraphs=paragraphs, bullets=bullets)


def extract_timeline_rows(lines: Iterable[str]) -> List[TimelineRow]:
    rows: List[TimelineRow] = []
    for line in lines:
        if not line.strip().startswith("|") or "---" in line:
            continue
        cells = [cell.strip() for cell in line.split("|")]
        cells = [cell for cell in cells if cell]
        if len(cells) < 3:
            logger.debug("Timeline row skipped, %d cells: %s", len(cells), line.strip())
            continue
        rows.append(TimelineRow(period=cells[0], activity=cells[1], description=cells[2]))
    return rows


def find_section(sections: Dict[str, List[str]], titles: Iterable[str]) -> List[str]:
    """Lines of the first section whose title matches one of ``titles``."""
    for title in titles:
        if title in sections:
            return sections[title]
    return []


__all__ = [
    "parse_markdown_sections",
    "split_section_content",
    "extract_timeline_rows",
    "find_section",
]
