"""Markdown to HTML for the interactive run view."""

from __future__ import annotations

import logging
from typing import List, Optional

import markdown

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ["tables", "fenced_code", "sane_lists"]


class MarkdownConverter:
    """Render agent Markdown with raw HTML escaped instead of passed through."""

    def __init__(self, extensions: Optional[List[str]] = None) -> None:
        self._md = markdown.Markdown(
            extensions=extensions or DEFAULT_EXTENSIONS,
            output_format="html5",
        )
        self._md.preprocessors.deregister("html_block")
        self._md.inlinePatterns.deregister("html")

    def convert(self, markdown_text: Optional[str]) -> str:
        if not markdown_text:
            return ""
        return self._md.reset().convert(markdown_text)


__all__ = ["MarkdownConverter"]
