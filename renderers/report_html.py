"""Self-contained HTML report (static or editable)."""

from __future__ import annotations

import logging

from .base import BaseRenderer
from .context import ReportDocument
from .templates import DOCUMENT_TEMPLATE, REPORT_STYLES

logger = logging.getLogger(__name__)


class HtmlReportRenderer(BaseRenderer):
    name = "report_html"
    media_type = "text/html"
    extension = "html"

    def render(self, document: ReportDocument) -> str:
        html = DOCUMENT_TEMPLATE.render(doc=document, styles=REPORT_STYLES)
        logger.debug(
            "Rendered %s report for run %s (%d sections)",
            document.mode.value,
            document.run_id,
            len(document.sections),
        )
        return html
