"""
Run Report Configuration

Single configuration surface for response normalization and report rendering.
Every value can be overridden from the environment (``RUN_REPORT_*``) or a
local ``.env`` file.
"""

import json
import os
from typing import Dict, List, Tuple

from dotenv import load_dotenv

load_dotenv()


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split("|") if item.strip()]


class ReportConfig:
    """Rendering and normalization knobs shared across the runtime."""

    BRAND_LABEL = os.getenv("RUN_REPORT_BRAND", "EIAH Builder")
    CONFIDENTIAL_LABEL = os.getenv("RUN_REPORT_CONFIDENTIAL_LABEL", "Confidential")
    CURRENCY_SYMBOL = os.getenv("RUN_REPORT_CURRENCY_SYMBOL", "R$")
    DOCUMENT_LANG = os.getenv("RUN_REPORT_LANG", "pt-BR")
    DATE_FORMAT = os.getenv("RUN_REPORT_DATE_FORMAT", "%d/%m/%Y")

    # Normalization
    MAX_SEARCH_DEPTH = int(os.getenv("RUN_REPORT_MAX_SEARCH_DEPTH", "6"))
    RECOMMENDATIONS_FIELD = "recomendacoes"
    OUTPUT_TEXT_FIELD = "outputText"
    CRITICAL_SCORE_THRESHOLD = float(os.getenv("RUN_REPORT_CRITICAL_SCORE", "0.8"))

    # Agents with a dedicated form variant
    PITCH_AGENT = os.getenv("RUN_REPORT_PITCH_AGENT", "pitch")
    JOURNEY_AGENT = os.getenv("RUN_REPORT_JOURNEY_AGENT", "j_360")
    RELIABILITY_KEYWORD = os.getenv("RUN_REPORT_RELIABILITY_KEYWORD", "guardian")

    # Themes: exact agent match first, then keyword containment, then default.
    AGENT_THEMES: Dict[str, Dict[str, str]] = {
        "pitch": {
            "id": "pitch",
            "hero_gradient": "linear-gradient(120deg,#2a0f4d,#5c2bd6)",
            "panel_bg": "#160b29",
            "panel_glow": "rgba(92,43,214,0.35)",
            "text_on_hero": "#fef9ff",
            "accent": "#c084fc",
            "accent_soft": "rgba(192,132,252,0.18)",
            "badge_bg": "rgba(255,255,255,0.18)",
            "badge_color": "#fef9ff",
        },
        "j_360": {
            "id": "j360",
            "hero_gradient": "linear-gradient(135deg,#052f5f,#2491e3)",
            "panel_bg": "#06203b",
            "panel_glow": "rgba(36,145,227,0.4)",
            "text_on_hero": "#e0f2ff",
            "accent": "#5eead4",
            "accent_soft": "rgba(94,234,212,0.14)",
            "badge_bg": "rgba(255,255,255,0.14)",
            "badge_color": "#e0f2ff",
        },
        "guardian": {
            "id": "guardian",
            "hero_gradient": "linear-gradient(135deg,#3a0a00,#bf360c)",
            "panel_bg": "#1d0500",
            "panel_glow": "rgba(191,54,12,0.35)",
            "text_on_hero": "#fde7e1",
            "accent": "#f97316",
            "accent_soft": "rgba(249,115,22,0.18)",
            "badge_bg": "rgba(255,255,255,0.18)",
            "badge_color": "#fde7e1",
        },
        "default": {
            "id": "default",
            "hero_gradient": "linear-gradient(135deg,#0f172a,#1e3a8a)",
            "panel_bg": "#0f172a",
            "panel_glow": "rgba(59,130,246,0.35)",
            "text_on_hero": "#f8fafc",
            "accent": "#60a5fa",
            "accent_soft": "rgba(96,165,250,0.18)",
            "badge_bg": "rgba(255,255,255,0.15)",
            "badge_color": "#f8fafc",
        },
    }
    THEME_KEYWORDS: List[Tuple[str, str]] = [("guardian", "guardian")]

    # Briefing sections read by the report (agent titles first, then aliases)
    SUMMARY_SECTION_TITLES = _env_list(
        "RUN_REPORT_SUMMARY_SECTIONS", ["1. Resumo e KPIs", "1. Summary and KPIs"]
    )
    TIMELINE_SECTION_TITLES = _env_list("RUN_REPORT_TIMELINE_SECTIONS", ["2. Timeline"])
    NEXT_STEPS_SECTION_TITLES = _env_list(
        "RUN_REPORT_NEXT_STEPS_SECTIONS",
        ["5. Próximos passos com datas-chave", "5. Next steps with key dates"],
    )
    INSIGHTS_SECTION_TITLES = _env_list(
        "RUN_REPORT_INSIGHTS_SECTIONS", ["7. Insights automatizados", "7. Automated insights"]
    )
    DEFAULT_SECTION_TITLE = "Content"
    DETAILS_OPEN_MARKER = os.getenv(
        "RUN_REPORT_DETAILS_OPEN", "<details><summary>Detalhar canais</summary>"
    )
    DETAILS_CLOSE_MARKER = "</details>"

    DEFAULT_INSIGHTS = [
        "Enabling DLQs and health checks reduces instability risk across concurrent runs.",
        "Persistent memory unlocks better recommendations; prioritize the Redis/Postgres rollout.",
    ]
    DEFAULT_CTA = "Use the deck links and the supervised pilot to speed up the rollout."

    PITCH_FIGMA_URL = os.getenv("RUN_REPORT_FIGMA_URL", "https://www.figma.com/community")
    PITCH_CANVA_URL = os.getenv(
        "RUN_REPORT_CANVA_URL", "https://www.canva.com/templates/search/startup-pitch/"
    )
    HEALTH_URL = os.getenv("RUN_REPORT_HEALTH_URL", "https://status.eiah.ai/healthz")

    _links_raw = os.getenv("RUN_REPORT_LINKS")
    try:
        EXTRA_LINKS: List[Dict[str, str]] = [
            entry for entry in (json.loads(_links_raw) if _links_raw else []) if isinstance(entry, dict)
        ]
    except ValueError:
        EXTRA_LINKS = []

    PITCH_COPY_BLOCKS: List[Dict[str, str]] = [
        {
            "title": "Landing page: hero + CTA",
            "description": "High-impact message for the landing page fold.",
            "content": (
                "Headline:\nJoin the new era of AI and Blockchain\n\n"
                "Subheadline:\nLearn from specialists, unlock VIP content and get an exclusive access NFT.\n\n"
                "CTA:\nI want early access"
            ),
        },
        {
            "title": "Nurture email: NFT invitation",
            "description": "Use as the post-signup confirmation send.",
            "content": (
                "Subject: [Exclusive access] Is your seat + participation NFT secured?\n\n"
                "Hi, [name]!\nYou are about to join a community shaping the future with AI and Blockchain.\n\n"
                "Closed event with specialists\nCollectible access NFT\nLimited seats\n\n"
                "Secure your seat now and receive your exclusive NFT -> [CTA button]"
            ),
        },
        {
            "title": "AI chatbot: consultative capture",
            "description": "Opening message for the bot on strategic pages.",
            "content": (
                "Opening message:\n\"Hi! Ready to explore the real impact of AI and Blockchain on your results? "
                "Tell me what you are interested in and I will guide you through content, events and tailored material.\"\n\n"
                "Suggested options:\n- I want to join events\n- I am looking for e-books and technical content\n"
                "- I want to understand how to use AI in my business"
            ),
        },
    ]

    # Interactive view
    EVENT_POLL_INTERVAL_SECONDS = float(os.getenv("RUN_REPORT_POLL_INTERVAL", "3"))
    FALLBACK_INSIGHT_CHARS = 800
    FALLBACK_RATIONALE_CHARS = 480

    @classmethod
    def report_links(cls) -> List[Dict[str, str]]:
        links = [
            {"label": "Figma deck", "url": cls.PITCH_FIGMA_URL, "description": "Visual base for storytelling."},
            {"label": "Canva deck", "url": cls.PITCH_CANVA_URL, "description": "Editable templates for quick adaptation."},
            {"label": "API health check", "url": cls.HEALTH_URL, "description": "Execution cluster /health status."},
        ]
        for extra in cls.EXTRA_LINKS:
            if extra.get("label") and extra.get("url"):
                links.append(
                    {
                        "label": str(extra["label"]),
                        "url": str(extra["url"]),
                        "description": str(extra.get("description") or ""),
                    }
                )
        return links
