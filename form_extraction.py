"""Recover intake-form snapshots from structured outputs and requests.

Every extractor shares one ordered probe table. The first probe that yields a
non-empty mapping wins; fields are never merged across probe locations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from config import ReportConfig
from json_values import as_dict
from models import CampaignForm, CustomerJourneyForm, FormSnapshot, PitchForm, SummaryItem

logger = logging.getLogger(__name__)

FormT = TypeVar("FormT", bound=FormSnapshot)
Probe = Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]


def _non_empty_mapping(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) and value else None


def probe_form(source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _non_empty_mapping(source.get("form"))


def probe_params_form(source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _non_empty_mapping(as_dict(source.get("params")).get("form"))


def probe_plan_form(source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    plan = source.get("plan")
    if not isinstance(plan, list):
        return None
    for entry in plan:
        form = _non_empty_mapping(as_dict(as_dict(entry).get("params")).get("form"))
        if form is not None:
            return form
    return None


def probe_metadata_form(source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _non_empty_mapping(as_dict(source.get("metadata")).get("form"))


def probe_raw_payload(source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _non_empty_mapping(source.get("rawPayload"))


def probe_source(source: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _non_empty_mapping(source)


FORM_PROBES: List[Tuple[str, Probe]] = [
    ("form", probe_form),
    ("params.form", probe_params_form),
    ("plan[].params.form", probe_plan_form),
    ("metadata.form", probe_metadata_form),
    ("rawPayload", probe_raw_payload),
    ("record", probe_source),
]


def locate_form_source(source: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(source, dict):
        return None
    for name, probe in FORM_PROBES:
        candidate = probe(source)
        if candidate is not None:
            logger.debug("Form located via %s", name)
            return candidate
    return None


def _read_fields(form_cls: Type[FormT], candidate: Dict[str, Any]) -> FormT:
    values: Dict[str, Any] = {}
    for name, info in form_cls.model_fields.items():
        key = info.alias or name
        raw = candidate.get(key)
        if key in form_cls.LIST_FIELDS:
            if isinstance(raw, list):
                items = [item for item in raw if isinstance(item, str)]
                if items:
                    values[key] = items
        elif isinstance(raw, str):
            values[key] = raw
    return form_cls.model_validate(values)


def extract_form(form_cls: Type[FormT], source: Any) -> FormT:
    candidate = locate_form_source(source)
    if candidate is None:
        return form_cls()
    return _read_fields(form_cls, candidate)


def extract_campaign_form(source: Any) -> CampaignForm:
    return extract_form(CampaignForm, source)


def extract_pitch_form(source: Any) -> PitchForm:
    return extract_form(PitchForm, source)


def extract_journey_form(source: Any) -> CustomerJourneyForm:
    return extract_form(CustomerJourneyForm, source)


def _prefer_response(form_cls: Type[FormT], structured: Any, request: Any) -> FormT:
    from_response = extract_form(form_cls, structured)
    if not from_response.is_empty():
        return from_response
    return extract_form(form_cls, request)


@dataclass
class FormSnapshots:
    campaign: CampaignForm = field(default_factory=CampaignForm)
    pitch: PitchForm = field(default_factory=PitchForm)
    journey: CustomerJourneyForm = field(default_factory=CustomerJourneyForm)

    def is_empty(self) -> bool:
        return self.campaign.is_empty() and self.pitch.is_empty() and self.journey.is_empty()

    def summary_variant(self, agent: str) -> Optional[str]:
        """Agent's own variant when filled, else the first filled one."""
        key = (agent or "").strip().lower()
        if key == ReportConfig.PITCH_AGENT and not self.pitch.is_empty():
            return "pitch"
        if key == ReportConfig.JOURNEY_AGENT and not self.journey.is_empty():
            return "journey"
        for variant in ("campaign", "pitch", "journey"):
            if not getattr(self, variant).is_empty():
                return variant
        return None


def resolve_forms(structured: Any, request: Any) -> FormSnapshots:
    return FormSnapshots(
        campaign=_prefer_response(CampaignForm, structured, request),
        pitch=_prefer_response(PitchForm, structured, request),
        journey=_prefer_response(CustomerJourneyForm, structured, request),
    )


def _joined(values: Optional[List[str]]) -> Optional[str]:
    return ", ".join(values) if values else None


def _filled(entries: List[Tuple[str, Optional[str]]]) -> List[Tuple[str, str]]:
    return [(label, value) for label, value in entries if value and value.strip()]


SUMMARY_SUBTITLES = {
    "campaign": "Goal, audience and channels from the original briefing.",
    "pitch": "Product, pain and CTA from the original briefing.",
    "journey": "Account, journey and risks from the original briefing.",
}


def summary_items(forms: FormSnapshots, agent: str) -> Tuple[List[SummaryItem], str]:
    variant = forms.summary_variant(agent)
    if variant == "pitch":
        pitch = forms.pitch
        items = [
            SummaryItem(key="product", label="Product / solution", icon="🎁", value=pitch.product),
            SummaryItem(key="audience", label="Audience", icon="👥", value=pitch.audience),
            SummaryItem(key="pain", label="Main pain", icon="⚠️", value=pitch.pain),
            SummaryItem(key="solution", label="Proof / differentiators", icon="✨", value=pitch.solution),
            SummaryItem(key="proof", label="Social proof / metrics", icon="📈", value=pitch.proof),
            SummaryItem(key="cta", label="Desired CTA", icon="📣", value=pitch.cta),
        ]
    elif variant == "journey":
        journey = forms.journey
        items = [
            SummaryItem(key="customerName", label="Account / customer", icon="🏢", value=journey.customer_name),
            SummaryItem(key="segment", label="Segment", icon="🏷️", value=journey.segment),
            SummaryItem(key="journeyStages", label="Journey", icon="🧭", value=_joined(journey.journey_stages)),
            SummaryItem(key="painPoints", label="Main pains", icon="⚠️", value=journey.pain_points),
            SummaryItem(key="opportunities", label="Opportunities", icon="🚀", value=journey.opportunities),
            SummaryItem(key="risks", label="Risks / blockers", icon="🛑", value=journey.risks),
            SummaryItem(key="nextSteps", label="Next steps", icon="✅", value=journey.next_steps),
        ]
    elif variant == "campaign":
        campaign = forms.campaign
        items = [
            SummaryItem(key="goal", label="Goal", icon="🎯", value=campaign.goal),
            SummaryItem(key="audience", label="Target audience", icon="👥", value=campaign.audience),
            SummaryItem(key="budget", label="Budget", icon="💰", value=campaign.budget),
            SummaryItem(key="kpis", label="KPIs", icon="📊", value=campaign.kpis),
            SummaryItem(key="toneProfile", label="Tone / profile", icon="🗣️", value=campaign.tone_profile),
        ]
    else:
        unavailable = "Summary unavailable in the briefing." if (agent or "").lower() == ReportConfig.PITCH_AGENT else "No summary provided."
        return [], unavailable
    filled = [item for item in items if item.value and item.value.strip()]
    return filled, SUMMARY_SUBTITLES[variant]


def summary_definitions(forms: FormSnapshots, agent: str) -> List[Tuple[str, str]]:
    """Wider label/value grid used when the summary items are all blank."""
    variant = forms.summary_variant(agent)
    if variant == "pitch":
        pitch = forms.pitch
        return _filled([
            ("Product / solution", pitch.product),
            ("Audience", pitch.audience),
            ("Main pain", pitch.pain),
            ("Proof / differentiators", pitch.solution),
            ("Social proof", pitch.proof),
            ("Desired CTA", pitch.cta),
        ])
    if variant == "journey":
        journey = forms.journey
        return _filled([
            ("Account", journey.customer_name),
            ("Segment", journey.segment),
            ("Pains", journey.pain_points),
            ("Current tools", journey.current_tools),
            ("Journey", _joined(journey.journey_stages)),
            ("Recent events", journey.recent_events),
            ("Opportunities", journey.opportunities),
            ("Risks", journey.risks),
            ("Next steps", journey.next_steps),
        ])
    if variant == "campaign":
        campaign = forms.campaign
        return _filled([
            ("Goal", campaign.goal),
            ("Audience", campaign.audience),
            ("Budget", campaign.budget),
            ("KPIs", campaign.kpis),
            ("Tone", campaign.tone_profile),
            ("Tone notes", campaign.tone_notes),
            ("Launch", campaign.launch_date),
            ("Milestones", campaign.deadline),
            ("Channels", _joined(campaign.channels)),
            ("Notes", campaign.notes),
        ])
    return []


@dataclass
class SignatureBlock:
    title: str
    subtitle: str
    variant: str
    entries: List[Tuple[str, str]]


def signature_block(agent: str, forms: FormSnapshots) -> Optional[SignatureBlock]:
    """Agent-specific recap of the briefing the run was based on."""
    key = (agent or "").strip().lower()
    if key == ReportConfig.PITCH_AGENT and not forms.pitch.is_empty():
        pitch = forms.pitch
        entries = _filled([
            ("Product / solution", pitch.product),
            ("Audience", pitch.audience),
            ("Main pain", pitch.pain),
            ("Desired CTA", pitch.cta),
            ("Social proof", pitch.proof),
        ])
        if not entries:
            return None
        return SignatureBlock("Pitch DNA", "Quick recap of the advertising briefing.", "pitch", entries)

    if key == ReportConfig.JOURNEY_AGENT and not forms.journey.is_empty():
        journey = forms.journey
        entries = _filled([
            ("Account / customer", journey.customer_name),
            ("Segment", journey.segment),
            ("Current tools", journey.current_tools),
            ("Journey", _joined(journey.journey_stages)),
            ("Risks", journey.risks),
            ("Next steps", journey.next_steps),
        ])
        if not entries:
            return None
        return SignatureBlock("Account context", "Key points of the 360 view.", "j360", entries)

    if forms.campaign.is_empty():
        return None
    campaign = forms.campaign
    entries = _filled([
        ("Goal", campaign.goal),
        ("Audience", campaign.audience),
        ("Budget", campaign.budget),
        ("KPIs", campaign.kpis),
        ("Tone / profile", campaign.tone_profile),
        ("Channels", _joined(campaign.channels)),
    ])
    if not entries:
        return None
    if ReportConfig.RELIABILITY_KEYWORD in key:
        return SignatureBlock(
            "Reliability checklist",
            "Fields the reliability agent needs to validate and anchor evidence.",
            "guardian",
            entries,
        )
    return SignatureBlock("Campaign context", "Base briefing used to generate the recommendations.", "campaign", entries)


__all__ = [
    "FORM_PROBES",
    "FormSnapshots",
    "SignatureBlock",
    "locate_form_source",
    "extract_form",
    "extract_campaign_form",
    "extract_pitch_form",
    "extract_journey_form",
    "resolve_forms",
    "summary_items",
    "summary_definitions",
    "signature_block",
]
