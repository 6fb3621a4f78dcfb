from form_extraction import (
    FormSnapshots,
    extract_campaign_form,
    extract_journey_form,
    extract_pitch_form,
    locate_form_source,
    resolve_forms,
    signature_block,
    summary_items,
)
from models import CampaignForm, PitchForm


def test_direct_form_is_preferred_over_params():
    source = {"form": {"goal": "Direct"}, "params": {"form": {"goal": "Params", "budget": "10k"}}}
    form = extract_campaign_form(source)
    assert form.goal == "Direct"
    # no merging across probe locations
    assert form.budget is None


def test_probe_order_covers_every_location():
    assert extract_campaign_form({"params": {"form": {"goal": "p"}}}).goal == "p"
    assert extract_campaign_form({"plan": [{"params": {}}, {"params": {"form": {"goal": "plan"}}}]}).goal == "plan"
    assert extract_campaign_form({"metadata": {"form": {"goal": "meta"}}}).goal == "meta"
    assert extract_campaign_form({"rawPayload": {"goal": "raw"}}).goal == "raw"
    assert extract_campaign_form({"goal": "record"}).goal == "record"


def test_empty_mappings_are_skipped():
    source = {"form": {}, "metadata": {"form": {"product": "Deck"}}}
    assert locate_form_source(source) == {"product": "Deck"}
    assert extract_pitch_form(source).product == "Deck"


def test_non_mapping_sources_yield_empty_forms():
    assert extract_pitch_form(None).is_empty()
    assert extract_pitch_form("text").is_empty()
    assert extract_pitch_form([{"product": "x"}]).is_empty()


def test_fields_of_the_wrong_type_are_dropped():
    form = extract_campaign_form(
        {"form": {"goal": 3, "audience": "Founders", "channels": ["email", 7, None, "ads"], "kpis": ["ctr"]}}
    )
    assert form.goal is None
    assert form.audience == "Founders"
    assert form.channels == ["email", "ads"]
    assert form.kpis is None


def test_list_field_with_no_strings_stays_missing():
    form = extract_journey_form({"form": {"customerName": "ACME", "journeyStages": [1, 2]}})
    assert form.customer_name == "ACME"
    assert form.journey_stages is None


def test_camel_case_aliases_are_read():
    form = extract_campaign_form({"form": {"toneProfile": "Bold", "launchDate": "2024-06-01"}})
    assert form.tone_profile == "Bold"
    assert form.launch_date == "2024-06-01"


def test_response_form_wins_over_request():
    structured = {"form": {"product": "From response"}}
    request = {"form": {"product": "From request", "goal": "Campaign goal"}}
    forms = resolve_forms(structured, request)
    assert forms.pitch.product == "From response"
    # the response had no campaign fields, so the request is used
    assert forms.campaign.goal == "Campaign goal"


def test_summary_variant_prefers_agent_form():
    forms = FormSnapshots(campaign=CampaignForm(goal="Grow"), pitch=PitchForm(product="Deck"))
    assert forms.summary_variant("pitch") == "pitch"
    assert forms.summary_variant("trends") == "campaign"
    assert FormSnapshots().summary_variant("pitch") is None


def test_summary_items_keep_filled_values_only():
    forms = FormSnapshots(pitch=PitchForm(product="Deck", cta="  "))
    items, subtitle = summary_items(forms, "pitch")
    assert [item.key for item in items] == ["product"]
    assert "Product" in subtitle


def test_summary_subtitle_when_nothing_filled():
    assert summary_items(FormSnapshots(), "pitch") == ([], "Summary unavailable in the briefing.")
    assert summary_items(FormSnapshots(), "trends") == ([], "No summary provided.")


def test_signature_block_variants():
    forms = FormSnapshots(campaign=CampaignForm(goal="Uptime", channels=["ops"]))
    guardian = signature_block("ops_guardian", forms)
    assert guardian.variant == "guardian"
    assert ("Channels", "ops") in guardian.entries
    assert signature_block("trends", forms).title == "Campaign context"
    assert signature_block("trends", FormSnapshots()) is None
    assert signature_block("pitch", FormSnapshots(pitch=PitchForm(product="Deck"))).title == "Pitch DNA"
