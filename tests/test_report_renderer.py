import json
from datetime import datetime

import pytest

from renderers import available_renderers, get_renderer
from renderers.context import ReportMode, build_report_document, resolve_theme, timeline_progress
from renderers.templates import sanitize_text
from report_builder import build_report, normalize_view


def sample_run(**overrides):
    run = {
        "id": "run-1234567890",
        "agent": "trends",
        "status": "success",
        "request": {},
        "response": {
            "recomendacoes": [{"key": "a", "score": 0.9, "tatica": "Do X", "rationale": "line one\nline two"}],
            "usage": {"total_tokens": 1500, "prompt_tokens": 1000, "completion_tokens": 500, "model": "gpt-x"},
            "diagnostico": {"total_prev_runs": 4, "exploracao_pct": 25, "filtrados_adotados": 1, "filtrados_rejeitados": 2},
        },
        "costCents": 120,
        "meta": {"tookMs": 850, "traceId": "trace-1"},
    }
    run.update(overrides)
    return run


def sample_briefing():
    return "\n".join(
        [
            "## 1. Resumo e KPIs",
            "Revenue focus for Q3.",
            "## 2. Timeline",
            "| W1 | Setup | Configure |",
            "| W2 | Run | Execute |",
            "## 5. Próximos passos com datas-chave",
            "- Book the pilot",
            "## 7. Insights automatizados",
            "- Insight alpha",
            "- Insight beta",
        ]
    )


def test_summary_omitted_without_form_fields():
    document = build_report_document(sample_run())
    assert "summary" not in document.section_keys()
    assert document.section_keys() == ["recommendations", "insights", "cta", "links", "audit"]
    html = get_renderer("report_html").render(document)
    assert "Prioritized recommendations" in html
    assert "Strategic summary" not in html


def test_full_briefing_renders_every_section():
    response = dict(sample_run()["response"], breafing_markdown=sample_briefing())
    run = sample_run(response=response, request={"form": {"goal": "Grow", "channels": ["email"]}})
    document = build_report_document(run)
    assert document.section_keys() == [
        "summary",
        "signature",
        "recommendations",
        "timeline",
        "insights",
        "cta",
        "links",
        "audit",
    ]
    html = build_report(run).html
    assert "Revenue focus for Q3." in html
    assert "Book the pilot" in html
    assert "Insight alpha" in html
    assert "Campaign context" in html
    assert "width:50%" in html and "width:100%" in html


def test_default_insights_and_cta_when_briefing_is_silent():
    html = build_report(sample_run()).html
    assert "Enabling DLQs and health checks" in html
    assert "Use the deck links and the supervised pilot" in html


def test_recommendation_row_styles():
    memory = {"a": {"score": 0.5}}
    html = build_report(sample_run(), memory=memory).html
    assert '<tr class="critical">' in html
    assert '<span class="delta delta-positive">+0.40</span>' in html
    assert "line one<br />line two" in html


def test_empty_recommendations_show_muted_notice():
    run = sample_run(response={"recomendacoes": []})
    document = build_report_document(run)
    section = document.section("recommendations")
    assert section.heading is None
    assert "No structured recommendations available." in section.body


def test_agent_text_is_escaped():
    response = {"recomendacoes": [{"key": "x", "tatica": "<script>alert(1)</script>"}]}
    html = build_report(sample_run(response=response, agent="<b>agent</b>")).html
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "<b>agent</b>" not in html


def test_sanitize_text_normalizes_and_escapes():
    assert sanitize_text(None) == ""
    assert sanitize_text('a & "b"') == "a &amp; &#34;b&#34;"
    assert sanitize_text("é") == "é"


def test_editable_and_static_modes():
    static_html = build_report(sample_run(), mode="static").html
    editable_html = build_report(sample_run(), mode=ReportMode.EDITABLE).html
    assert "contenteditable" not in static_html
    assert 'id="toggle-edit"' not in static_html
    assert "data-editable-root" in editable_html
    assert 'data-editable contenteditable="false"' in editable_html
    assert 'id="save-html"' in editable_html
    assert 'id="print-pdf"' in static_html and 'id="print-pdf"' in editable_html


def test_invalid_mode_is_rejected():
    with pytest.raises(ValueError):
        build_report_document(sample_run(), mode="draft")


def test_theme_resolution():
    assert resolve_theme("pitch")["id"] == "pitch"
    assert resolve_theme("J_360")["id"] == "j360"
    assert resolve_theme("ops_guardian_v2")["id"] == "guardian"
    assert resolve_theme("trends")["id"] == "default"
    html = build_report(sample_run(agent="ops_guardian")).html
    assert 'class="theme-guardian"' in html


def test_timeline_progress_bounds():
    assert timeline_progress(0, 3) == 33
    assert timeline_progress(2, 3) == 100
    assert timeline_progress(0, 20) == 10
    assert timeline_progress(0, 0) == 10


def test_header_metrics_and_caption():
    document = build_report_document(sample_run())
    assert document.diagnostic_caption == (
        "prevRuns: 4 • exploration: 25% • adopted filtered: 1 • rejected filtered: 2"
    )
    labels = [badge["label"] for badge in document.badges]
    assert labels == ["success", "Cost R$ 1,20", "Tokens 1.500", "Time 850 ms"]


def test_missing_diagnostics_caption():
    document = build_report_document(sample_run(response={"recomendacoes": []}))
    assert document.diagnostic_caption == "No history available."


def test_footer_stamp_uses_generation_time():
    stamp = datetime(2024, 5, 1, 14, 30)
    document = build_report_document(sample_run(), generated_at=stamp)
    assert document.footer_stamp == "01/05/2024 14:30 · Page 1 of 1"


def test_auto_print_script():
    assert "window.addEventListener('load'" in build_report(sample_run(), auto_print=True).html
    assert "window.addEventListener('load'" not in build_report(sample_run()).html


def test_text_only_run_uses_request_fallback():
    run = sample_run(
        agent="pitch",
        response="The pitch narrative in plain words.",
        request={"metadata": {"form": {"product": "Widget", "cta": "Book a demo"}}},
    )
    document = build_report_document(run)
    assert "timeline" in document.section_keys()
    assert document.section("signature").heading == "Pitch DNA"
    html = get_renderer("html").render(document)
    assert "Week 1" in html
    assert "Text summary" in html
    assert "Product / solution: Widget" in html


def test_json_export_keeps_original_keys():
    artifacts = build_report(sample_run())
    exported = json.loads(artifacts.json_export)
    assert exported["costCents"] == 120
    assert exported["meta"] == {"tookMs": 850, "traceId": "trace-1"}
    assert exported["response"]["recomendacoes"][0]["tatica"] == "Do X"
    assert artifacts.json_filename == "run-run-1234567890.json"
    assert artifacts.html_filename == "run-run-1234567890.html"


def test_renderer_registry():
    assert available_renderers() == ["report_html", "json_export"]
    assert get_renderer("JSON").name == "json_export"
    with pytest.raises(ValueError):
        get_renderer("pdf")


def test_normalize_view_matches_report_input():
    normalized = normalize_view(sample_run(response='```json\n{"recomendacoes": []}\n```'))
    assert normalized.structured == {"recomendacoes": []}
    assert normalized.text == '{\n  "recomendacoes": []\n}'


def nested_response(levels):
    node = {"leaf": True}
    for _ in range(levels):
        node = {"wrapper": node}
    return node


def test_very_deep_response_is_exported():
    response = nested_response(300)
    artifacts = build_report(sample_run(response=response))
    exported = json.loads(artifacts.json_export)
    assert exported["response"] == response
    assert exported["costCents"] == 120
    assert exported["meta"] == {"tookMs": 850, "traceId": "trace-1"}
    assert "<html" in artifacts.html


def test_cyclic_response_is_exported_as_text():
    cyclic = {"a": 1}
    cyclic["self"] = cyclic
    artifacts = build_report(sample_run(response=cyclic))
    exported = json.loads(artifacts.json_export)
    assert isinstance(exported["response"], str)
    assert "{...}" in exported["response"]
    assert exported["id"] == "run-1234567890"
    assert "<html" in artifacts.html
