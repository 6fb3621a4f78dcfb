import json

from json_values import extract_json_candidate, safe_parse_json, safe_stringify
from response_normalization import (
    briefing_markdown,
    normalize_run_response,
    recommendation_entries,
)


def test_plain_object_with_recommendations():
    raw = {"recomendacoes": [{"key": "a", "score": 0.9, "tatica": "Do X"}]}
    normalized = normalize_run_response(raw)
    assert normalized.structured == raw
    assert normalized.text == safe_stringify(raw)
    assert normalized.has_structured


def test_fenced_json_string_is_unwrapped():
    raw = "```json\n{\"recomendacoes\":[]}\n```"
    normalized = normalize_run_response(raw)
    assert normalized.structured == {"recomendacoes": []}
    assert normalized.text == json.dumps({"recomendacoes": []}, indent=2)


def test_prose_around_json_is_ignored():
    raw = 'Here is the plan:\n{"recomendacoes": [{"key": "b"}]}\nThanks!'
    normalized = normalize_run_response(raw)
    assert recommendation_entries(normalized.structured) == [{"key": "b"}]


def test_plain_text_has_no_structured_output():
    normalized = normalize_run_response("# Heading\n\nJust prose.")
    assert normalized.structured is None
    assert normalized.text == "# Heading\n\nJust prose."
    assert not normalized.has_structured


def test_absent_response_yields_empty_pair():
    normalized = normalize_run_response(None)
    assert normalized.structured == {}
    assert normalized.text == ""


def test_arrays_and_scalars_become_text():
    assert normalize_run_response([1, 2]).text == "[\n  1,\n  2\n]"
    assert normalize_run_response([1, 2]).structured is None
    assert normalize_run_response(42).text == "42"
    assert normalize_run_response(True).structured is None


def test_malformed_json_falls_back_to_text():
    raw = '{"recomendacoes": [1, 2,'
    normalized = normalize_run_response(raw)
    assert normalized.structured is None
    assert normalized.text == raw


def test_non_standard_constants_are_rejected():
    normalized = normalize_run_response('{"score": NaN}')
    assert normalized.structured is None


def test_output_text_is_parsed_and_outer_fields_win():
    inner = {"recomendacoes": [{"key": "a"}], "agent": "inner", "usage": {"total_tokens": 10}}
    raw = {"outputText": json.dumps(inner), "agent": "outer"}
    normalized = normalize_run_response(raw)
    assert normalized.structured["agent"] == "outer"
    assert normalized.structured["usage"] == {"total_tokens": 10}
    assert normalized.structured["recomendacoes"] == [{"key": "a"}]
    assert normalized.structured["outputText"] == raw["outputText"]
    assert normalized.text == safe_stringify(inner)


def test_output_text_without_json_keeps_object():
    raw = {"outputText": "plain words", "status": "ok"}
    normalized = normalize_run_response(raw)
    assert normalized.structured == raw


def test_nested_payload_is_lifted_without_losing_fields():
    raw = {
        "agent": "trends",
        "outputs": [{"data": {"recomendacoes": [{"key": "x"}], "breafing_markdown": "## 1. Resumo e KPIs"}}],
    }
    normalized = normalize_run_response(raw)
    assert normalized.structured["agent"] == "trends"
    assert normalized.structured["outputs"] == raw["outputs"]
    assert normalized.structured["recomendacoes"] == [{"key": "x"}]
    assert briefing_markdown(normalized.structured) == "## 1. Resumo e KPIs"


def test_normalizing_exported_structured_output_is_stable():
    responses = [
        {"recomendacoes": [{"key": "a", "score": 0.4}], "memory": {"shortTerm": [1]}},
        "```json\n{\"recomendacoes\": [], \"usage\": {\"total_tokens\": 3}}\n```",
        {"outputText": "{\"recomendacoes\": [{\"key\": \"z\"}]}", "agent": "pitch"},
        {"result": {"optimized": {"recomendacoes": [{"key": "o"}]}}},
    ]
    for raw in responses:
        first = normalize_run_response(raw).structured
        second = normalize_run_response(safe_stringify(first)).structured
        assert second == first


def test_briefing_prefers_legacy_key():
    structured = {"breafing_markdown": "legacy", "briefing_markdown": "current"}
    assert briefing_markdown(structured) == "legacy"
    assert briefing_markdown({"briefing_markdown": "current"}) == "current"
    assert briefing_markdown({"breafing_markdown": "   "}) is None
    assert briefing_markdown(None) is None


def test_extract_json_candidate_requires_braces():
    assert extract_json_candidate("no json here") is None
    assert extract_json_candidate("} backwards {") is None
    assert extract_json_candidate("```\n{\"a\": 1}\n```") == '{"a": 1}'


def test_cyclic_object_keeps_fields_and_falls_back_to_repr_text():
    cyclic = {"a": 1}
    cyclic["self"] = cyclic
    normalized = normalize_run_response(cyclic)
    assert normalized.structured["a"] == 1
    assert "{...}" in normalized.text


def test_out_of_range_numbers_reject_embedded_json():
    raw = '{"recomendacoes": [], "x": 1e400}'
    normalized = normalize_run_response(raw)
    assert normalized.structured is None
    assert normalized.text == raw
    assert safe_parse_json('{"x": 1e400}') is None
    assert safe_parse_json('{"x": 1.5e3}') == {"x": 1500.0}
