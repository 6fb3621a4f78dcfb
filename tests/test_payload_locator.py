import json

from payload_locator import RecommendationLocator, find_recommendation_payload


def wrap(payload, levels):
    node = payload
    for _ in range(levels):
        node = {"wrapper": node}
    return node


def test_root_carrier_is_returned_as_is():
    payload = {"recomendacoes": []}
    assert find_recommendation_payload(payload) is payload


def test_optimized_sub_object_wins_over_deeper_matches():
    optimized = {"recomendacoes": [{"key": "opt"}]}
    value = {"optimized": optimized, "result": {"recomendacoes": [{"key": "res"}]}}
    assert find_recommendation_payload(value) is optimized


def test_outputs_entries_are_searched_through_data():
    data = {"recomendacoes": [{"key": "o"}]}
    value = {"outputs": [{"name": "first", "data": {"nothing": True}}, {"data": data}]}
    assert find_recommendation_payload(value) is data


def test_result_is_probed_before_other_keys():
    from_result = {"recomendacoes": [{"key": "r"}]}
    value = {"alpha": {"recomendacoes": [{"key": "a"}]}, "result": from_result}
    assert find_recommendation_payload(value) is from_result


def test_list_data_elements_are_searched():
    target = {"recomendacoes": [1]}
    value = {"data": [{"other": 1}, target]}
    assert find_recommendation_payload(value) is target


def test_embedded_json_string_is_searched():
    value = {"message": "result follows: " + json.dumps({"recomendacoes": [{"key": "s"}]})}
    found = find_recommendation_payload(value)
    assert found == {"recomendacoes": [{"key": "s"}]}


def test_non_list_field_does_not_count():
    assert find_recommendation_payload({"recomendacoes": "none"}) is None


def test_depth_six_is_reachable():
    assert find_recommendation_payload(wrap({"recomendacoes": []}, 6)) == {"recomendacoes": []}


def test_depth_seven_is_not_reachable():
    assert find_recommendation_payload(wrap({"recomendacoes": []}, 7)) is None


def test_very_deep_input_terminates_without_match():
    assert find_recommendation_payload(wrap({"recomendacoes": []}, 5000)) is None


def test_custom_depth_and_field():
    locator = RecommendationLocator(max_depth=1, field="items")
    assert locator.locate({"outer": {"items": [1]}}) == {"items": [1]}
    assert locator.locate({"outer": {"inner": {"items": [1]}}}) is None


def test_scalars_never_match():
    for value in (None, 3, 2.5, True, "plain text"):
        assert find_recommendation_payload(value) is None


def test_cyclic_input_terminates_without_match():
    cyclic = {"a": 1}
    cyclic["self"] = cyclic
    assert find_recommendation_payload(cyclic) is None


def test_outputs_entry_with_null_data_is_searched_itself():
    entry = {"data": None, "recomendacoes": [{"key": "out"}]}
    value = {"outputs": [entry], "result": {"recomendacoes": [{"key": "res"}]}}
    found = find_recommendation_payload(value)
    assert found is entry
