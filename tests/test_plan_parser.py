"""Tests for resilient plan JSON extraction."""

import json

import pytest

from diet_planner.domain.errors import PlanDecodeError
from diet_planner.services.plan_parser import (
    drop_trailing_commas,
    extract_candidates,
    extract_first_object,
    extract_json_object,
    parse_plan,
    preprocess,
    repair_json_text,
    strip_wrappers,
)
from tests.conftest import plan_json, plan_payload


def test_parse_plain_plan() -> None:
    plan = parse_plan(plan_json())

    assert len(plan.daily_plans) == 7
    assert plan.daily_plans[0].day == "Monday"
    assert plan.shopping_list[0].amount == "100g"
    assert plan.recipes[0].dish_name == "Pan-seared chicken breast"


def test_parse_plan_wrapped_in_prose_and_fence() -> None:
    raw = f"Here is your plan:\n```json\n{plan_json()}\n```\nEnjoy!"

    plan = parse_plan(raw)

    assert len(plan.daily_plans) == 7


def test_extract_object_after_prose() -> None:
    raw = 'Sure! Here you go: {"a": 1} Hope this helps.'

    assert extract_json_object(raw) == {"a": 1}


def test_raw_newline_inside_string_is_escaped() -> None:
    raw = '{"steps": ["line one\nline two"]}'

    assert extract_json_object(raw) == {"steps": ["line one\nline two"]}


def test_truncated_output_closes_array_then_object() -> None:
    raw = '{"dailyPlans": [{"day": "Monday"}, {"day": "Tuesday"}'

    assert extract_json_object(raw) == {
        "dailyPlans": [{"day": "Monday"}, {"day": "Tuesday"}]
    }


def test_truncated_inside_string_is_closed() -> None:
    raw = '{"seasonings": ["salt", "soy sau'

    assert extract_json_object(raw) == {"seasonings": ["salt", "soy sau"]}


def test_missing_comma_between_lines_is_inserted() -> None:
    raw = '{"seasonings": [\n"salt"\n"pepper"\n]}'

    assert extract_json_object(raw) == {"seasonings": ["salt", "pepper"]}


def test_trailing_commas_and_smart_quotes_are_tolerated() -> None:
    raw = "{“seasonings”: [“salt”, “pepper”,],}"

    assert extract_json_object(raw) == {"seasonings": ["salt", "pepper"]}


def test_curly_quotes_inside_values_are_preserved() -> None:
    payload = {"name": "他说“好吃”的鸡胸肉", "note": "it’s fine"}
    raw = f"```json\n{json.dumps(payload, ensure_ascii=False)}\n```"

    assert extract_json_object(raw) == payload


def test_comma_before_bracket_inside_value_is_preserved() -> None:
    payload = {"steps": ["salt, ]", "oil,}"]}

    assert extract_json_object(json.dumps(payload)) == payload


def test_trailing_comma_removal_skips_string_contents() -> None:
    text = '{"a": ["x, ]", "y",], "b": "\\",}",}'

    assert json.loads(drop_trailing_commas(text)) == {"a": ["x, ]", "y"], "b": '",}'}


def test_strip_wrappers_keeps_json_text_untouched() -> None:
    raw = "```json\n{“a”: [1,]}\n```"

    assert strip_wrappers(raw) == "{“a”: [1,]}"


def test_byte_order_mark_is_stripped() -> None:
    assert extract_json_object('\ufeff{"a": 1}') == {"a": 1}


def test_text_without_braces_fails_with_diagnostic() -> None:
    raw = "I cannot help with that."

    with pytest.raises(PlanDecodeError) as exc_info:
        extract_json_object(raw)

    message = str(exc_info.value)
    assert "could not be parsed as JSON" in message
    assert f"Raw response length: {len(raw)} characters" in message
    assert "Tried 2 strategies" in message


def test_empty_text_fails() -> None:
    with pytest.raises(PlanDecodeError, match="no JSON candidate found"):
        extract_json_object("   ")


def test_top_level_array_is_rejected() -> None:
    with pytest.raises(PlanDecodeError):
        extract_json_object("[1, 2, 3]")


def test_object_missing_plan_fields_fails_validation() -> None:
    with pytest.raises(PlanDecodeError, match="weekly plan structure"):
        parse_plan('{"dailyPlans": []}')


def test_extra_fields_are_ignored() -> None:
    payload = plan_payload(days=1)
    payload["notes"] = "extra"

    plan = parse_plan(json.dumps(payload))

    assert len(plan.daily_plans) == 1


def test_preprocess_removes_fences_and_trailing_commas() -> None:
    assert preprocess('```json\n{"a": [1, 2,]}\n```') == '{"a": [1, 2]}'


def test_candidates_are_distinct_and_ordered() -> None:
    text = 'prefix {"a": {"b": 1}} middle {"c": 2} suffix'

    candidates = extract_candidates(text)

    assert candidates == [
        text,
        '{"a": {"b": 1}} middle {"c": 2}',
        '{"a": {"b": 1}}',
    ]


def test_first_object_ignores_braces_in_strings() -> None:
    text = 'x {"a": "}{", "b": "\\"}"} y'

    assert extract_first_object(text) == '{"a": "}{", "b": "\\"}"}'


def test_first_object_none_when_unbalanced() -> None:
    assert extract_first_object('{"a": 1') is None


def test_repair_leaves_valid_json_parseable() -> None:
    text = '{"a": [1, 2], "b": "x"}'

    assert json.loads(repair_json_text(text)) == {"a": [1, 2], "b": "x"}


def test_repair_drops_dangling_backslash() -> None:
    repaired = repair_json_text('{"a": "abc\\')

    assert json.loads(repaired) == {"a": "abc"}
