import json

import pytest

from conftest import FirstChoice, json_reply
from disinfo_engine.moderation.parser import (
    DEFAULT_RECOMMENDATIONS,
    DEFAULT_SOURCES,
    FALLBACK_EXPLANATION,
    EmbeddedJsonStrategy,
    KeywordStrategy,
    NeutralFallbackStrategy,
    ResponseParser,
    first_success,
    json_span,
)
from disinfo_engine.moderation.sanitize import OPENERS

parser = ResponseParser(FirstChoice())


def test_json_span_is_greedy():
    assert json_span('x {"a": {"b": 1}} y } z') == '{"a": {"b": 1}} y }'
    assert json_span("no braces here") is None
    assert json_span("} backwards {") is None


def test_embedded_json_fields_are_extracted():
    res = parser.parse(json_reply(explanation="As an AI, this is false."))
    assert res.classification == "Disinformation"
    assert res.content_type == "Claim"
    assert res.confidence == 92
    assert res.key_terms == ["flat earth"]
    assert res.verification_sources == ["Snopes.com"]
    assert res.recommendations == ["Check sources"]
    assert res.explanation == OPENERS["Disinformation"][0] + " , this is false."
    assert res.timestamp is None


def test_embedded_json_optional_lists_default_empty():
    raw = json.dumps({"classification": "Misleading", "confidence": 40, "explanation": "Half true."})
    res = parser.parse(raw)
    assert res.classification == "Misleading"
    assert res.content_type == "Mixed"
    assert res.key_terms == [] and res.verification_sources == [] and res.recommendations == []
    assert res.explanation == "Analysis complete. Half true."


def test_confidence_is_clamped_and_rounded():
    assert parser.parse(json_reply(confidence=150)).confidence == 100
    assert parser.parse(json_reply(confidence=-3)).confidence == 0
    assert parser.parse(json_reply(confidence="87.6")).confidence == 88


def test_label_case_is_normalised():
    assert parser.parse(json_reply(classification="nsfw content")).classification == "NSFW Content"


def test_no_json_uses_keyword_fallback():
    res = parser.parse("This claim is FALSE and misleading.")
    assert res.classification == "Disinformation"
    assert res.confidence == 75
    assert res.content_type == "Mixed"
    assert res.verification_sources == DEFAULT_SOURCES
    assert res.recommendations == DEFAULT_RECOMMENDATIONS
    assert res.explanation.startswith(OPENERS["Disinformation"][0] + " This claim is FALSE")


def test_keyword_fallback_without_keywords():
    res = parser.parse("Looks like an ordinary weather report.")
    assert res.classification == "Not Disinformation"
    assert res.confidence == 75


def test_malformed_json_uses_neutral_fallback():
    res = parser.parse('Here you go: {"classification": "Disinformation", confidence: }')
    assert res.classification == "Not Disinformation"
    assert res.confidence == 50
    assert res.explanation == FALLBACK_EXPLANATION
    assert res.verification_sources == ["Snopes.com", "FactCheck.org"]
    assert res.recommendations == ["Try analyzing again", "Check content manually"]


def test_unknown_label_is_a_contract_violation():
    res = parser.parse(json_reply(classification="Satire"))
    assert res.confidence == 50
    assert res.explanation == FALLBACK_EXPLANATION


def test_non_numeric_confidence_is_a_contract_violation():
    assert parser.parse(json_reply(confidence="very")).confidence == 50


def test_missing_explanation_is_a_contract_violation():
    raw = json.dumps({"classification": "Disinformation", "confidence": 80})
    assert parser.parse(raw).explanation == FALLBACK_EXPLANATION


def test_strategies_signal_a_miss_with_none():
    assert EmbeddedJsonStrategy().try_parse("plain prose") is None
    assert EmbeddedJsonStrategy().try_parse("{broken") is None
    assert KeywordStrategy().try_parse('{"a": 1}') is None
    assert NeutralFallbackStrategy().try_parse("anything") is not None


def test_first_success_returns_first_hit():
    class Miss:
        name = "miss"
        def try_parse(self, raw):
            return None

    tier, res = first_success([Miss(), NeutralFallbackStrategy(), KeywordStrategy()], "false")
    assert tier == "fallback"
    assert res.confidence == 50
    assert first_success([Miss()], "x") == ("", None)


def test_empty_reply_goes_to_keyword_tier():
    res = parser.parse("")
    assert res.classification == "Not Disinformation"
    assert res.confidence == 75


def test_unknown_content_type_defaults_to_mixed():
    res = parser.parse(json_reply(contentType="Rumour"))
    assert res.content_type == "Mixed"
    assert res.confidence == 92


@pytest.mark.parametrize("confidence", ["Infinity", "-Infinity", "1e999", "NaN"])
def test_non_finite_confidence_falls_back(confidence):
    raw = '{"classification": "Disinformation", "confidence": %s, "explanation": "x"}' % confidence
    res = parser.parse(raw)
    assert res.confidence == 50
    assert res.explanation == FALLBACK_EXPLANATION


@pytest.mark.parametrize("digits,expected", [("9" * 400, 100), ("-" + "9" * 400, 0)])
def test_huge_integer_confidence_is_clamped(digits, expected):
    raw = '{"classification": "Disinformation", "confidence": %s, "explanation": "x"}' % digits
    assert parser.parse(raw).confidence == expected


def test_huge_numeric_string_confidence_falls_back():
    assert parser.parse(json_reply(confidence="9" * 400)).confidence == 50
    assert parser.parse(json_reply(confidence="1e999")).confidence == 50
