import json

import pytest

from app.schemas.analysis import EmotionAnalysis
from app.services.emotion_analyzer import (
    DEFAULT_RECOMMENDATIONS,
    FALLBACK_RECOMMENDATIONS,
    analyze_emotion,
    build_analysis,
    clamp,
)


def model_result(**overrides):
    result = {
        "anxiety": 0.7,
        "stress": 0.8,
        "depression": 0.2,
        "determination": 0.6,
        "overall_sentiment": "negative",
        "confidence": 0.9,
        "highlighted_phrases": [
            {"text": "organic chemistry final", "emotion": "anxiety", "intensity": 0.8},
        ],
        "crisis_indicators": False,
        "recommendations": ["Break revision into 25 minute blocks"],
    }
    result.update(overrides)
    return result


def test_parses_model_response(fake_openai):
    fake_openai.reply_with(json.dumps(model_result()))

    analysis = analyze_emotion("My organic chemistry final is tomorrow and I'm panicking")

    assert isinstance(analysis, EmotionAnalysis)
    assert analysis.anxiety == 0.7
    assert analysis.overall_sentiment == "negative"
    assert analysis.highlighted_phrases[0].text == "organic chemistry final"
    assert analysis.recommendations == ["Break revision into 25 minute blocks"]
    assert analysis.crisis_indicators is False


def test_request_shape(fake_openai):
    fake_openai.reply_with(json.dumps(model_result()))

    analyze_emotion("Too many deadlines this week")

    call = fake_openai.calls[0]
    assert call["json_mode"] is True
    assert call["temperature"] == pytest.approx(0.3)
    assert "JSON" in call["system_prompt"]
    assert call["messages"] == [{
        "role": "user",
        "content": 'Analyze this journal entry from a college student: "Too many deadlines this week"',
    }]


def test_scores_are_clamped(fake_openai):
    fake_openai.reply_with(json.dumps(model_result(
        anxiety=5, stress=-3, depression=1.5, determination=-0.1, confidence=42,
        highlighted_phrases=[{"text": "x", "emotion": "stress", "intensity": 7}],
    )))

    analysis = analyze_emotion("rough week")

    assert analysis.anxiety == 1.0
    assert analysis.stress == 0.0
    assert analysis.depression == 1.0
    assert analysis.determination == 0.0
    assert analysis.confidence == 1.0
    assert analysis.highlighted_phrases[0].intensity == 1.0


def test_local_crisis_detection_overrides_model(fake_openai):
    fake_openai.reply_with(json.dumps(model_result(crisis_indicators=False)))

    analysis = analyze_emotion("Honestly I feel hopeless about everything")

    assert analysis.crisis_indicators is True


def test_model_crisis_flag_is_kept_without_keywords(fake_openai):
    fake_openai.reply_with(json.dumps(model_result(crisis_indicators=True)))

    analysis = analyze_emotion("I don't see the point of anything anymore")

    assert analysis.crisis_indicators is True


def test_empty_recommendations_get_defaults(fake_openai):
    fake_openai.reply_with(json.dumps(model_result(recommendations=[])))

    analysis = analyze_emotion("ok day")

    assert analysis.recommendations == DEFAULT_RECOMMENDATIONS


def test_missing_fields_get_defaults(fake_openai):
    fake_openai.reply_with(json.dumps({"overall_sentiment": "ecstatic"}))

    analysis = analyze_emotion("fine")

    assert analysis.anxiety == 0.0
    assert analysis.confidence == 0.5
    assert analysis.overall_sentiment == "neutral"
    assert analysis.highlighted_phrases == []
    assert analysis.recommendations == DEFAULT_RECOMMENDATIONS


def test_fallback_when_service_unreachable(fake_openai):
    fake_openai.fail_with(ConnectionError("no route to host"))

    analysis = analyze_emotion("Group project is going fine")

    assert analysis.anxiety == 0.5
    assert analysis.stress == 0.5
    assert analysis.depression == 0.3
    assert analysis.determination == 0.4
    assert analysis.confidence == 0.3
    assert analysis.overall_sentiment == "neutral"
    assert len(analysis.highlighted_phrases) == 1
    assert analysis.crisis_indicators is False
    assert analysis.recommendations == FALLBACK_RECOMMENDATIONS


def test_fallback_still_detects_crisis(fake_openai):
    fake_openai.fail_with(ConnectionError("no route to host"))

    analysis = analyze_emotion("I want to kill myself")

    assert analysis.crisis_indicators is True


@pytest.mark.parametrize("content", ["not json at all", "[1, 2, 3]", '"just a string"'])
def test_fallback_on_unparseable_response(fake_openai, content):
    fake_openai.reply_with(content)

    analysis = analyze_emotion("long day")

    assert analysis.recommendations == FALLBACK_RECOMMENDATIONS


def test_empty_text_returns_valid_analysis():
    analysis = analyze_emotion("")

    assert analysis.recommendations
    assert analysis.crisis_indicators is False


def test_malformed_phrases_are_dropped():
    analysis = build_analysis(model_result(highlighted_phrases=[
        "loose string",
        {"emotion": "stress"},
        {"text": "lab report", "intensity": "high"},
    ]), local_crisis=False)

    assert len(analysis.highlighted_phrases) == 1
    assert analysis.highlighted_phrases[0].text == "lab report"
    assert analysis.highlighted_phrases[0].emotion == "unknown"
    assert analysis.highlighted_phrases[0].intensity == 0.0


@pytest.mark.parametrize("value,expected", [
    (0.5, 0.5), (5, 1.0), (-3, 0.0), ("0.25", 0.25), ("abc", 0.0), (None, 0.0), (True, 0.0),
    (float("nan"), 0.0),
])
def test_clamp(value, expected):
    assert clamp(value) == expected


@pytest.mark.parametrize("flag", ["false", "False", "no", "0", 0, None, "", []])
def test_model_crisis_flag_only_counts_when_true(fake_openai, flag):
    fake_openai.reply_with(json.dumps(model_result(crisis_indicators=flag)))

    analysis = analyze_emotion("Aced my exam")

    assert analysis.crisis_indicators is False


@pytest.mark.parametrize("flag", [True, "true", "TRUE", " True "])
def test_model_crisis_flag_accepts_true_spellings(fake_openai, flag):
    fake_openai.reply_with(json.dumps(model_result(crisis_indicators=flag)))

    analysis = analyze_emotion("Aced my exam")

    assert analysis.crisis_indicators is True
