import pytest

from app.services.crisis import CRISIS_KEYWORDS, detect_crisis


@pytest.mark.parametrize("keyword", CRISIS_KEYWORDS)
def test_every_keyword_is_detected_in_any_case(keyword):
    assert detect_crisis(f"lately {keyword} is all I think about")
    assert detect_crisis(keyword.upper())
    assert detect_crisis(keyword.title())


@pytest.mark.parametrize("text", [
    "",
    "Exams are stressful but I'm managing",
    "I had a great day at the library",
    "Feeling tired after the chemistry midterm",
])
def test_text_without_keywords(text):
    assert detect_crisis(text) is False


def test_none_is_treated_as_empty():
    assert detect_crisis(None) is False


def test_substring_inside_longer_word_still_matches():
    # "hopeless" inside "hopelessness", "give up" across "forgive upfront"
    assert detect_crisis("a sense of hopelessness")
    assert detect_crisis("I forgive upfront")
