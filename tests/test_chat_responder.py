import pytest

from app.services.chat_responder import FALLBACK_RESPONSES, generate_chat_response
from app.services.crisis import CRISIS_RESOURCES


def test_returns_model_reply(fake_openai):
    fake_openai.reply_with("That sounds like a lot. Want to try a short breathing exercise?")

    reply = generate_chat_response("I have three exams this week", 1)

    assert reply == "That sounds like a lot. Want to try a short breathing exercise?"
    call = fake_openai.calls[0]
    assert "MindEase AI" in call["system_prompt"]
    assert call["messages"] == [{"role": "user", "content": "I have three exams this week"}]
    assert call["temperature"] == pytest.approx(0.7)
    assert call["max_tokens"] == 500


def test_crisis_block_appended_on_success(fake_openai):
    fake_openai.reply_with("I'm really glad you told me.")

    reply = generate_chat_response("I keep thinking about suicide", 1)

    assert reply == "I'm really glad you told me." + CRISIS_RESOURCES
    assert "988" in reply
    assert "741741" in reply


def test_crisis_block_checks_input_not_reply(fake_openai):
    fake_openai.reply_with("Please don't give up, you're doing well.")

    reply = generate_chat_response("Finals are close", 1)

    assert CRISIS_RESOURCES not in reply


def test_fallback_on_failure(fake_openai):
    fake_openai.fail_with(TimeoutError("read timed out"))

    reply = generate_chat_response("I'm stressed about my thesis", 1)

    assert reply in FALLBACK_RESPONSES


def test_crisis_block_appended_on_fallback(fake_openai):
    fake_openai.fail_with(TimeoutError("read timed out"))

    reply = generate_chat_response("SUICIDE feels like the only way", 1)

    assert reply.endswith(CRISIS_RESOURCES)
    assert reply[: -len(CRISIS_RESOURCES)] in FALLBACK_RESPONSES
