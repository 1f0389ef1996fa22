# app/services/openai_client.py
import logging
from typing import List, Dict, Optional

from openai import OpenAI

from app.core.config import settings

logger = logging.getLogger(__name__)

def call_openai(
    system_prompt: str,
    messages: List[Dict[str, str]],
    temperature: float,
    max_tokens: Optional[int] = None,
    json_mode: bool = False,
) -> str:
    """One blocking chat-completions round trip; returns the first choice's text.

    Raises on a missing key, transport errors and empty responses. Callers
    decide what a failure turns into.
    """
    if not settings.OPENAI_API_KEY:
        raise RuntimeError("OPENAI_API_KEY not set")

    client = OpenAI(api_key=settings.OPENAI_API_KEY)

    chat_messages = [{"role": "system", "content": system_prompt}] + messages
    kwargs = {
        "model": settings.OPENAI_MODEL,
        "messages": chat_messages,
        "temperature": temperature,
    }
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    try:
        response = client.chat.completions.create(**kwargs)
    except Exception as e:
        logger.error(f"OpenAI API failed: {e}")
        raise

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise RuntimeError("OpenAI returned an empty response")
    return content.strip()
