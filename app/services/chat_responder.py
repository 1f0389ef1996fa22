# app/services/chat_responder.py
import logging
import random

from app.core.config import settings
from app.services.crisis import CRISIS_RESOURCES, detect_crisis
from app.services.openai_client import call_openai

logger = logging.getLogger(__name__)

# ================= Persona =================

PERSONA_NAME = "MindEase AI"

PERSONA_SYSTEM_PROMPT = """You are MindEase AI, a compassionate mental health support assistant specifically designed for college students. Your role is to:

1. Provide empathetic, supportive responses focused on academic stress and college life
2. Offer practical coping strategies for exam anxiety, study stress, and academic pressure
3. Suggest evidence-based techniques like breathing exercises, time management, and study strategies
4. Encourage healthy habits and self-care practices
5. Recognize when to refer students to professional help
6. Use a warm, understanding tone that validates their feelings

Key guidelines:
- Always validate the student's feelings first
- Provide specific, actionable advice tailored to college life
- Include breathing exercises, study techniques, or mindfulness practices when appropriate
- If you detect crisis language, gently encourage professional help while being supportive
- Keep responses conversational and relatable to college students
- Focus on academic stress, exam anxiety, social pressures, and time management
- Remember you're supporting students during one of the most stressful times in their lives

Do not:
- Provide medical diagnoses or replace professional therapy
- Give advice outside your scope of mental health support
- Ignore potential crisis situations
- Be overly clinical or robotic in your responses"""

FALLBACK_RESPONSES = [
    "I'm here to listen and support you. While I'm having a technical issue right now, please know that what you're feeling is valid. If you're in crisis, please contact your campus counseling center or call 988.",
    "Thank you for sharing with me. Although I'm experiencing some technical difficulties, I want you to know that seeking support shows strength. Consider reaching out to a counselor or trusted friend.",
    "I appreciate you reaching out. While I'm having trouble responding fully right now, please remember that you're not alone in this. Your campus likely has counseling resources available 24/7.",
]

def get_fallback_reply() -> str:
    return random.choice(FALLBACK_RESPONSES)

# ================= Entry point =================

def generate_chat_response(user_message: str, user_id: int) -> str:
    """Reply to one user message. Never raises.

    The crisis-resources block is appended whenever the user's message
    trips the keyword detector, whichever path produced the reply.
    """
    user_message = user_message or ""
    try:
        reply = call_openai(
            PERSONA_SYSTEM_PROMPT,
            [{"role": "user", "content": user_message}],
            temperature=settings.OPENAI_CHAT_TEMPERATURE,
            max_tokens=settings.OPENAI_MAX_TOKENS,
        )
    except Exception as e:
        logger.error(f"Chat response failed for user_id={user_id}: {e}", exc_info=True)
        reply = get_fallback_reply()

    if detect_crisis(user_message):
        logger.warning(f"Crisis language in chat message from user_id={user_id}")
        reply += CRISIS_RESOURCES

    return reply
