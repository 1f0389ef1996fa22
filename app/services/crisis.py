# app/services/crisis.py
from typing import Optional

# Phrases that suggest self-harm or suicidal ideation. Matching is a plain
# case-insensitive substring test, so "give up" also fires inside "forgive upon".
CRISIS_KEYWORDS = [
    "kill myself", "suicide", "end it all", "no point living", "worthless", "hopeless",
    "self-harm", "hurt myself", "give up", "can't go on", "want to die", "better off dead",
    "no way out", "everyone would be better without me",
]

CRISIS_RESOURCES = (
    "\n\n🆘 I'm concerned about you. Please reach out for immediate support:\n"
    "• Crisis Text Line: Text HOME to 741741\n"
    "• National Suicide Prevention Lifeline: 988\n"
    "• Campus Counseling Center: Available 24/7\n\n"
    "You matter, and help is available. Please don't hesitate to reach out."
)

def detect_crisis(text: Optional[str]) -> bool:
    """True when the text contains any crisis phrase, ignoring case."""
    lowered = (text or "").lower()
    return any(keyword.lower() in lowered for keyword in CRISIS_KEYWORDS)
