# app/services/emotion_analyzer.py
import json
import logging
from typing import Any, Dict, List

from app.core.config import settings
from app.schemas.analysis import EmotionAnalysis, HighlightedPhrase
from app.services.crisis import detect_crisis
from app.services.openai_client import call_openai

logger = logging.getLogger(__name__)

# ============================================================================
# Prompt
# ============================================================================

ANALYSIS_SYSTEM_PROMPT = """You are an expert in analyzing college student mental health and academic stress. Analyze the provided journal entry and return a detailed emotional analysis in JSON format.

Focus on:
- Academic stress indicators (exam anxiety, study pressure, performance worry)
- General emotional states (anxiety, depression, stress, determination)
- Specific phrases that indicate emotional states
- Crisis indicators (self-harm, suicidal ideation, hopelessness)
- Actionable recommendations for college students

Respond with this exact JSON structure:
{
  "anxiety": number (0-1),
  "stress": number (0-1),
  "depression": number (0-1),
  "determination": number (0-1),
  "overall_sentiment": "positive" | "negative" | "neutral",
  "confidence": number (0-1),
  "highlighted_phrases": [
    {
      "text": "specific phrase from journal",
      "emotion": "emotion detected",
      "intensity": number (0-1)
    }
  ],
  "crisis_indicators": boolean,
  "recommendations": ["specific actionable advice for college students"]
}"""

SENTIMENTS = ("positive", "negative", "neutral")

DEFAULT_RECOMMENDATIONS = [
    "Consider taking regular study breaks",
    "Practice deep breathing exercises",
    "Reach out to campus counseling services if needed",
]

FALLBACK_RECOMMENDATIONS = [
    "I'm having trouble analyzing your entry right now, but I'm here to help",
    "Consider speaking with a counselor about your feelings",
    "Remember that seeking help is a sign of strength",
]

# ============================================================================
# Normalization
# ============================================================================

def clamp(value: Any, default: float = 0.0) -> float:
    """Coerce to float and truncate into [0, 1]. Non-numbers become the default."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number:  # NaN
        return default
    return min(max(number, 0.0), 1.0)

def _parse_phrases(raw: Any) -> List[HighlightedPhrase]:
    if not isinstance(raw, list):
        return []
    phrases = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("text"):
            continue
        phrases.append(HighlightedPhrase(
            text=str(item["text"]),
            emotion=str(item.get("emotion") or "unknown"),
            intensity=clamp(item.get("intensity")),
        ))
    return phrases

def _parse_recommendations(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [str(r) for r in raw if isinstance(r, str) and r.strip()]

def _model_flag(value: Any) -> bool:
    """Only a real true (or the string "true") counts; "false", "no", 0 do not."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True

def build_analysis(result: Dict[str, Any], local_crisis: bool) -> EmotionAnalysis:
    """Turn the model's JSON object into a valid EmotionAnalysis.

    Scores are clamped rather than rejected, and the local keyword verdict
    can only raise crisis_indicators, never clear it.
    """
    if not isinstance(result, dict):
        raise ValueError(f"Expected a JSON object, got {type(result).__name__}")

    sentiment = result.get("overall_sentiment")
    if sentiment not in SENTIMENTS:
        sentiment = "neutral"

    recommendations = _parse_recommendations(result.get("recommendations"))

    return EmotionAnalysis(
        anxiety=clamp(result.get("anxiety")),
        stress=clamp(result.get("stress")),
        depression=clamp(result.get("depression")),
        determination=clamp(result.get("determination")),
        overall_sentiment=sentiment,
        confidence=clamp(result.get("confidence"), default=0.5),
        highlighted_phrases=_parse_phrases(result.get("highlighted_phrases")),
        crisis_indicators=_model_flag(result.get("crisis_indicators")) or local_crisis,
        recommendations=recommendations or list(DEFAULT_RECOMMENDATIONS),
    )

def fallback_analysis(journal_text: str) -> EmotionAnalysis:
    """Generic mid-range result used when the model can't be reached or parsed."""
    return EmotionAnalysis(
        anxiety=0.5,
        stress=0.5,
        depression=0.3,
        determination=0.4,
        overall_sentiment="neutral",
        confidence=0.3,
        highlighted_phrases=[
            HighlightedPhrase(
                text="Unable to analyze specific phrases",
                emotion="unknown",
                intensity=0.3,
            )
        ],
        crisis_indicators=detect_crisis(journal_text),
        recommendations=list(FALLBACK_RECOMMENDATIONS),
    )

# ============================================================================
# Entry point
# ============================================================================

def analyze_emotion(journal_text: str) -> EmotionAnalysis:
    """
    Score a journal entry for anxiety, stress, depression and determination.

    Never raises: any failure talking to or parsing the model yields
    fallback_analysis(), which still runs keyword crisis detection.

    Args:
        journal_text: the raw journal entry

    Returns:
        A structurally valid EmotionAnalysis
    """
    journal_text = journal_text or ""
    try:
        local_crisis = detect_crisis(journal_text)

        content = call_openai(
            ANALYSIS_SYSTEM_PROMPT,
            [{
                "role": "user",
                "content": f'Analyze this journal entry from a college student: "{journal_text}"',
            }],
            temperature=settings.OPENAI_ANALYSIS_TEMPERATURE,
            json_mode=True,
        )
        analysis = build_analysis(json.loads(content), local_crisis)

        if local_crisis:
            logger.warning("Crisis keywords found in journal entry")
        return analysis

    except Exception as e:
        logger.error(f"Emotion analysis failed, using fallback: {e}", exc_info=True)
        return fallback_analysis(journal_text)
