from typing import List, Literal
from pydantic import BaseModel, Field

Sentiment = Literal["positive", "negative", "neutral"]

class HighlightedPhrase(BaseModel):
    text: str
    emotion: str
    intensity: float = Field(ge=0.0, le=1.0)

class EmotionAnalysis(BaseModel):
    anxiety: float = Field(ge=0.0, le=1.0)
    stress: float = Field(ge=0.0, le=1.0)
    depression: float = Field(ge=0.0, le=1.0)
    determination: float = Field(ge=0.0, le=1.0)
    overall_sentiment: Sentiment = "neutral"
    confidence: float = Field(ge=0.0, le=1.0)
    highlighted_phrases: List[HighlightedPhrase] = Field(default_factory=list)
    crisis_indicators: bool = False
    recommendations: List[str] = Field(default_factory=list)
