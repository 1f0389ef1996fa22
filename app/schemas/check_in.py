from pydantic import BaseModel, Field

class CheckInIn(BaseModel):
    mood: int = Field(..., ge=1, le=5)
    stressLevel: int = Field(..., ge=1, le=10)
    journalEntry: str | None = Field(default=None, max_length=20000)
