from datetime import datetime
from pydantic import BaseModel, Field

class ExamIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    subject: str = Field(..., min_length=1, max_length=200)
    date: datetime

class ExamUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    subject: str | None = Field(default=None, min_length=1, max_length=200)
    date: datetime | None = None
    completed: bool | None = None
