from pydantic import BaseModel

class ChatMessageIn(BaseModel):
    message: str | None = None
