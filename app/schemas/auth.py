from pydantic import BaseModel, EmailStr, Field

class JoinIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
