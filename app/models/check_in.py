# app/models/check_in.py
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from app.db.base import Base

class CheckIn(Base):
    __tablename__ = "check_ins"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    mood = Column(Integer, nullable=False)          # 1-5
    stress_level = Column(Integer, nullable=False)  # 1-10
    journal_entry = Column(Text, nullable=True)

    # Filled in after the row exists; stays NULL if analysis never completes
    emotion_analysis = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
