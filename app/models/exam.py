# app/models/exam.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean
from app.db.base import Base

class Exam(Base):
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    subject = Column(String(200), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    completed = Column(Boolean, default=False, nullable=False)
