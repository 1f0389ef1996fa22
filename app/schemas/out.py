# app/schemas/out.py - JSON shapes returned to the client (camelCase)
from typing import Any, Dict

from app.core.timezone import format_time
from app.models.alert import Alert
from app.models.chat import ChatMessage
from app.models.check_in import CheckIn
from app.models.exam import Exam
from app.models.user import User


def user_out(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "createdAt": format_time(user.created_at),
    }


def check_in_out(check_in: CheckIn) -> Dict[str, Any]:
    return {
        "id": check_in.id,
        "userId": check_in.user_id,
        "mood": check_in.mood,
        "stressLevel": check_in.stress_level,
        "journalEntry": check_in.journal_entry,
        "emotionAnalysis": check_in.emotion_analysis,
        "timestamp": format_time(check_in.created_at),
    }


def chat_message_out(message: ChatMessage) -> Dict[str, Any]:
    return {
        "id": message.id,
        "userId": message.user_id,
        "message": message.message,
        "isBot": message.is_bot,
        "timestamp": format_time(message.created_at),
    }


def exam_out(exam: Exam) -> Dict[str, Any]:
    return {
        "id": exam.id,
        "userId": exam.user_id,
        "name": exam.name,
        "subject": exam.subject,
        "date": format_time(exam.date),
        "completed": exam.completed,
    }


def alert_out(alert: Alert) -> Dict[str, Any]:
    return {
        "id": alert.id,
        "userId": alert.user_id,
        "type": alert.type,
        "message": alert.message,
        "resolved": alert.resolved,
        "timestamp": format_time(alert.created_at),
    }
