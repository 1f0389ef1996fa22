# app/storage.py
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.timezone import as_utc, get_now
from app.db.session import get_db, write_lock
from app.models.alert import ALERT_TYPES, Alert
from app.models.chat import ChatMessage
from app.models.check_in import CheckIn
from app.models.exam import Exam
from app.models.user import User
from app.schemas.analysis import EmotionAnalysis

logger = logging.getLogger(__name__)

CRISIS_ALERT_MESSAGE = "Crisis indicators detected in journal entry. Immediate support recommended."

EXAM_FIELDS = ("name", "subject", "date", "completed")


class NotFoundError(LookupError):
    """Raised when an update targets a record that doesn't exist."""


class Storage:
    """Record store over one SQLAlchemy session.

    Every mutation commits on its own, so a check-in is durable before its
    analysis is attached. An analysis and the crisis alert it triggers are
    committed together.
    """

    def __init__(self, db: Session):
        self.db = db

    def _save(self, obj):
        with write_lock:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        return obj

    def rollback(self):
        with write_lock:
            self.db.rollback()

    # ---------------- Users ----------------

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create_user(self, name: str, email: str) -> User:
        user = User(name=name, email=email, created_at=get_now())
        return self._save(user)

    # ---------------- Check-ins ----------------

    def get_check_in(self, check_in_id: int) -> Optional[CheckIn]:
        return self.db.get(CheckIn, check_in_id)

    def get_check_ins_by_user(self, user_id: int, limit: int = 10) -> List[CheckIn]:
        return (
            self.db.query(CheckIn)
            .filter(CheckIn.user_id == user_id)
            .order_by(CheckIn.created_at.desc(), CheckIn.id.desc())
            .limit(limit)
            .all()
        )

    def create_check_in(
        self,
        user_id: int,
        mood: int,
        stress_level: int,
        journal_entry: Optional[str] = None,
    ) -> CheckIn:
        check_in = CheckIn(
            user_id=user_id,
            mood=mood,
            stress_level=stress_level,
            journal_entry=journal_entry or None,
            emotion_analysis=None,
            created_at=get_now(),
        )
        return self._save(check_in)

    def update_check_in_analysis(self, check_in_id: int, analysis: EmotionAnalysis) -> CheckIn:
        check_in = self.get_check_in(check_in_id)
        if not check_in:
            raise NotFoundError("Check-in not found")
        check_in.emotion_analysis = analysis.model_dump()
        return self._save(check_in)

    def record_analysis(self, check_in_id: int, analysis: EmotionAnalysis) -> CheckIn:
        """Attach an analysis and, when it signals crisis, one crisis alert.

        Both land in a single commit: either the check-in carries the analysis
        and its alert, or neither is stored.
        """
        with write_lock:
            try:
                check_in = self.get_check_in(check_in_id)
                if not check_in:
                    raise NotFoundError("Check-in not found")
                check_in.emotion_analysis = analysis.model_dump()

                alert = None
                if analysis.crisis_indicators:
                    alert = self._build_alert(check_in.user_id, "crisis", CRISIS_ALERT_MESSAGE)
                    self.db.add(alert)

                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

            self.db.refresh(check_in)
            if alert is not None:
                self.db.refresh(alert)
                logger.warning(
                    f"Crisis alert id={alert.id} raised for user_id={check_in.user_id}, check_in_id={check_in.id}"
                )
        return check_in

    # ---------------- Chat ----------------

    def get_chat_messages(self, user_id: int, limit: int = 50) -> List[ChatMessage]:
        messages = (
            self.db.query(ChatMessage)
            .filter(ChatMessage.user_id == user_id)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(messages))

    def create_chat_message(self, user_id: int, message: str, is_bot: bool = False) -> ChatMessage:
        chat_message = ChatMessage(
            user_id=user_id,
            message=message,
            is_bot=is_bot,
            created_at=get_now(),
        )
        return self._save(chat_message)

    # ---------------- Exams ----------------

    def get_exams_by_user(self, user_id: int) -> List[Exam]:
        return (
            self.db.query(Exam)
            .filter(Exam.user_id == user_id)
            .order_by(Exam.date.asc(), Exam.id.asc())
            .all()
        )

    def get_upcoming_exams(self, user_id: int, limit: int = 5) -> List[Exam]:
        now = get_now()
        upcoming = [
            exam for exam in self.get_exams_by_user(user_id)
            if not exam.completed and as_utc(exam.date) > now
        ]
        return upcoming[:limit]

    def create_exam(self, user_id: int, name: str, subject: str, date: datetime) -> Exam:
        exam = Exam(
            user_id=user_id,
            name=name,
            subject=subject,
            date=as_utc(date),
            completed=False,
        )
        return self._save(exam)

    def get_exam(self, exam_id: int) -> Optional[Exam]:
        return self.db.get(Exam, exam_id)

    def update_exam(self, exam_id: int, **updates) -> Exam:
        exam = self.get_exam(exam_id)
        if not exam:
            raise NotFoundError("Exam not found")
        for field, value in updates.items():
            if field not in EXAM_FIELDS:
                raise ValueError(f"Unknown exam field: {field}")
            if field == "date":
                value = as_utc(value)
            setattr(exam, field, value)
        return self._save(exam)

    # ---------------- Alerts ----------------

    def get_alerts_by_user(self, user_id: int) -> List[Alert]:
        return (
            self.db.query(Alert)
            .filter(Alert.user_id == user_id)
            .order_by(Alert.created_at.desc(), Alert.id.desc())
            .all()
        )

    def _build_alert(self, user_id: int, type: str, message: str) -> Alert:
        if type not in ALERT_TYPES:
            raise ValueError(f"Invalid alert type: {type}")
        return Alert(
            user_id=user_id,
            type=type,
            message=message,
            resolved=False,
            created_at=get_now(),
        )

    def create_alert(self, user_id: int, type: str, message: str) -> Alert:
        return self._save(self._build_alert(user_id, type, message))

    def get_alert(self, alert_id: int) -> Optional[Alert]:
        return self.db.get(Alert, alert_id)

    def resolve_alert(self, alert_id: int) -> Alert:
        alert = self.get_alert(alert_id)
        if not alert:
            raise NotFoundError("Alert not found")
        alert.resolved = True
        return self._save(alert)


def ensure_demo_user(storage: Storage, name: str, email: str) -> User:
    """Find the demo user by email, creating it on first use.

    The id comes from the database so sequences stay in step.
    """
    user = storage.get_user_by_email(email)
    if user:
        return user
    try:
        user = storage.create_user(name=name, email=email)
    except IntegrityError:
        # Created concurrently by another request
        storage.rollback()
        return storage.get_user_by_email(email)
    logger.info(f"Demo user created: id={user.id}, email={user.email}")
    return user


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return Storage(db)
