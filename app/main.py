# app/main.py - MindEase backend
from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.security import create_access_token, get_current_user, get_current_user_id
from app.core.timezone import format_time, get_now
from app.db.base import Base
from app.db.session import SessionLocal, close_session, engine
from app.models.user import User
from app.schemas.auth import JoinIn
from app.schemas.out import check_in_out, exam_out, user_out
from app.storage import Storage, ensure_demo_user, get_storage
from app import chat as chat_module
from app.routers import alerts, check_ins, exams

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

VERSION = "1.0.0"
DEFAULT_MOOD = 3
RECENT_CHECK_INS = 7

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="MindEase Backend",
    version=VERSION,
    description="Student mental-wellness tracking: check-ins, journal analysis and a support chat",
)


def _parse_allowed(origins_str: str) -> List[str]:
    out: List[str] = []
    for s in (origins_str or "").split(","):
        s = s.strip()
        if s and s not in ("*", "null"):
            out.append(s)
    return out


app.add_middleware(
    CORSMiddleware,
    allow_origins=_parse_allowed(settings.ALLOWED_ORIGINS),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        demo = ensure_demo_user(Storage(db), settings.DEMO_USER_NAME, settings.DEMO_USER_EMAIL)
        logger.info("Tables ready, demo user id=%s", demo.id)
    finally:
        close_session(db)


@app.on_event("startup")
def on_startup():
    init_db()


app.include_router(chat_module.router, prefix="/api/chat", tags=["chat"])
app.include_router(check_ins.router, prefix="/api/check-ins", tags=["check-ins"])
app.include_router(exams.router, prefix="/api/exams", tags=["exams"])
app.include_router(alerts.router, prefix="/api/alerts", tags=["alerts"])

# ============================================================================
# User & auth
# ============================================================================

@app.get("/api/user")
def get_user(user: User = Depends(get_current_user)):
    return user_out(user)


@app.post("/api/auth/join")
def join(body: JoinIn, storage: Storage = Depends(get_storage)):
    email = str(body.email).lower()

    user = storage.get_user_by_email(email)
    if not user:
        try:
            user = storage.create_user(name=body.name.strip(), email=email)
        except Exception as e:
            storage.rollback()
            logger.error(f"User creation failed: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Failed to create user")
        logger.info(f"New user registered: id={user.id}")

    return {"token": create_access_token(user.id), "user": user_out(user)}

# ============================================================================
# Dashboard
# ============================================================================

@app.get("/api/dashboard/stats")
def dashboard_stats(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    """
    Summary for the dashboard: latest mood, the last week of check-ins and
    what is coming up.
    """
    try:
        recent = storage.get_check_ins_by_user(user_id, RECENT_CHECK_INS)
        upcoming = storage.get_upcoming_exams(user_id)
        alerts_ = storage.get_alerts_by_user(user_id)
    except Exception as e:
        logger.error(f"Dashboard stats failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get dashboard stats")

    def average(values):
        return round(sum(values) / len(values), 2) if values else None

    return {
        "currentMood": recent[0].mood if recent else DEFAULT_MOOD,
        "checkInStreak": len(recent),
        "averageMood": average([c.mood for c in recent]),
        "averageStress": average([c.stress_level for c in recent]),
        "upcomingExamsCount": len(upcoming),
        "insights": sum(1 for c in recent if c.emotion_analysis),
        "unresolvedAlerts": sum(1 for a in alerts_ if not a.resolved),
        "recentCheckIns": [check_in_out(c) for c in recent],
        "upcomingExams": [exam_out(e) for e in upcoming[:3]],
    }

# ============================================================================
# Health
# ============================================================================

@app.get("/api/health")
def health():
    return {
        "ok": True,
        "time": format_time(get_now()),
        "version": VERSION,
        "features": {
            "openai": bool(settings.OPENAI_API_KEY),
        },
    }


@app.get("/")
def root():
    return {
        "service": "MindEase Backend API",
        "version": VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, log_level="info")
