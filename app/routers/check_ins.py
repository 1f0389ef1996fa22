# app/routers/check_ins.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.security import get_current_user_id
from app.schemas.check_in import CheckInIn
from app.schemas.out import check_in_out
from app.services.emotion_analyzer import analyze_emotion
from app.storage import Storage, get_storage

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
def list_check_ins(
    limit: int = Query(default=30, ge=1, le=500),
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    """Check-ins for trend charts, newest first."""
    try:
        check_ins = storage.get_check_ins_by_user(user_id, limit)
    except Exception as e:
        logger.error(f"Failed to get check-ins: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get check-ins")
    return [check_in_out(c) for c in check_ins]


@router.post("")
def submit_check_in(
    body: CheckInIn,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    """
    Store a mood/stress check-in, then analyze its journal entry.

    The row is committed before analysis starts, so a failure afterwards
    leaves the check-in in place with emotionAnalysis = null.
    """
    try:
        check_in = storage.create_check_in(
            user_id=user_id,
            mood=body.mood,
            stress_level=body.stressLevel,
            journal_entry=body.journalEntry,
        )
        logger.info(f"Check-in saved: id={check_in.id}, user_id={user_id}")

        if check_in.journal_entry and check_in.journal_entry.strip():
            analysis = analyze_emotion(check_in.journal_entry)
            check_in = storage.record_analysis(check_in.id, analysis)

        return check_in_out(check_in)

    except Exception as e:
        storage.rollback()
        logger.error(f"Check-in error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to submit check-in")
