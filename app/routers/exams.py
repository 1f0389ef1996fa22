# app/routers/exams.py
import logging

from fastapi import APIRouter, Depends, HTTPException

from app.core.security import get_current_user_id
from app.schemas.exam import ExamIn, ExamUpdate
from app.schemas.out import exam_out
from app.storage import NotFoundError, Storage, get_storage

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
def list_exams(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    try:
        exams = storage.get_exams_by_user(user_id)
    except Exception as e:
        logger.error(f"Failed to get exams: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get exams")
    return [exam_out(e) for e in exams]


@router.post("")
def add_exam(
    body: ExamIn,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    try:
        exam = storage.create_exam(
            user_id=user_id,
            name=body.name.strip(),
            subject=body.subject.strip(),
            date=body.date,
        )
    except Exception as e:
        storage.rollback()
        logger.error(f"Failed to add exam: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to add exam")
    return exam_out(exam)


@router.patch("/{exam_id}")
def update_exam(
    exam_id: int,
    body: ExamUpdate,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    updates = body.model_dump(exclude_unset=True, exclude_none=True)

    exam = storage.get_exam(exam_id)
    if not exam or exam.user_id != user_id:
        raise HTTPException(status_code=404, detail="Exam not found")

    try:
        exam = storage.update_exam(exam_id, **updates)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Exam not found")
    except Exception as e:
        storage.rollback()
        logger.error(f"Failed to update exam {exam_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update exam")
    return exam_out(exam)
