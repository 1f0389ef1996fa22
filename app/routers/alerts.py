# app/routers/alerts.py
import logging

from fastapi import APIRouter, Depends, HTTPException

from app.core.security import get_current_user_id
from app.schemas.out import alert_out
from app.storage import NotFoundError, Storage, get_storage

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
def list_alerts(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    try:
        alerts = storage.get_alerts_by_user(user_id)
    except Exception as e:
        logger.error(f"Failed to get alerts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get alerts")
    return [alert_out(a) for a in alerts]


@router.post("/{alert_id}/resolve")
def resolve_alert(
    alert_id: int,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    alert = storage.get_alert(alert_id)
    if not alert or alert.user_id != user_id:
        raise HTTPException(status_code=404, detail="Alert not found")

    try:
        alert = storage.resolve_alert(alert_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Alert not found")
    except Exception as e:
        storage.rollback()
        logger.error(f"Failed to resolve alert {alert_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to resolve alert")

    logger.info(f"Alert resolved: id={alert.id}, user_id={user_id}")
    return alert_out(alert)
