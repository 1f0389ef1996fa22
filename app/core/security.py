# app/core/security.py
from datetime import datetime, timedelta
from jose import jwt, JWTError
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from app.core.config import settings
from app.db.session import get_db
from app.models.user import User
from app.storage import Storage, ensure_demo_user

ALGORITHM = settings.JWT_ALG
_security = HTTPBearer(auto_error=False)

def create_access_token(user_id: int) -> str:
    expire = datetime.utcnow() + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload = {"uid": user_id, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)

def get_current_user_id(
    creds: HTTPAuthorizationCredentials | None = Depends(_security),
    db: Session = Depends(get_db),
) -> int:
    """Resolve the caller's user id.

    Requests without a bearer token act as the demo user, which is how the
    single-user deployment works. A token that is present must be valid.
    """
    if creds is None:
        return ensure_demo_user(Storage(db), settings.DEMO_USER_NAME, settings.DEMO_USER_EMAIL).id
    if creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = jwt.decode(creds.credentials, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")

    uid = payload.get("uid")
    if not isinstance(uid, int):
        raise HTTPException(status_code=401, detail="Invalid token: missing uid")
    return uid

def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
