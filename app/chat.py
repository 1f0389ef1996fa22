# app/chat.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.security import get_current_user_id
from app.schemas.chat import ChatMessageIn
from app.schemas.out import chat_message_out
from app.services.chat_responder import generate_chat_response
from app.storage import Storage, get_storage

logger = logging.getLogger(__name__)
router = APIRouter()

# ================= Chat endpoints =================

@router.get("")
def get_chat_history(
    limit: int = Query(default=50, ge=1, le=500),
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    """Latest messages for the current user, oldest first."""
    try:
        messages = storage.get_chat_messages(user_id, limit)
    except Exception as e:
        logger.error(f"Failed to fetch history: {e}")
        raise HTTPException(status_code=500, detail="Failed to get chat messages")
    return [chat_message_out(m) for m in messages]


@router.post("")
def send_chat(
    payload: ChatMessageIn,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    """Store the user's message, generate a reply and store that too."""
    user_msg = (payload.message or "").strip()
    if not user_msg:
        raise HTTPException(status_code=400, detail="Message is required")

    try:
        user_message = storage.create_chat_message(user_id, user_msg, is_bot=False)

        reply_text = generate_chat_response(user_msg, user_id)

        bot_message = storage.create_chat_message(user_id, reply_text, is_bot=True)
        logger.info(f"Chat saved: user_id={user_id}, messages={user_message.id},{bot_message.id}")

        return {
            "userMessage": chat_message_out(user_message),
            "botMessage": chat_message_out(bot_message),
        }

    except Exception as e:
        storage.rollback()
        logger.error(f"Chat failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to send message")
