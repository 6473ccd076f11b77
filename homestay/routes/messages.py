from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine

from homestay.dependencies import get_current_user, get_db_engine
from homestay.errors import DomainError
from homestay.schemas.messages import ConversationCreatePayload, MessageCreatePayload
from homestay.services.messages import (
    MESSAGES_DEFAULT_LIMIT,
    get_conversations,
    get_messages,
    remove_message,
    send_message,
    start_conversation,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/messages/conversations")
def conversations(
    page: int = Query(1),
    limit: int = Query(20),
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return get_conversations(db, user["id"], page=page, limit=limit)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("conversations_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/messages/conversations", status_code=status.HTTP_201_CREATED)
def open_conversation(
    payload: ConversationCreatePayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Start a conversation, or reuse the existing one with that participant."""
    try:
        return start_conversation(
            db, user["id"], payload.participant_id, initial_message=payload.initial_message
        )
    except DomainError:
        raise
    except Exception as e:
        logger.exception("conversation_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/messages/conversations/{conversation_id}")
def conversation_messages(
    conversation_id: str,
    page: int = Query(1),
    limit: int = Query(MESSAGES_DEFAULT_LIMIT),
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return get_messages(db, conversation_id, user["id"], page=page, limit=limit)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("messages_fetch_failed", conversation_id=conversation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/messages/conversations/{conversation_id}", status_code=status.HTTP_201_CREATED)
def post_message(
    conversation_id: str,
    payload: MessageCreatePayload,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        return send_message(
            db, conversation_id, user["id"], payload.content, message_type=payload.message_type
        )
    except DomainError:
        raise
    except Exception as e:
        logger.exception("message_send_failed", conversation_id=conversation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/messages/{message_id}")
def delete(
    message_id: str,
    user: dict[str, Any] = Depends(get_current_user),
    db: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    try:
        return remove_message(db, message_id, user["id"])
    except DomainError:
        raise
    except Exception as e:
        logger.exception("message_delete_failed", message_id=message_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
