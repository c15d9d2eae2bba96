import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyfeed.api.deps import get_viewer_id
from studyfeed.core.constants import FEEDBACK_RECORD_COUNT
from studyfeed.db import get_db
from studyfeed.models.study_record import StudyRecord
from studyfeed.schemas.chat import ChatMessage, ChatRequest, ChatResponse
from studyfeed.services.chat import (
    ChatNotConfigured,
    ChatService,
    ChatUpstreamError,
    feedback_prompt,
    get_chat_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


def _reply(service: ChatService, messages: list[ChatMessage]):
    try:
        return ChatResponse(message=service.reply(messages))
    except (ChatNotConfigured, ChatUpstreamError) as e:
        return JSONResponse(status_code=500, content={"error": str(e)})


@router.post("", response_model=ChatResponse)
def chat(payload: ChatRequest, service: ChatService = Depends(get_chat_service)):
    """Forward the conversation to the study-coach persona; one reply back."""
    return _reply(service, payload.messages)


@router.post("/feedback", response_model=ChatResponse)
def feedback(
    viewer_id: Optional[str] = Depends(get_viewer_id),
    db: Session = Depends(get_db),
    service: ChatService = Depends(get_chat_service),
):
    """Short coaching comment on the viewer's most recent records."""
    records: list[StudyRecord] = []
    if viewer_id:
        try:
            records = (
                db.query(StudyRecord)
                .filter(StudyRecord.user_id == viewer_id)
                .order_by(StudyRecord.created_at.desc())
                .limit(FEEDBACK_RECORD_COUNT)
                .all()
            )
        except SQLAlchemyError as e:
            logger.warning("feedback read failed for %s: %s", viewer_id, e)
            db.rollback()
    prompt = feedback_prompt(records)
    return _reply(service, [ChatMessage(role="user", content=prompt)])
