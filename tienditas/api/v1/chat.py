"""Storefront chat widget endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse

from tienditas.core.deps import ChatSessions, CommittedStore
from tienditas.core.rate_limit import CHAT_RATE_LIMIT, limiter
from tienditas.schemas.chat import ChatRequest, TranscriptEntryResponse, TranscriptResponse
from tienditas.services.chat_service import ChatBusyError, ChatService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{store_id}/chat/messages",
    response_class=StreamingResponse,
    summary="Send a chat message",
    description="""
    Send a message to the store's assistant and stream the reply as plain text.

    Anonymous: the widget identifies its browsing session with session_id.
    The assistant's persona is the store's chatInstruction at the time the
    session's first message is sent. One reply at a time per session; a
    message sent while a reply is streaming answers 409.
    """,
)
@limiter.limit(CHAT_RATE_LIMIT)
async def send_message(
    request: Request,  # noqa: ARG001  # required by slowapi
    store_id: str,
    data: ChatRequest,
    store: CommittedStore,
    sessions: ChatSessions,
) -> StreamingResponse:
    service = ChatService(sessions)
    try:
        chunks = service.process_message(store_id=store_id, store=store, request=data)
    except ChatBusyError as e:
        logger.info("Chat session %s for store %s is busy", data.session_id, store_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")


@router.get(
    "/{store_id}/chat/transcript",
    response_model=TranscriptResponse,
    summary="Get the chat transcript",
)
async def get_transcript(
    store_id: str,
    _store: CommittedStore,
    sessions: ChatSessions,
    session_id: str = Query(..., min_length=1, max_length=128, description="Widget session ID"),
) -> TranscriptResponse:
    """Visible conversation of a session. Sessions that never chatted are empty."""
    assistant = sessions.get(store_id, session_id)
    entries = assistant.transcript if assistant else []
    return TranscriptResponse(
        store_id=store_id,
        session_id=session_id,
        busy=assistant.busy if assistant else False,
        entries=[
            TranscriptEntryResponse(
                author=entry.author.value,
                content=entry.content,
                turn_id=entry.turn_id,
            )
            for entry in entries
        ],
    )
