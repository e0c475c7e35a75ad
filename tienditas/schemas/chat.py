"""Pydantic schemas for the storefront chat widget."""

from pydantic import Field

from tienditas.schemas.common import BaseSchema


class ChatRequest(BaseSchema):
    """Request for sending a chat message."""

    message: str = Field(..., min_length=1, max_length=4000)
    session_id: str = Field(..., min_length=1, max_length=128)  # browsing session of the widget


class TranscriptEntryResponse(BaseSchema):
    """One message of the visible conversation."""

    author: str
    content: str
    turn_id: int


class TranscriptResponse(BaseSchema):
    """Transcript of a chat session."""

    store_id: str
    session_id: str
    busy: bool
    entries: list[TranscriptEntryResponse]
