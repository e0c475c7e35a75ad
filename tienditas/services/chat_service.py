"""Storefront chat assistant streaming replies from an OpenAI chat model."""

import enum
import logging
from collections import OrderedDict
from collections.abc import AsyncIterator
from dataclasses import dataclass

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from tienditas.core.config import settings
from tienditas.schemas.chat import ChatRequest
from tienditas.schemas.store import StoreRecord

logger = logging.getLogger(__name__)

MAX_RESPONSE_TOKENS = 800
CHAT_FALLBACK_MESSAGE = "¡Uy! Algo salió mal. Por favor, intenta de nuevo."


class ChatAuthor(str, enum.Enum):
    """Who wrote a transcript entry."""

    USER = "user"
    MODEL = "model"


@dataclass
class TranscriptEntry:
    """One bubble of the visible conversation."""

    author: ChatAuthor
    content: str
    turn_id: int


class ChatBusyError(RuntimeError):
    """A reply is still streaming; the new turn was not started."""


def _get_llm() -> ChatOpenAI:
    """Create a streaming ChatOpenAI instance."""
    return ChatOpenAI(
        model=settings.chat_model,
        api_key=settings.openai_api_key,
        temperature=settings.chat_temperature,
        max_tokens=MAX_RESPONSE_TOKENS,
        streaming=True,
    )


class ChatSession:
    """Model client and running history, seeded with the store's persona."""

    def __init__(self, instruction: str, history_limit: int | None = None) -> None:
        self.llm = _get_llm()
        self.persona = SystemMessage(content=instruction)
        self.history: list[BaseMessage] = []
        self.history_limit = history_limit or settings.chat_history_limit

    async def stream(self, user_text: str) -> AsyncIterator[str]:
        """Stream the reply to ``user_text`` as text chunks."""
        messages = [self.persona, *self.history, HumanMessage(content=user_text)]
        async for chunk in self.llm.astream(messages):
            text = chunk.content if isinstance(chunk.content, str) else ""
            if text:
                yield text

    def record_turn(self, user_text: str, reply: str) -> None:
        """Remember a completed turn, keeping only the most recent messages."""
        self.history.extend([HumanMessage(content=user_text), AIMessage(content=reply)])
        if len(self.history) > self.history_limit:
            self.history = self.history[-self.history_limit :]


class ChatAssistant:
    """Chat widget state for one store in one browsing session.

    The model session is opened lazily on the first turn and reused after
    that. Only one turn may be in flight at a time.
    """

    def __init__(self, store_id: str, instruction: str) -> None:
        self.store_id = store_id
        self.instruction = instruction
        self.transcript: list[TranscriptEntry] = []
        self._session: ChatSession | None = None
        self._busy = False
        self._turn_counter = 0

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def session_started(self) -> bool:
        return self._session is not None

    def ensure_session(self) -> ChatSession:
        """Open the model session on first use."""
        if self._session is None:
            self._session = ChatSession(self.instruction)
            logger.info("Opened chat session for store %s", self.store_id)
        return self._session

    def append_chunk(self, turn_id: int, chunk: str) -> None:
        """Grow the reply of ``turn_id``, or start a new entry for it.

        Only the last entry is extended, and only when it belongs to the same
        turn, so a late chunk from another turn never lands in the wrong bubble.
        """
        last = self.transcript[-1] if self.transcript else None
        if last is not None and last.author == ChatAuthor.MODEL and last.turn_id == turn_id:
            last.content += chunk
        else:
            self.transcript.append(TranscriptEntry(ChatAuthor.MODEL, chunk, turn_id))

    def send_turn(self, user_text: str) -> AsyncIterator[str]:
        """Post a user message and return the stream of reply chunks.

        The user entry is in the transcript before this returns, ahead of any
        part of the reply. The assistant counts as busy only while a reply is
        being streamed, so a stream that is dropped before it starts never
        blocks later turns.

        Raises:
            ValueError: If the message is blank.
            ChatBusyError: If a previous reply is still streaming.
        """
        if not user_text.strip():
            raise ValueError("Message must not be empty.")
        if self._busy:
            raise ChatBusyError("A reply is already in progress.")

        self._turn_counter += 1
        turn_id = self._turn_counter
        self.transcript.append(TranscriptEntry(ChatAuthor.USER, user_text, turn_id))
        return self._stream_reply(turn_id, user_text)

    async def _stream_reply(self, turn_id: int, user_text: str) -> AsyncIterator[str]:
        if self._busy:
            # Another turn posted at the same time started streaming first
            logger.warning(
                "Chat turn %d for store %s overlapped a running reply", turn_id, self.store_id
            )
            self.transcript.append(
                TranscriptEntry(ChatAuthor.MODEL, CHAT_FALLBACK_MESSAGE, turn_id)
            )
            yield CHAT_FALLBACK_MESSAGE
            return

        self._busy = True
        try:
            try:
                session = self.ensure_session()
                reply = ""
                async for chunk in session.stream(user_text):
                    reply += chunk
                    self.append_chunk(turn_id, chunk)
                    yield chunk
            except Exception:
                logger.exception("Chat turn %d failed for store %s", turn_id, self.store_id)
                self.transcript.append(
                    TranscriptEntry(ChatAuthor.MODEL, CHAT_FALLBACK_MESSAGE, turn_id)
                )
                yield CHAT_FALLBACK_MESSAGE
            else:
                session.record_turn(user_text, reply)
        finally:
            self._busy = False


class ChatSessionRegistry:
    """Chat assistants keyed by store and browsing session.

    Holds at most ``max_sessions`` assistants; the least recently used one is
    dropped when a new session would exceed the limit.
    """

    def __init__(self, max_sessions: int | None = None) -> None:
        self._assistants: OrderedDict[tuple[str, str], ChatAssistant] = OrderedDict()
        self.max_sessions = max_sessions or settings.max_chat_sessions

    def __len__(self) -> int:
        return len(self._assistants)

    def get(self, store_id: str, session_id: str) -> ChatAssistant | None:
        key = (store_id, session_id)
        assistant = self._assistants.get(key)
        if assistant is not None:
            self._assistants.move_to_end(key)
        return assistant

    def get_or_create(self, store_id: str, session_id: str, instruction: str) -> ChatAssistant:
        """Return the session's assistant; the persona is fixed when it is created."""
        assistant = self.get(store_id, session_id)
        if assistant is None:
            assistant = ChatAssistant(store_id, instruction)
            self._assistants[(store_id, session_id)] = assistant
            while len(self._assistants) > self.max_sessions:
                (evicted_store, _), _ = self._assistants.popitem(last=False)
                logger.debug("Evicted chat session for store %s", evicted_store)
        return assistant

    def clear(self) -> None:
        self._assistants.clear()


class ChatService:
    """Routes storefront chat messages to the right assistant."""

    def __init__(self, registry: ChatSessionRegistry) -> None:
        self.registry = registry

    def process_message(
        self,
        store_id: str,
        store: StoreRecord,
        request: ChatRequest,
    ) -> AsyncIterator[str]:
        """Start a turn for the request's session and return the reply stream.

        Raises:
            ValueError: If the message is blank.
            ChatBusyError: If the session already has a reply in flight.
        """
        assistant = self.registry.get_or_create(
            store_id=store_id,
            session_id=request.session_id,
            instruction=store.chat_instruction,
        )
        return assistant.send_turn(request.message)
