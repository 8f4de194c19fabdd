"""
Conversational assistant scoped to one narrative section.

The chat session survives closing and reopening the panel for the same section and is
cleared when the panel is opened for a different section. A reply can be applied to the
section, which overwrites it without merging.
"""
import logging
from dataclasses import dataclass, field

from complaint.document import DraftDocument, check_section
from complaint.errors import AssistantBusyError, EditorStateError
from complaint.utils import plain_text_to_html

logger = logging.getLogger(__name__)

CHAT_ERROR_MESSAGE = "응답을 받지 못했습니다. 다시 시도해 주세요."


@dataclass
class ChatMessage:
    role: str  # "user" | "assistant"
    content: str
    is_error: bool = False

    def to_wire(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatSession:
    section: str
    messages: list[ChatMessage] = field(default_factory=list)

    def history(self) -> list[dict]:
        """Prior turns in order, excluding inline error notes."""
        return [m.to_wire() for m in self.messages if not m.is_error]


class AssistantPanel:
    def __init__(self, client):
        self._client = client
        self._session: ChatSession | None = None
        self._open = False
        self._busy = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def section(self) -> str | None:
        return self._session.section if self._session else None

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._session.messages) if self._session else []

    def open(self, section: str) -> ChatSession:
        check_section(section)
        if self._session is None or self._session.section != section:
            self._session = ChatSession(section=section)
        self._open = True
        return self._session

    def close(self) -> None:
        self._open = False

    def send(self, message: str, document: DraftDocument) -> ChatMessage | None:
        """
        Append the user turn, ask the service, append the reply (or an inline error turn).
        Returns the appended assistant turn; None for a blank message.
        """
        if not self._open or self._session is None:
            raise EditorStateError("Assistant panel is not open.")
        if self._busy:
            raise AssistantBusyError("A message is already being sent.")
        text = (message or "").strip()
        if not text:
            return None
        session = self._session
        history = session.history()
        session.messages.append(ChatMessage(role="user", content=text))
        self._busy = True
        try:
            result = self._client.chat(session.section, text, history, document)
        finally:
            self._busy = False
        if result.success:
            reply = ChatMessage(role="assistant", content=result.data)
        else:
            logger.error("Chat turn failed for %s: %s", session.section, result.error)
            reply = ChatMessage(role="assistant", content=result.error or CHAT_ERROR_MESSAGE, is_error=True)
        session.messages.append(reply)
        return reply

    def apply_to_section(self, content: str, document: DraftDocument) -> None:
        """Overwrite document.<section> with ``content`` and close the panel."""
        if self._session is None:
            raise EditorStateError("Assistant panel has no section loaded.")
        document.set_section(self._session.section, plain_text_to_html(content))
        logger.info("Applied assistant reply to %s", self._session.section)
        self.close()
