"""Turn-by-turn conversation over a chatflow's fields.

A session walks a cursor over the ordered fields of a validated schema. Each
answer is saved before the next question is produced, so saves always happen
in field order. When a save fails the session moves to ERRORED, keeps the
answers collected so far and leaves the cursor where it was; `retry()`
resends whatever failed (the current field's answer or the completion).
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from chatflow.core.exceptions import PersistenceError, SessionCompletedError, SubmissionClosedError
from chatflow.core.logging import get_logger
from chatflow.engine.fields import get_field_type
from chatflow.models.submission import ChatflowSubmission
from chatflow.schemas.chatflow import PublicChatflow
from chatflow.schemas.field import ChatflowSchema, FieldSchema
from chatflow.schemas.submission import ChatMessage, SubmissionStatus

logger = get_logger("conversation")

GREETING = "Welcome to {name}! I'll help you complete this form."
COMPLETED_MESSAGE = "Thank you! Your response has been recorded."
SAVE_ERROR_MESSAGE = "Sorry, I couldn't save your answer. Please check your connection and try again."
FINALIZE_ERROR_MESSAGE = "Sorry, something went wrong saving your response. Please try again."


class SessionState(str, Enum):
    AWAITING_ANSWER = "awaiting_answer"
    COMPLETED = "completed"
    ERRORED = "errored"


class SubmissionGateway(Protocol):
    async def upsert_submission_field(
        self, submission_id: Optional[str], chatflow_id: str, field_name: str, field_value: Any
    ) -> ChatflowSubmission:
        ...

    async def finalize_submission(
        self, submission_id: Optional[str], chatflow_id: str, data: Dict[str, Any], status: SubmissionStatus
    ) -> ChatflowSubmission:
        ...


class ConversationSession:
    def __init__(
        self,
        chatflow_id: str,
        chatflow_name: str,
        schema: ChatflowSchema,
        gateway: SubmissionGateway,
        submission_id: Optional[str] = None,
    ):
        self.chatflow_id = chatflow_id
        self.chatflow_name = chatflow_name
        self.fields: List[FieldSchema] = list(schema.fields)
        self.gateway = gateway
        self.submission_id = submission_id
        self.answers: Dict[str, Any] = {}
        self.cursor = 0
        self.state = SessionState.AWAITING_ANSWER if self.fields else SessionState.COMPLETED
        # "field" or "finalize" while ERRORED
        self._pending: Optional[str] = None

    @classmethod
    def from_public_chatflow(cls, chatflow: PublicChatflow, gateway: SubmissionGateway) -> "ConversationSession":
        return cls(chatflow.id, chatflow.name, ChatflowSchema(fields=chatflow.fields), gateway)

    @classmethod
    def resume(
        cls,
        chatflow: PublicChatflow,
        gateway: SubmissionGateway,
        submission: Optional[ChatflowSubmission] = None,
    ) -> "ConversationSession":
        """Rebuild a session from what has been persisted; the cursor lands on the first unanswered field."""
        session = cls.from_public_chatflow(chatflow, gateway)
        if submission is None:
            return session

        if submission.status == SubmissionStatus.ABANDONED.value:
            raise SubmissionClosedError(f"Submission {submission.id} is {submission.status}")

        session.submission_id = submission.id
        session.answers = dict(submission.data or {})

        if submission.status == SubmissionStatus.COMPLETED.value:
            session.cursor = len(session.fields)
            session.state = SessionState.COMPLETED
            return session

        session.cursor = next(
            (i for i, f in enumerate(session.fields) if f.name not in session.answers),
            len(session.fields),
        )
        if session.cursor >= len(session.fields):
            # Every answer saved but the completion never went through
            session.state = SessionState.ERRORED
            session._pending = "finalize"
        return session

    @property
    def is_completed(self) -> bool:
        return self.state == SessionState.COMPLETED

    @property
    def current_field(self) -> Optional[FieldSchema]:
        if self.cursor < len(self.fields):
            return self.fields[self.cursor]
        return None

    def start(self) -> List[ChatMessage]:
        """Greeting plus the first question. A schema without fields has nothing to say."""
        if not self.fields:
            return []
        greeting = ChatMessage(id="welcome", role="assistant", content=GREETING.format(name=self.chatflow_name))
        return [greeting, self._prompt(self.fields[self.cursor])]

    async def answer(self, value: Any) -> List[ChatMessage]:
        if self.state == SessionState.COMPLETED:
            raise SessionCompletedError("This conversation is already complete")
        if self._pending == "finalize":
            return await self.retry()

        field = self.fields[self.cursor]
        handler = get_field_type(field.type)
        raw = handler.normalize(value)
        self.answers[field.name] = raw

        messages = [ChatMessage(id=f"ans-{field.id}", role="user", content=handler.display(raw))]
        messages.extend(await self._save_current())
        return messages

    async def retry(self) -> List[ChatMessage]:
        if self._pending == "field":
            return await self._save_current()
        if self._pending == "finalize":
            return await self._finalize()
        return []

    async def _save_current(self) -> List[ChatMessage]:
        field = self.fields[self.cursor]
        try:
            submission = await self.gateway.upsert_submission_field(
                self.submission_id, self.chatflow_id, field.name, self.answers[field.name]
            )
        except PersistenceError as e:
            logger.warning(f"Saving field '{field.name}' failed for chatflow {self.chatflow_id}: {e}")
            self.state = SessionState.ERRORED
            self._pending = "field"
            return [ChatMessage(id=f"save-error-{field.id}", role="assistant", content=SAVE_ERROR_MESSAGE)]

        self.submission_id = submission.id
        self._pending = None
        return await self._advance()

    async def _advance(self) -> List[ChatMessage]:
        self.cursor += 1
        if self.cursor < len(self.fields):
            self.state = SessionState.AWAITING_ANSWER
            return [self._prompt(self.fields[self.cursor])]
        return await self._finalize()

    async def _finalize(self) -> List[ChatMessage]:
        try:
            submission = await self.gateway.finalize_submission(
                self.submission_id, self.chatflow_id, dict(self.answers), SubmissionStatus.COMPLETED
            )
        except PersistenceError as e:
            logger.warning(f"Completing submission {self.submission_id} failed: {e}")
            self.state = SessionState.ERRORED
            self._pending = "finalize"
            return [ChatMessage(id="error", role="assistant", content=FINALIZE_ERROR_MESSAGE)]

        self.submission_id = submission.id
        self.state = SessionState.COMPLETED
        self._pending = None
        logger.info(f"Conversation completed: chatflow={self.chatflow_id} submission={self.submission_id}")
        return [ChatMessage(id="done", role="assistant", content=COMPLETED_MESSAGE)]

    def _prompt(self, field: FieldSchema) -> ChatMessage:
        handler = get_field_type(field.type)
        return ChatMessage(
            id=f"q-{field.id}",
            role="assistant",
            content=field.label,
            affordance=handler.affordance.value,
            field_id=field.id,
            options=handler.choices(field),
            placeholder=field.placeholder,
            helper_text=field.helperText,
        )
