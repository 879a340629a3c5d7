from typing import Any, Dict, List, Optional

from chatflow.core.exceptions import NotFoundError, SubmissionClosedError
from chatflow.core.logging import get_logger
from chatflow.models.chatflow import Chatflow, utcnow
from chatflow.models.submission import ChatflowSubmission
from chatflow.schemas.chatflow import ChatflowStatus
from chatflow.schemas.submission import SubmissionStatus
from chatflow.stores.base import ChatflowStore, SubmissionStore

logger = get_logger("services.submission")

TERMINAL_STATUSES = (SubmissionStatus.COMPLETED.value, SubmissionStatus.ABANDONED.value)


class SubmissionService:
    def __init__(self, chatflow_store: ChatflowStore, submission_store: SubmissionStore):
        self.chatflow_store = chatflow_store
        self.submission_store = submission_store

    async def _get_chatflow(self, chatflow_id: str) -> Chatflow:
        chatflow = await self.chatflow_store.get(chatflow_id)
        if not chatflow:
            raise NotFoundError("Chatflow not found")
        return chatflow

    async def get_submission(self, submission_id: str, chatflow_id: str) -> ChatflowSubmission:
        submission = await self.submission_store.get(submission_id)
        if not submission or submission.chatflow_id != chatflow_id:
            raise NotFoundError("Submission not found")
        return submission

    @staticmethod
    def _ensure_accepting(chatflow: Chatflow):
        if chatflow.status != ChatflowStatus.PUBLISHED.value:
            raise NotFoundError("Chatflow not found")

    async def upsert_submission_field(
        self,
        submission_id: Optional[str],
        chatflow_id: str,
        field_name: str,
        field_value: Any,
    ) -> ChatflowSubmission:
        """
        Persist one answer. The first call of a session creates the submission;
        later calls merge into its data without dropping earlier keys.
        """
        chatflow = await self._get_chatflow(chatflow_id)

        if not submission_id:
            self._ensure_accepting(chatflow)
            submission = await self.submission_store.create(
                chatflow_id=chatflow_id,
                data={field_name: field_value},
                status=SubmissionStatus.IN_PROGRESS.value,
            )
            logger.info(f"Created submission {submission.id} for chatflow {chatflow_id}")
            return submission

        existing = await self.get_submission(submission_id, chatflow_id)
        if existing.status in TERMINAL_STATUSES:
            raise SubmissionClosedError(f"Submission {submission_id} is {existing.status}")

        updated = await self.submission_store.update(submission_id, {
            "data": {**(existing.data or {}), field_name: field_value},
            "status": SubmissionStatus.IN_PROGRESS.value,
        })
        if not updated:
            raise NotFoundError("Submission not found")
        return updated

    async def finalize_submission(
        self,
        submission_id: Optional[str],
        chatflow_id: str,
        data: Dict[str, Any],
        status: SubmissionStatus = SubmissionStatus.COMPLETED,
    ) -> ChatflowSubmission:
        """
        Write the full answer set with its final status. Repeating the call for a
        completed submission with the same data is a no-op, so `completed_at`
        keeps its first value.
        """
        chatflow = await self._get_chatflow(chatflow_id)
        status = SubmissionStatus(status)
        completed_at = utcnow() if status == SubmissionStatus.COMPLETED else None

        if not submission_id:
            self._ensure_accepting(chatflow)
            submission = await self.submission_store.create(
                chatflow_id=chatflow_id,
                data=data,
                status=status.value,
                completed_at=completed_at,
            )
            logger.info(f"Created {status.value} submission {submission.id} for chatflow {chatflow_id}")
            return submission

        existing = await self.get_submission(submission_id, chatflow_id)
        merged = {**(existing.data or {}), **data}

        if existing.status in TERMINAL_STATUSES:
            if existing.status == status.value and merged == existing.data:
                logger.info(f"Submission {submission_id} already {existing.status}, nothing to do")
                return existing
            raise SubmissionClosedError(f"Submission {submission_id} is {existing.status}")

        updated = await self.submission_store.update(submission_id, {
            "data": merged,
            "status": status.value,
            "completed_at": completed_at,
        })
        if not updated:
            raise NotFoundError("Submission not found")
        logger.info(f"Submission {submission_id} marked {status.value}")
        return updated

    async def list_submissions(self, chatflow_id: str) -> List[ChatflowSubmission]:
        await self._get_chatflow(chatflow_id)
        return await self.submission_store.list_by_chatflow(chatflow_id)

    async def count_submissions(self, chatflow_id: str) -> int:
        return await self.submission_store.count_by_chatflow(chatflow_id)
