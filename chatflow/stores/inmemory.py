"""In-memory implementations of the chatflow and submission stores.

Useful for tests or single-process development. Data is not persisted across
process restarts.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from chatflow.models.chatflow import Chatflow, utcnow
from chatflow.models.submission import ChatflowSubmission


class InMemoryChatflowStore:
    def __init__(self) -> None:
        self._chatflows: Dict[str, Chatflow] = {}

    async def create(
        self,
        *,
        name: str,
        description: str,
        definition: Dict[str, Any],
        status: str,
        share_url: str,
        generation_status: str,
    ) -> Chatflow:
        now = utcnow()
        chatflow = Chatflow(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            definition=dict(definition),
            status=status,
            share_url=share_url,
            generation_status=generation_status,
            generation_error=None,
            created_at=now,
            updated_at=now,
        )
        self._chatflows[chatflow.id] = chatflow
        return chatflow

    async def get(self, chatflow_id: str) -> Optional[Chatflow]:
        return self._chatflows.get(chatflow_id)

    async def get_by_share_url(self, share_url: str) -> Optional[Chatflow]:
        return next((c for c in self._chatflows.values() if c.share_url == share_url), None)

    async def exists_by_share_url(self, share_url: str) -> bool:
        return await self.get_by_share_url(share_url) is not None

    async def update(self, chatflow_id: str, values: Dict[str, Any]) -> Optional[Chatflow]:
        chatflow = self._chatflows.get(chatflow_id)
        if not chatflow:
            return None
        for key, value in values.items():
            setattr(chatflow, key, value)
        chatflow.updated_at = utcnow()
        return chatflow

    async def list(self, skip: int = 0, limit: int = 100, status: Optional[str] = None) -> List[Chatflow]:
        chatflows = [c for c in self._chatflows.values() if not status or c.status == status]
        chatflows.sort(key=lambda c: c.created_at, reverse=True)
        return chatflows[skip:skip + limit]


class InMemorySubmissionStore:
    def __init__(self) -> None:
        self._submissions: Dict[str, ChatflowSubmission] = {}

    async def create(
        self,
        *,
        chatflow_id: str,
        data: Dict[str, Any],
        status: str,
        completed_at: Optional[datetime] = None,
    ) -> ChatflowSubmission:
        now = utcnow()
        submission = ChatflowSubmission(
            id=str(uuid.uuid4()),
            chatflow_id=chatflow_id,
            data=dict(data),
            status=status,
            completed_at=completed_at,
            created_at=now,
            updated_at=now,
        )
        self._submissions[submission.id] = submission
        return submission

    async def get(self, submission_id: str) -> Optional[ChatflowSubmission]:
        return self._submissions.get(submission_id)

    async def update(self, submission_id: str, values: Dict[str, Any]) -> Optional[ChatflowSubmission]:
        submission = self._submissions.get(submission_id)
        if not submission:
            return None
        for key, value in values.items():
            setattr(submission, key, dict(value) if key == "data" else value)
        submission.updated_at = utcnow()
        return submission

    async def list_by_chatflow(self, chatflow_id: str) -> List[ChatflowSubmission]:
        submissions = [s for s in self._submissions.values() if s.chatflow_id == chatflow_id]
        submissions.sort(key=lambda s: s.created_at, reverse=True)
        return submissions

    async def count_by_chatflow(self, chatflow_id: str) -> int:
        return len([s for s in self._submissions.values() if s.chatflow_id == chatflow_id])
