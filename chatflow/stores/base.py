"""Store contracts for chatflows and submissions.

Both stores treat `definition` (the chatflow schema) and `data` (submission
answers) as untyped JSON documents; structure is enforced by
ValidationService and the conversation engine, never here. Writes are by id
and last write wins.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from chatflow.models.chatflow import Chatflow
from chatflow.models.submission import ChatflowSubmission


class ChatflowStore(Protocol):
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
        """Insert a new chatflow row."""

    async def get(self, chatflow_id: str) -> Optional[Chatflow]:
        """Fetch by id."""

    async def get_by_share_url(self, share_url: str) -> Optional[Chatflow]:
        """Fetch by public share token."""

    async def exists_by_share_url(self, share_url: str) -> bool:
        """Whether a share token is already taken."""

    async def update(self, chatflow_id: str, values: Dict[str, Any]) -> Optional[Chatflow]:
        """Apply `values` in one write; None when the id is unknown."""

    async def list(self, skip: int = 0, limit: int = 100, status: Optional[str] = None) -> List[Chatflow]:
        """Newest first."""


class SubmissionStore(Protocol):
    async def create(
        self,
        *,
        chatflow_id: str,
        data: Dict[str, Any],
        status: str,
        completed_at: Optional[datetime] = None,
    ) -> ChatflowSubmission:
        """Insert a submission with a freshly assigned id."""

    async def get(self, submission_id: str) -> Optional[ChatflowSubmission]:
        """Fetch by id."""

    async def update(self, submission_id: str, values: Dict[str, Any]) -> Optional[ChatflowSubmission]:
        """Apply `values` in one write; None when the id is unknown."""

    async def list_by_chatflow(self, chatflow_id: str) -> List[ChatflowSubmission]:
        """Newest first."""

    async def count_by_chatflow(self, chatflow_id: str) -> int:
        """Number of submissions for a chatflow."""
