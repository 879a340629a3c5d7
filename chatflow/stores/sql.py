from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, func, desc
from datetime import datetime
from typing import Any, Dict, List, Optional

from chatflow.core.exceptions import PersistenceError
from chatflow.core.logging import get_logger
from chatflow.models.chatflow import Chatflow
from chatflow.models.submission import ChatflowSubmission

logger = get_logger("stores.sql")


class _SqlStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, action: str):
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Store write failed during {action}: {e}")
            raise PersistenceError(f"Failed to {action}") from e

    async def _scalar_one_or_none(self, query, action: str):
        try:
            result = await self.db.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Store read failed during {action}: {e}")
            raise PersistenceError(f"Failed to {action}") from e

    async def _scalars(self, query, action: str) -> list:
        try:
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Store read failed during {action}: {e}")
            raise PersistenceError(f"Failed to {action}") from e


class SqlChatflowStore(_SqlStore):
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
        chatflow = Chatflow(
            name=name,
            description=description,
            definition=definition,
            status=status,
            share_url=share_url,
            generation_status=generation_status,
        )
        self.db.add(chatflow)
        await self._commit("create chatflow")
        return chatflow

    async def get(self, chatflow_id: str) -> Optional[Chatflow]:
        query = select(Chatflow).where(Chatflow.id == chatflow_id)
        return await self._scalar_one_or_none(query, "load chatflow")

    async def get_by_share_url(self, share_url: str) -> Optional[Chatflow]:
        query = select(Chatflow).where(Chatflow.share_url == share_url)
        return await self._scalar_one_or_none(query, "load chatflow by share url")

    async def exists_by_share_url(self, share_url: str) -> bool:
        query = select(Chatflow.id).where(Chatflow.share_url == share_url)
        return await self._scalar_one_or_none(query, "check share url") is not None

    async def update(self, chatflow_id: str, values: Dict[str, Any]) -> Optional[Chatflow]:
        chatflow = await self.get(chatflow_id)
        if not chatflow:
            return None
        for key, value in values.items():
            setattr(chatflow, key, value)
        await self._commit("update chatflow")
        return chatflow

    async def list(self, skip: int = 0, limit: int = 100, status: Optional[str] = None) -> List[Chatflow]:
        query = select(Chatflow)
        if status:
            query = query.where(Chatflow.status == status)
        query = query.order_by(desc(Chatflow.created_at)).offset(skip).limit(limit)
        return await self._scalars(query, "list chatflows")


class SqlSubmissionStore(_SqlStore):
    async def create(
        self,
        *,
        chatflow_id: str,
        data: Dict[str, Any],
        status: str,
        completed_at: Optional[datetime] = None,
    ) -> ChatflowSubmission:
        submission = ChatflowSubmission(
            chatflow_id=chatflow_id,
            data=dict(data),
            status=status,
            completed_at=completed_at,
        )
        self.db.add(submission)
        await self._commit("create submission")
        return submission

    async def get(self, submission_id: str) -> Optional[ChatflowSubmission]:
        query = select(ChatflowSubmission).where(ChatflowSubmission.id == submission_id)
        return await self._scalar_one_or_none(query, "load submission")

    async def update(self, submission_id: str, values: Dict[str, Any]) -> Optional[ChatflowSubmission]:
        submission = await self.get(submission_id)
        if not submission:
            return None
        for key, value in values.items():
            # JSON columns only notice reassignment, not in-place mutation
            setattr(submission, key, dict(value) if key == "data" else value)
        await self._commit("update submission")
        return submission

    async def list_by_chatflow(self, chatflow_id: str) -> List[ChatflowSubmission]:
        query = (
            select(ChatflowSubmission)
            .where(ChatflowSubmission.chatflow_id == chatflow_id)
            .order_by(desc(ChatflowSubmission.created_at))
        )
        return await self._scalars(query, "list submissions")

    async def count_by_chatflow(self, chatflow_id: str) -> int:
        query = select(func.count()).select_from(ChatflowSubmission).where(ChatflowSubmission.chatflow_id == chatflow_id)
        try:
            result = await self.db.execute(query)
            return int(result.scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Store read failed during count submissions: {e}")
            raise PersistenceError("Failed to count submissions") from e
