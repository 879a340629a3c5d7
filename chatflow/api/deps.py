from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from chatflow.database import get_db
from chatflow.services.chatflow_service import ChatflowService
from chatflow.services.submission_service import SubmissionService
from chatflow.stores.base import ChatflowStore, SubmissionStore
from chatflow.stores.sql import SqlChatflowStore, SqlSubmissionStore

async def get_chatflow_store(db: AsyncSession = Depends(get_db)) -> ChatflowStore:
    return SqlChatflowStore(db)

async def get_submission_store(db: AsyncSession = Depends(get_db)) -> SubmissionStore:
    return SqlSubmissionStore(db)

async def get_chatflow_service(store: ChatflowStore = Depends(get_chatflow_store)) -> ChatflowService:
    return ChatflowService(store)

async def get_submission_service(
    chatflow_store: ChatflowStore = Depends(get_chatflow_store),
    submission_store: SubmissionStore = Depends(get_submission_store),
) -> SubmissionService:
    return SubmissionService(chatflow_store, submission_store)
