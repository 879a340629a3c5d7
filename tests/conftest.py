import os

# Point the module-level engine at SQLite before any chatflow module is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from typing import Any, Dict, List

from chatflow.stores.inmemory import InMemoryChatflowStore, InMemorySubmissionStore
from chatflow.services.chatflow_service import ChatflowService
from chatflow.services.submission_service import SubmissionService
from chatflow.schemas.chatflow import ChatflowUpdate


class FakeLLM:
    """Stands in for LLMProvider.chat_completion; replays canned replies or raises them."""

    def __init__(self, replies: List[Any]):
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    async def __call__(self, **kwargs) -> str:
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def make_llm():
    return FakeLLM


@pytest.fixture
def chatflow_store():
    return InMemoryChatflowStore()


@pytest.fixture
def submission_store():
    return InMemorySubmissionStore()


@pytest.fixture
def chatflow_service(chatflow_store):
    return ChatflowService(chatflow_store)


@pytest.fixture
def submission_service(chatflow_store, submission_store):
    return SubmissionService(chatflow_store, submission_store)


@pytest.fixture
def contact_schema():
    return {
        "fields": [
            {"id": "f1", "name": "fullName", "label": "What is your full name?", "type": "text", "required": True},
            {"id": "f2", "name": "email", "label": "What is your email?", "type": "email", "required": True},
        ]
    }


@pytest_asyncio.fixture
async def published_chatflow(chatflow_service, contact_schema):
    chatflow = await chatflow_service.create_placeholder("collect name and email")
    await chatflow_service.update_chatflow(chatflow.id, ChatflowUpdate(name="Contact Form", schema=contact_schema))
    return await chatflow_service.publish(chatflow.id)
