from typing import Any, Dict, List, Optional

from chatflow.core.exceptions import ChatflowNotReadyError, NotFoundError
from chatflow.core.logging import get_logger
from chatflow.models.chatflow import Chatflow
from chatflow.schemas.chatflow import (
    ChatflowStatus,
    ChatflowUpdate,
    GenerationState,
    GenerationStatus,
    GenerationStatusResponse,
    PLACEHOLDER_NAME,
    PublicChatflow,
)
from chatflow.services.share_token import generate_unique_share_token
from chatflow.services.validation_service import ValidationService
from chatflow.stores.base import ChatflowStore

logger = get_logger("services.chatflow")


class ChatflowService:
    def __init__(self, store: ChatflowStore):
        self.store = store

    async def get(self, chatflow_id: str) -> Chatflow:
        chatflow = await self.store.get(chatflow_id)
        if not chatflow:
            raise NotFoundError("Chatflow not found")
        return chatflow

    async def list(self, skip: int = 0, limit: int = 100, status: Optional[str] = None) -> List[Chatflow]:
        return await self.store.list(skip=skip, limit=limit, status=status)

    async def create_placeholder(self, description: str) -> Chatflow:
        """Empty-schema DRAFT row that a generation job fills in later."""
        share_url = await generate_unique_share_token(self.store.exists_by_share_url)
        chatflow = await self.store.create(
            name=PLACEHOLDER_NAME,
            description=description,
            definition={},
            status=ChatflowStatus.DRAFT.value,
            share_url=share_url,
            generation_status=GenerationStatus.PENDING.value,
        )
        logger.info(f"Created placeholder chatflow {chatflow.id}")
        return chatflow

    async def mark_generation_failed(self, chatflow_id: str, reason: str) -> Chatflow:
        updated = await self.store.update(chatflow_id, {
            "generation_status": GenerationStatus.FAILED.value,
            "generation_error": reason,
        })
        if not updated:
            raise NotFoundError("Chatflow not found")
        logger.warning(f"Generation for chatflow {chatflow_id} marked failed: {reason}")
        return updated

    async def get_generation_status(self, chatflow_id: str) -> GenerationStatusResponse:
        chatflow = await self.get(chatflow_id)
        if chatflow.generation_status == GenerationStatus.FAILED.value:
            return GenerationStatusResponse(state=GenerationState.FAILED, error=chatflow.generation_error)
        if chatflow.generation_status == GenerationStatus.SUCCEEDED.value:
            return GenerationStatusResponse(
                state=GenerationState.COMPLETED,
                result={**(chatflow.definition or {}), "name": chatflow.name},
            )
        return GenerationStatusResponse(state=GenerationState.RUNNING)

    async def update_chatflow(self, chatflow_id: str, update: ChatflowUpdate) -> Chatflow:
        """Operator edits. A new schema must pass validation; publishing goes through `publish`."""
        chatflow = await self.get(chatflow_id)
        values: Dict[str, Any] = update.model_dump(exclude_unset=True)

        if values.get("definition") is not None:
            schema = ValidationService.validate_schema(values["definition"])
            values["definition"] = schema.to_document()
        else:
            values.pop("definition", None)

        status = values.pop("status", None)
        if values.get("name") is None:
            values.pop("name", None)

        target_status = ChatflowStatus(status) if status is not None else ChatflowStatus(chatflow.status)
        if target_status == ChatflowStatus.PUBLISHED and (status is not None or "definition" in values):
            # A published chatflow always holds a ready schema
            candidate = values.get("definition", chatflow.definition)
            self._ensure_ready(chatflow_id, candidate)
        if status is not None:
            values["status"] = ChatflowStatus(status).value

        if not values:
            return chatflow
        updated = await self.store.update(chatflow_id, values)
        if not updated:
            raise NotFoundError("Chatflow not found")
        logger.info(f"Updated chatflow {chatflow_id}: {sorted(values.keys())}")
        return updated

    async def publish(self, chatflow_id: str) -> Chatflow:
        chatflow = await self.get(chatflow_id)
        self._ensure_ready(chatflow_id, chatflow.definition)

        values: Dict[str, Any] = {"status": ChatflowStatus.PUBLISHED.value}
        if not chatflow.share_url:
            values["share_url"] = await generate_unique_share_token(self.store.exists_by_share_url)

        updated = await self.store.update(chatflow_id, values)
        if not updated:
            raise NotFoundError("Chatflow not found")
        logger.info(f"Published chatflow {chatflow_id} at {updated.share_url}")
        return updated

    async def get_public_chatflow(self, share_url: str) -> PublicChatflow:
        chatflow = await self.store.get_by_share_url(share_url)
        # Drafts and archived chatflows do not exist for the public
        if not chatflow or chatflow.status != ChatflowStatus.PUBLISHED.value:
            raise NotFoundError("Chatflow not found")
        schema = ValidationService.validate_schema(chatflow.definition)
        return PublicChatflow(id=chatflow.id, name=chatflow.name, fields=schema.fields)

    @staticmethod
    def _ensure_ready(chatflow_id: str, definition: Any):
        if not definition:
            raise ChatflowNotReadyError(f"Chatflow {chatflow_id} has no schema yet")
        schema = ValidationService.validate_schema(definition)
        if not schema.fields:
            raise ChatflowNotReadyError(f"Chatflow {chatflow_id} has no fields")
