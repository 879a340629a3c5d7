import time
from typing import List, Optional

from chatflow.core.exceptions import NotFoundError, PersistenceError
from chatflow.core.logging import get_logger
from chatflow.engine.generation.context import GenerationContext
from chatflow.engine.generation.steps import (
    AnalyzeStep,
    BaseStep,
    CompletionFn,
    GenerateSchemaStep,
    ValidateSchemaStep,
)
from chatflow.integrations.llm_provider import LLMProvider
from chatflow.schemas.chatflow import GenerationStatus, PLACEHOLDER_NAME
from chatflow.schemas.field import ChatflowSchema
from chatflow.stores.base import ChatflowStore

logger = get_logger("generation")


class GenerationOrchestrator:
    """
    Runs analyze -> generate -> validate for an existing placeholder chatflow and
    writes schema and name in one update. Nothing schema-related is written
    before the last step succeeds.
    """

    def __init__(self, store: ChatflowStore, complete: Optional[CompletionFn] = None):
        self.store = store
        self.complete = complete or LLMProvider.chat_completion
        self.steps: List[BaseStep] = [
            AnalyzeStep(self.complete),
            GenerateSchemaStep(self.complete),
            ValidateSchemaStep(self.complete),
        ]

    async def run(self, chatflow_id: str, description: str) -> ChatflowSchema:
        chatflow = await self.store.get(chatflow_id)
        if not chatflow:
            raise NotFoundError(f"Chatflow {chatflow_id} not found")

        await self.store.update(chatflow_id, {
            "generation_status": GenerationStatus.RUNNING.value,
            "generation_error": None,
        })

        context = GenerationContext(chatflow_id=chatflow_id, description=description)
        start_time = time.time()
        logger.info(f"Starting generation for chatflow {chatflow_id}")

        try:
            for step in self.steps:
                step_start = time.time()
                await step.execute(context)
                duration = int((time.time() - step_start) * 1000)
                logger.info(f"Generation step complete: {step.name} chatflow={chatflow_id} duration={duration}ms")

            await self.store.update(chatflow_id, {
                "definition": context.schema.to_document(),
                "name": context.suggested_name or PLACEHOLDER_NAME,
                "generation_status": GenerationStatus.SUCCEEDED.value,
                "generation_error": None,
            })
        except Exception as e:
            logger.error(f"Generation failed for chatflow {chatflow_id}: {e}")
            await self._mark_failed(chatflow_id, str(e))
            raise

        duration = int((time.time() - start_time) * 1000)
        logger.info(
            f"Generation completed for chatflow {chatflow_id} in {duration}ms "
            f"fields={len(context.schema.fields)} fallback={context.used_fallback}"
        )
        return context.schema

    async def _mark_failed(self, chatflow_id: str, reason: str):
        try:
            await self.store.update(chatflow_id, {
                "generation_status": GenerationStatus.FAILED.value,
                "generation_error": reason,
            })
        except PersistenceError as e:
            # The original error is re-raised by the caller
            logger.error(f"Could not record generation failure for chatflow {chatflow_id}: {e}")
