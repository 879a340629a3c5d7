import asyncio
from celery_app.celery import celery_app
from chatflow.core.exceptions import PersistenceError, SchemaValidationError, NotFoundError
from chatflow.core.logging import logger
from chatflow.database import AsyncSessionLocal
from chatflow.engine.generation import GenerationOrchestrator
from chatflow.integrations.http_client import HttpClient
from chatflow.stores.sql import SqlChatflowStore

@celery_app.task(
    name="generate_chatflow_task",
    bind=True,
    max_retries=3,
    default_retry_delay=30,
    acks_late=True
)
def generate_chatflow_task(self, chatflow_id: str, description: str):
    try:
        return asyncio.run(async_generate_chatflow(chatflow_id, description))
    except (SchemaValidationError, NotFoundError) as exc:
        # Not retryable: the chatflow is already marked FAILED (or gone)
        logger.error(f"Generation for chatflow {chatflow_id} failed permanently: {exc}")
        return {"chatflow_id": chatflow_id, "status": "failed", "error": str(exc)}
    except PersistenceError as exc:
        logger.error(f"Generation task failed, retrying: {exc}")
        raise self.retry(exc=exc)

async def async_generate_chatflow(chatflow_id: str, description: str):
    try:
        async with AsyncSessionLocal() as db:
            orchestrator = GenerationOrchestrator(SqlChatflowStore(db))
            schema = await orchestrator.run(chatflow_id, description)
            return {"chatflow_id": chatflow_id, "status": "completed", "fields": len(schema.fields)}
    finally:
        # asyncio.run closes the loop the shared client was bound to
        await HttpClient.close_client()
