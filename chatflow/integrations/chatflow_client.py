import asyncio
import httpx
from typing import Optional, Dict, Any
from chatflow.config import settings
from chatflow.core.exceptions import GenerationFailedError, GenerationTimeoutError
from chatflow.core.logging import get_logger

logger = get_logger("chatflow_client")

class ChatflowClient:
    """HTTP client for the chatflow API, used by UIs and scripts that start generations and poll them."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.CHATFLOW_API_URL
        api_key = api_key or settings.CHATFLOW_API_KEY
        self.headers = {
            "Authorization": f"Bearer {api_key}"
        } if api_key else {}
        self.transport = transport
        self.prefix = settings.API_V1_STR

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, headers=self.headers, transport=self.transport)

    async def start_generation(self, description: str) -> str:
        async with self._client() as client:
            response = await client.post(f"{self.prefix}/chatflows/generate", json={"description": description})
            response.raise_for_status()
            return response.json()["chatflow_id"]

    async def get_generation_status(self, chatflow_id: str) -> Dict[str, Any]:
        async with self._client() as client:
            response = await client.get(f"{self.prefix}/chatflows/generate/{chatflow_id}")
            response.raise_for_status()
            return response.json()

    async def wait_for_generation(
        self,
        chatflow_id: str,
        max_attempts: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Poll until generation finishes and return `{...schema, name}`.
        Still running after the last attempt raises GenerationTimeoutError, which
        is not a failure: the job may yet complete.
        """
        max_attempts = max_attempts if max_attempts is not None else settings.GENERATION_POLL_MAX_ATTEMPTS
        interval = interval if interval is not None else settings.GENERATION_POLL_INTERVAL

        for attempt in range(1, max_attempts + 1):
            status = await self.get_generation_status(chatflow_id)
            state = status.get("state")
            if state == "completed":
                return status["result"]
            if state == "failed":
                raise GenerationFailedError(status.get("error") or "Generation failed")
            logger.debug(f"Chatflow {chatflow_id} still generating (attempt {attempt}/{max_attempts})")
            if attempt < max_attempts:
                await asyncio.sleep(interval)

        raise GenerationTimeoutError(
            f"Chatflow {chatflow_id} still generating after {max_attempts} attempts"
        )

    async def get_public_chatflow(self, share_url: str) -> Dict[str, Any]:
        async with self._client() as client:
            response = await client.get(f"{self.prefix}/public/{share_url}")
            response.raise_for_status()
            return response.json()

    async def publish(self, chatflow_id: str) -> str:
        async with self._client() as client:
            response = await client.post(f"{self.prefix}/chatflows/{chatflow_id}/publish")
            response.raise_for_status()
            return response.json()["share_url"]
