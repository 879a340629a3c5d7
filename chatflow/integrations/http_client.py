import httpx
from chatflow.config import settings
from chatflow.core.logging import get_logger

logger = get_logger("http_client")

class HttpClient:
    _client: httpx.AsyncClient | None = None

    @classmethod
    async def get_client(cls) -> httpx.AsyncClient:
        if cls._client is None or cls._client.is_closed:
            logger.info("Initializing global HTTP client")
            # Language-model calls have no timeout of their own; this is it
            cls._client = httpx.AsyncClient(
                timeout=httpx.Timeout(settings.LLM_TIMEOUT),
                limits=httpx.Limits(max_keepalive_connections=20, max_connections=100)
            )
        return cls._client

    @classmethod
    async def close_client(cls):
        if cls._client and not cls._client.is_closed:
            logger.info("Closing global HTTP client")
            await cls._client.aclose()
        cls._client = None

async def get_http_client() -> httpx.AsyncClient:
    return await HttpClient.get_client()
