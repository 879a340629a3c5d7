from typing import Optional
from chatflow.config import settings
from chatflow.core.exceptions import TransientServiceError
from chatflow.core.logging import get_logger
from chatflow.integrations.http_client import get_http_client
from openai import AsyncOpenAI
from anthropic import AsyncAnthropic

logger = get_logger("llm")

class LLMProvider:
    @staticmethod
    async def _get_openai_client() -> AsyncOpenAI:
        return AsyncOpenAI(api_key=settings.OPENAI_API_KEY, http_client=await get_http_client())

    @staticmethod
    async def _get_anthropic_client() -> AsyncAnthropic:
        return AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY, http_client=await get_http_client())

    @staticmethod
    async def chat_completion(
        user_prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 2000,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        """
        Single-turn completion returning the text of the first content block.
        Every failure, including a missing API key, surfaces as TransientServiceError.
        """
        provider = provider or settings.LLM_PROVIDER
        model = model or settings.LLM_MODEL
        logger.info(f"LLM Chat Completion: provider={provider} model={model}")

        try:
            if provider == "openai":
                if not settings.OPENAI_API_KEY:
                    raise TransientServiceError("OPENAI_API_KEY is not configured")
                client = await LLMProvider._get_openai_client()
                messages = []
                if system_prompt:
                    messages.append({"role": "system", "content": system_prompt})
                messages.append({"role": "user", "content": user_prompt})

                response = await client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens
                )
                content = response.choices[0].message.content
                if not content:
                    raise TransientServiceError("Empty completion from openai")
                return content

            elif provider == "anthropic":
                if not settings.ANTHROPIC_API_KEY:
                    raise TransientServiceError("ANTHROPIC_API_KEY is not configured")
                client = await LLMProvider._get_anthropic_client()
                response = await client.messages.create(
                    model=model,
                    system=system_prompt if system_prompt else "",
                    messages=[{"role": "user", "content": user_prompt}],
                    max_tokens=max_tokens,
                    temperature=temperature
                )
                block = response.content[0] if response.content else None
                if block is None or getattr(block, "type", None) != "text":
                    raise TransientServiceError("Unexpected response type from anthropic")
                return block.text

            else:
                raise TransientServiceError(f"Unsupported LLM provider: {provider}")

        except TransientServiceError:
            raise
        except Exception as e:
            logger.error(f"LLM API call failed: {e}")
            raise TransientServiceError(f"LLM API call failed: {e}") from e
