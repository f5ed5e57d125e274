import logging
from typing import AsyncIterator, List, Optional, Union

from groq import AsyncGroq
from openai import AsyncOpenAI

from app.core.config import settings
from app.core.exceptions import LLMError

logger = logging.getLogger(__name__)

# Plain text, or chat content parts (text plus an inline file)
UserContent = Union[str, List[dict]]


class LLMClient:
    """
    Chat-completions client for the hosted quiz model.

    Both backends expose the same streaming interface:
    - "openai": any OpenAI-compatible endpoint (Gemini, DeepSeek, Ollama, ...)
    - "groq": Groq's hosted Llama models
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.provider = (provider or settings.LLM_PROVIDER).lower()
        self.timeout = timeout or settings.LLM_TIMEOUT
        self.temperature = settings.LLM_TEMPERATURE
        self.max_tokens = settings.LLM_MAX_TOKENS

        if self.provider == "groq":
            key = api_key or (settings.GROQ_API_KEY.get_secret_value() if settings.GROQ_API_KEY else None)
            self.model = model or settings.GROQ_MODEL
            self.client = AsyncGroq(api_key=key or "missing-key", timeout=self.timeout)
        else:
            key = api_key or (settings.LLM_API_KEY.get_secret_value() if settings.LLM_API_KEY else None)
            self.model = model or settings.MODEL_NAME
            self.client = AsyncOpenAI(
                api_key=key or "missing-key",
                base_url=base_url or settings.LLM_BASE_URL,
                timeout=self.timeout,
            )

        if not key:
            logger.warning(f"No API key configured for provider '{self.provider}', generation will fail")
        logger.info(f"🔹 LLM Client Initialized: {self.provider} ({self.model})")

    def _messages(self, prompt: UserContent, system_prompt: str) -> List[dict]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]

    async def open_stream(self, prompt: UserContent, system_prompt: str) -> AsyncIterator[str]:
        """
        Open a streaming completion and return an iterator over text deltas.

        The request is sent before this coroutine returns, so connection and
        authentication failures are raised here rather than mid-stream.
        """
        try:
            stream = await self.client.chat.completions.create(
                model=self.model,
                messages=self._messages(prompt, system_prompt),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                stream=True,
            )
        except Exception as e:
            logger.error(f"{self.provider} API error: {e}")
            raise LLMError(f"LLM request failed: {e}") from e

        return self._deltas(stream)

    async def _deltas(self, stream) -> AsyncIterator[str]:
        try:
            async for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except Exception as e:
            logger.error(f"{self.provider} streaming error: {e}")
            raise LLMError(f"LLM stream interrupted: {e}") from e

    async def generate(self, prompt: str, system_prompt: str = "You are a helpful assistant.") -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self._messages(prompt, system_prompt),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            logger.error(f"{self.provider} API error: {e}")
            raise LLMError(f"LLM request failed: {e}") from e
        return response.choices[0].message.content or ""
