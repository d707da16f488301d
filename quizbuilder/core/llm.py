import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from quizbuilder.core.config import settings
from quizbuilder.core.constants import SYSTEM_PROMPT
from quizbuilder.core.exceptions import LLMError, MissingCredentialError

logger = logging.getLogger(__name__)


class LLMClient:
    """Chat-completion client behind the transport endpoint."""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.base_url = base_url or settings.OPENAI_BASE_URL
        self._client: Optional[AsyncOpenAI] = None

    @property
    def has_key(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> AsyncOpenAI:
        # Created lazily so the app starts (and /api/ping answers) without a key
        if self._client is None:
            if not self.has_key:
                raise MissingCredentialError("Missing OPENAI_API_KEY")
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=settings.GENERATION_TIMEOUT
            )
            logger.info(f"🔹 LLM Client Initialized: OpenAI Compatible ({settings.MODEL_NAME})")
        return self._client

    async def complete(self, prompt: str, model: Optional[str] = None) -> str:
        """Return the raw completion text for a quiz prompt ("[]" if empty)."""
        model = model or settings.MODEL_NAME
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt}
                ],
                max_tokens=settings.LLM_MAX_TOKENS,
                temperature=settings.LLM_TEMPERATURE
            )
        except OpenAIError as e:
            logger.error(f"❌ LLM Error: {e}")
            raise LLMError(str(e) or "OpenAI request failed", details=getattr(e, "body", None)) from e

        if not response.choices:
            return "[]"
        return response.choices[0].message.content or "[]"

llm_client = LLMClient()
