"""
Generation client: sends a quiz prompt to the text-generation service
and turns its reply into a list of raw question items.

Failures never escape fetch_and_parse(); after the bounded retry the
caller gets an empty list and the enforcer pads it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx

from quizbuilder.core.config import settings
from quizbuilder.core.exceptions import LLMError, ParseError, TransportError
from quizbuilder.core.llm import LLMClient, llm_client
from quizbuilder.core.parsers import QuestionListOutputParser, strip_code_fences
from quizbuilder.core.prompt_builder import append_uniqueness_reminder

logger = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """How many times to re-ask, and how to amend the prompt when doing so."""
    max_retries: int = field(default_factory=lambda: settings.GENERATION_MAX_RETRIES)
    amend: Callable[[str], str] = append_uniqueness_reminder


class GenerationClient:
    """
    Client for the transport endpoint (POST {prompt, model} -> {content}).
    
    Example:
        client = GenerationClient()
        items = await client.fetch_and_parse(prompt)
    """
    
    def __init__(
        self,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint or settings.GENERATION_ENDPOINT
        self.model = model or settings.MODEL_NAME
        self.timeout = timeout if timeout is not None else settings.GENERATION_TIMEOUT
        self.retry_policy = retry_policy or RetryPolicy()
        self.transport = transport
        self.parser = QuestionListOutputParser()
    
    async def _request(self, prompt: str, model: str) -> Dict[str, Any]:
        """POST the prompt and return the decoded success body."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, json={"prompt": prompt, "model": model})
        except httpx.HTTPError as e:
            raise TransportError(f"Generation request failed: {e}") from e
        
        if not response.is_success:
            body = _json_or_none(response)
            error = body.get("error") if isinstance(body, dict) else None
            raise TransportError(
                error if isinstance(error, str) and error else f"HTTP {response.status_code}",
                status_code=response.status_code,
                details=body.get("details") if isinstance(body, dict) else None,
            )
        
        body = _json_or_none(response)
        if not isinstance(body, dict):
            raise TransportError(
                "Malformed response from generation service",
                status_code=response.status_code,
                details=response.text[:500],
            )
        return body
    
    async def call_generation_service(self, prompt: str, model: Optional[str] = None) -> str:
        """
        Send one prompt and return the fence-stripped raw text.
        
        Raises:
            TransportError: If the request fails or the service reports an error
        """
        data = await self._request(prompt, model or self.model)
        content = data.get("content")
        if not isinstance(content, str):
            content = "[]"
        return strip_code_fences(content)
    
    async def fetch_and_parse(self, prompt: str) -> List[Any]:
        """
        Generate and parse a question list, retrying per the retry policy.
        
        Transport and parse failures both trigger the retry; when every
        attempt fails an empty list is returned.
        """
        attempts = 1 + max(0, self.retry_policy.max_retries)
        
        for attempt in range(attempts):
            if attempt == 0:
                effective_prompt = prompt
            else:
                effective_prompt = self.retry_policy.amend(prompt)
                logger.info(f"Retry attempt {attempt}/{attempts - 1} with amended prompt")
            
            try:
                raw = await self.call_generation_service(effective_prompt)
                items = self.parser.parse(raw)
                logger.info(f"Generation returned {len(items)} raw items (attempt {attempt + 1})")
                return items
            except (TransportError, ParseError) as e:
                logger.warning(
                    f"Generation attempt {attempt + 1}/{attempts} failed: "
                    f"{type(e).__name__}: {str(e)[:200]}"
                )
        
        logger.error(f"Generation failed after {attempts} attempts; continuing with no items")
        return []


class LocalGenerationClient(GenerationClient):
    """Calls the LLM in-process instead of going through the HTTP endpoint."""
    
    def __init__(self, llm: Optional[LLMClient] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.llm = llm or llm_client
    
    async def _request(self, prompt: str, model: str) -> Dict[str, Any]:
        try:
            content = await self.llm.complete(prompt, model)
        except LLMError as e:
            raise TransportError(str(e), status_code=500, details=e.details) from e
        return {"content": content}


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
