"""Quiz generation pipeline: generate -> normalize -> filter -> enforce count."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from quizbuilder.schemas.quiz import GenerateOptions, QuizQuestion
from quizbuilder.services.count_enforcer import ensure_exact_count
from quizbuilder.services.generation_client import GenerationClient
from quizbuilder.services.normalizer import normalize_questions

logger = logging.getLogger(__name__)


def _coerce_options(options: Union[GenerateOptions, Mapping[str, Any], None]) -> GenerateOptions:
    """Validate an options mapping, dropping only the fields that fail validation."""
    if isinstance(options, GenerateOptions):
        return options
    data: Dict[str, Any] = dict(options or {})
    try:
        return GenerateOptions.model_validate(data)
    except ValidationError as e:
        bad_fields = {err["loc"][0] for err in e.errors() if err.get("loc")}
        logger.warning(f"Ignoring invalid generate options: {sorted(map(str, bad_fields))}")
        return GenerateOptions.model_validate({k: v for k, v in data.items() if k not in bad_fields})


async def generate_quiz_questions(
    prompt: str,
    options: Union[GenerateOptions, Mapping[str, Any], None] = None,
    client: Optional[GenerationClient] = None,
) -> List[QuizQuestion]:
    """
    Generate a quiz question list for a prompt.
    
    Never raises for upstream failures: with exact-count enforcement on
    (the default) the result always has exactly `options.count` items,
    all fillers in the worst case.
    
    Args:
        prompt: Prompt produced by build_prompt()
        options: count, allowedTypes, enforceExactCount, topic
        client: Generation client (HTTP client to the transport by default)
    
    Returns:
        Questions with ids 1..N, restricted to the allowed types
    """
    options = _coerce_options(options)
    client = client or GenerationClient()
    
    try:
        raw_items = await client.fetch_and_parse(prompt)
    except Exception as e:
        logger.error(f"Question generation failed, continuing with no items: {e}", exc_info=True)
        raw_items = []
    
    normalized = normalize_questions(raw_items)
    allowed = {t.value for t in options.allowedTypes}
    filtered = [q for q in normalized if q.type in allowed]
    
    logger.info(
        f"Pipeline: {len(raw_items)} raw, {len(normalized)} normalized, "
        f"{len(filtered)} of allowed types, target {options.count}"
    )
    
    if options.enforceExactCount:
        return ensure_exact_count(filtered, options.count, options.allowedTypes, options.topic)
    
    return [
        q.model_copy(update={"id": i})
        for i, q in enumerate(filtered[:options.count], start=1)
    ]
