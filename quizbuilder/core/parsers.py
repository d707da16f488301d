# parsers.py
"""
Output parsers for generated quiz JSON.

The generator is asked for a bare JSON array but frequently wraps it in
code fences or an envelope object; these helpers undo that.
"""

import json
import re
import logging
from typing import Any, List
from langchain_core.output_parsers import BaseOutputParser

from quizbuilder.core.exceptions import ParseError

logger = logging.getLogger(__name__)

_LEADING_FENCE_RE = re.compile(r"^```(?:json)?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"```$")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker."""
    text = (text or "").strip()
    if text.startswith('\ufeff'):
        text = text[1:].lstrip()
    if text.startswith("```"):
        text = _LEADING_FENCE_RE.sub("", text)
        text = _TRAILING_FENCE_RE.sub("", text.rstrip())
        text = text.strip()
    return text


def parse_json(text: str) -> Any:
    """
    Parse generated text as JSON.
    
    One repair pass (trailing commas) is attempted before giving up.
    
    Raises:
        ParseError: If the text is not valid JSON after repair
    """
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        first_error = e
    
    repaired = _TRAILING_COMMA_RE.sub(r"\1", text or "")
    if repaired != text:
        try:
            data = json.loads(repaired)
            logger.debug("Parsed generated JSON after removing trailing commas")
            return data
        except json.JSONDecodeError:
            pass
    
    logger.debug(f"Failed text: {(text or '')[:300]}")
    raise ParseError(f"Invalid JSON format: {first_error}", raw_text=text)


def extract_question_items(parsed: Any) -> List[Any]:
    """Accept a bare array, {"items": [...]} or {"questions": [...]}; anything else is empty."""
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        for key in ("items", "questions"):
            if isinstance(parsed.get(key), list):
                return parsed[key]
    
    logger.warning(f"Unexpected JSON shape from generator: {type(parsed).__name__}")
    return []


class QuestionListOutputParser(BaseOutputParser):
    """
    Parser for quiz question JSON arrays.
    
    Strips code fences, parses JSON and unwraps the accepted envelope
    shapes. Raises ParseError on invalid JSON so callers can retry.
    """
    
    def parse(self, text: str) -> List[Any]:
        """Parse LLM output into a list of raw question dicts."""
        cleaned = strip_code_fences(text)
        data = parse_json(cleaned)
        items = extract_question_items(data)
        logger.debug(f"✅ Parsed {len(items)} raw items ({len(cleaned)} chars)")
        return items
    
    def get_format_instructions(self) -> str:
        """Return format instructions for the LLM."""
        return (
            "Return ONLY a JSON array of question objects. "
            "No wrapper object, no markdown fences, no prose."
        )
    
    @property
    def _type(self) -> str:
        return "question_list_json"


def parse_question_list(text: str) -> List[Any]:
    """Parse a question list from LLM output."""
    return QuestionListOutputParser().parse(text)
