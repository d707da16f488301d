"""
Centralized constants and enums for the quiz builder.

Single source of truth for question types, their synonyms and the
fixed prompt fragments shared by the prompt builder and the transport.
"""

from enum import Enum
from typing import Iterable, List, Optional


# ============================================================================
# Question Types
# ============================================================================

class QuestionType(str, Enum):
    """Question variants produced by the generation pipeline."""
    MULTIPLE_CHOICE = "multiple-choice"
    WRITTEN = "written"
    MATCHING = "matching"


ALL_QUESTION_TYPES: List[QuestionType] = [
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.WRITTEN,
    QuestionType.MATCHING,
]

# Order in which filler questions pick their type
FILLER_TYPE_PREFERENCE: List[QuestionType] = [
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.MATCHING,
    QuestionType.WRITTEN,
]


def normalize_question_type(value) -> Optional[QuestionType]:
    """Map a loosely spelled type name to a QuestionType, or None if unknown."""
    if isinstance(value, QuestionType):
        return value
    if not isinstance(value, str):
        return None
    
    value = value.lower().strip()
    
    mapping = {
        # Multiple-choice mappings
        "multiple-choice": QuestionType.MULTIPLE_CHOICE,
        "multiplechoice": QuestionType.MULTIPLE_CHOICE,
        "multiple_choice": QuestionType.MULTIPLE_CHOICE,
        "multiple choice": QuestionType.MULTIPLE_CHOICE,
        "mcq": QuestionType.MULTIPLE_CHOICE,
        "mc": QuestionType.MULTIPLE_CHOICE,
        
        # Matching mappings
        "matching": QuestionType.MATCHING,
        "match": QuestionType.MATCHING,
        
        # Written mappings
        "written": QuestionType.WRITTEN,
        "short-answer": QuestionType.WRITTEN,
        "short_answer": QuestionType.WRITTEN,
        "open": QuestionType.WRITTEN,
        "free-response": QuestionType.WRITTEN,
    }
    
    return mapping.get(value)


def normalize_allowed_types(values: Optional[Iterable]) -> List[QuestionType]:
    """Recognised types in caller order without duplicates; all types if none survive."""
    allowed: List[QuestionType] = []
    for value in values or []:
        qtype = normalize_question_type(value)
        if qtype is not None and qtype not in allowed:
            allowed.append(qtype)
    return allowed or list(ALL_QUESTION_TYPES)


# ============================================================================
# Generation Defaults
# ============================================================================

DEFAULT_TOPIC = "this subject"

DEFAULT_MODEL = "gpt-4o-mini"

SYSTEM_PROMPT = (
    "You create quiz questions. Output ONLY a valid JSON array with the exact "
    "property names. No markdown fences or extra text."
)

UNIQUENESS_REMINDER = (
    "IMPORTANT: All questions must be UNIQUE. Do not reuse the same stem or template. "
    "Vary phrasing, subtopics, and structure. Return ONLY a JSON array."
)
