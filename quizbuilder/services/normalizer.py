"""
Question normalizer.

Turns loosely-shaped items parsed from generator output into the
canonical question variants. Every missing or malformed field degrades
to a safe default; nothing here raises on bad input.
"""

import json
import logging
import math
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from quizbuilder.core.constants import QuestionType, normalize_question_type
from quizbuilder.schemas.quiz import (
    MatchingQuestion,
    MultipleChoiceQuestion,
    QuizQuestion,
    WrittenQuestion,
)

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")
_LETTER_RE = re.compile(r"^\s*([A-Za-z])\s*[\).:]?\s*$")


# ── Coercion helpers ──────────────────────────────────────────


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _str_list(value: Any) -> List[str]:
    if _is_list(value):
        return [_to_str(v) for v in value]
    return []


def _as_int(value: Any) -> Optional[int]:
    """Integer value of an int, an integral float or a digit string; else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None
    if isinstance(value, str) and _INT_RE.match(value):
        return int(value)
    return None


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _points(value: Any):
    number = _as_number(value)
    if number is None or number <= 0:
        return 1
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def _index_in(value: Any, size: int) -> Optional[int]:
    index = _as_int(value)
    if index is None or not 0 <= index < size:
        return None
    return index


# ── Variant detection ─────────────────────────────────────────


def _looks_like_matching(item: Dict[str, Any]) -> bool:
    if _is_list(item.get("items")) and (_is_list(item.get("matches")) or _is_list(item.get("rightItems"))):
        return True
    return _is_list(item.get("leftItems")) and _is_list(item.get("rightItems"))


def detect_question_type(item: Dict[str, Any]) -> QuestionType:
    """Variant from the `type` field, else from matching-like fields, else written."""
    qtype = normalize_question_type(item.get("type"))
    if qtype is not None:
        return qtype
    if _looks_like_matching(item):
        return QuestionType.MATCHING
    return QuestionType.WRITTEN


# ── Per-variant field extraction ──────────────────────────────


def _options(item: Dict[str, Any]) -> List[str]:
    raw = item.get("options")
    if raw is None:
        raw = item.get("choices")
    if isinstance(raw, dict):
        # {"A": "...", "B": "..."} style
        return [_to_str(v) for v in raw.values()]
    return _str_list(raw)


def _correct_index(item: Dict[str, Any], options: Sequence[str]) -> Optional[int]:
    if "correctIndex" in item:
        value = item.get("correctIndex")
        if isinstance(value, str):
            return None
        return _index_in(value, len(options))
    
    # Legacy answer keys: a letter ("B") or the option text itself
    answer = item.get("correctAnswer", item.get("answer"))
    if not isinstance(answer, str):
        return None
    letter = _LETTER_RE.match(answer)
    if letter:
        return _index_in(ord(letter.group(1).upper()) - ord("A"), len(options))
    wanted = answer.strip().lower()
    for i, option in enumerate(options):
        if option.strip().lower() == wanted:
            return i
    return None


def _matching_columns(item: Dict[str, Any]) -> Tuple[List[str], List[str]]:
    items, matches = item.get("items"), item.get("matches")
    left, right = item.get("leftItems"), item.get("rightItems")
    
    if _is_list(items) and _is_list(matches):
        return _str_list(items), _str_list(matches)
    if _is_list(left) and _is_list(right):
        return _str_list(left), _str_list(right)
    if _is_list(items) and _is_list(right):
        return _str_list(items), _str_list(right)
    
    left_items: List[str] = []
    right_items: List[str] = []
    pairs = item.get("pairs")
    if _is_list(pairs):
        for pair in pairs:
            if isinstance(pair, dict) and "left" in pair and "right" in pair:
                left_items.append(_to_str(pair["left"]))
                right_items.append(_to_str(pair["right"]))
            elif _is_list(pair) and len(pair) >= 2:
                left_items.append(_to_str(pair[0]))
                right_items.append(_to_str(pair[1]))
    return left_items, right_items


def _correct_matches(value: Any, left_count: int, right_count: int) -> Optional[List[int]]:
    """All-or-nothing: one valid right index per left item, else None."""
    if not _is_list(value) or len(value) != left_count:
        return None
    indices = [_index_in(v, right_count) for v in value]
    if any(i is None for i in indices):
        return None
    return indices


def _expected_answers(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    return _str_list(value)


def _answer_boxes(value: Any) -> int:
    number = _as_number(value)
    if number is None or number <= 0:
        return 1
    return max(1, int(number))


# ── Public API ────────────────────────────────────────────────


def normalize_question(item: Any, question_id: int) -> QuizQuestion:
    """Normalize one raw item under the given id."""
    if isinstance(item, str):
        item = {"text": item}
    elif not isinstance(item, dict):
        item = {}
    
    explanation = item.get("explanation")
    base = {
        "id": question_id,
        "text": _to_str(item.get("text")),
        "points": _points(item.get("points")),
        "explanation": explanation if isinstance(explanation, str) else None,
    }
    qtype = detect_question_type(item)
    
    try:
        if qtype is QuestionType.MULTIPLE_CHOICE:
            options = _options(item)
            return MultipleChoiceQuestion(
                **base,
                options=options,
                correctIndex=_correct_index(item, options),
            )
        
        if qtype is QuestionType.MATCHING:
            left_items, right_items = _matching_columns(item)
            return MatchingQuestion(
                **base,
                leftItems=left_items,
                rightItems=right_items,
                correctMatches=_correct_matches(
                    item.get("correctMatches"), len(left_items), len(right_items)
                ),
            )
        
        return WrittenQuestion(
            **base,
            answerBoxes=_answer_boxes(item.get("answerBoxes")),
            expectedAnswers=_expected_answers(item.get("expectedAnswers")),
        )
    
    except ValidationError as e:
        logger.warning(f"Question {question_id} failed validation, keeping it as written: {e}")
        return WrittenQuestion(**base)


def normalize_questions(raw_items: Any) -> List[QuizQuestion]:
    """
    Normalize a list of raw generated items.
    
    Provided positive integer ids are kept; missing or invalid ids get
    the next integer no provided id uses.
    
    Args:
        raw_items: Parsed generator output (anything; non-lists yield [])
    
    Returns:
        One question per input item, in input order
    """
    if not _is_list(raw_items):
        return []
    
    provided = [
        _as_int(item.get("id")) if isinstance(item, dict) else None
        for item in raw_items
    ]
    provided = [pid if pid is not None and pid >= 1 else None for pid in provided]
    used = {pid for pid in provided if pid is not None}
    
    questions: List[QuizQuestion] = []
    next_id = 1
    for item, pid in zip(raw_items, provided):
        if pid is None:
            while next_id in used:
                next_id += 1
            pid = next_id
            used.add(pid)
        questions.append(normalize_question(item, pid))
    
    logger.debug(f"Normalized {len(questions)} questions")
    return questions
