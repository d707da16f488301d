"""
Count/uniqueness enforcement.

De-duplicates questions by normalized text, pads short batches with
deterministic filler questions, truncates long ones and renumbers the
result 1..N. This is the only stage that invents content.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set

from quizbuilder.core.constants import (
    DEFAULT_TOPIC,
    FILLER_TYPE_PREFERENCE,
    QuestionType,
    normalize_allowed_types,
)
from quizbuilder.schemas.quiz import (
    MatchingQuestion,
    MultipleChoiceQuestion,
    QuizQuestion,
    WrittenQuestion,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Filler banks (rotated by position)
# ============================================================================

MC_STEMS = [
    "Which statement about {topic} is most accurate?",
    "Which option best illustrates {topic} in practice?",
    "Which concept is core to {topic}?",
    "Which of these is most closely tied to {topic}?",
    "Which description best matches {topic}?",
]

MC_OPTION_BANKS = [
    ["A core idea in {topic}", "Sometimes related to {topic}", "Tangential", "Not related"],
    ["Fundamental to {topic}", "Peripheral to {topic}", "Outdated", "Incorrect"],
    ["Central principle of {topic}", "Occasionally relevant", "Rarely relevant", "Contradictory"],
]

MATCHING_STEMS = [
    "Match each term to its brief definition ({topic}).",
    "Match each concept to an example of it ({topic}).",
    "Match each layer to its role ({topic}).",
]

MATCHING_LEFT_BANKS = [
    ["Term A", "Term B", "Term C"],
    ["Concept X", "Concept Y", "Concept Z"],
    ["Layer 1", "Layer 2", "Layer 3"],
]

MATCHING_RIGHT_BANKS = [
    ["Definition A", "Definition B", "Definition C"],
    ["Example X", "Example Y", "Example Z"],
    ["Role 1", "Role 2", "Role 3"],
]

WRITTEN_PROMPTS = [
    "Define one key idea in {topic} and give a one-sentence example.",
    "Briefly explain why {topic} matters in practice.",
    "State a principle of {topic} and how it's applied.",
    "Describe a common pitfall to avoid in {topic}.",
]

_BANK_SIZES = {
    QuestionType.MULTIPLE_CHOICE: len(MC_STEMS),
    QuestionType.MATCHING: len(MATCHING_STEMS),
    QuestionType.WRITTEN: len(WRITTEN_PROMPTS),
}


def _pick(bank: Sequence, index: int):
    return bank[index % len(bank)]


def normalization_key(text: Optional[str]) -> str:
    """Whitespace-collapsed, lowercased question text used for duplicate detection."""
    return " ".join(str(text or "").split()).lower()


def filler_type(allowed_types: Iterable) -> QuestionType:
    """First of multiple-choice, matching, written that the caller allows."""
    allowed = normalize_allowed_types(allowed_types)
    for qtype in FILLER_TYPE_PREFERENCE:
        if qtype in allowed:
            return qtype
    return QuestionType.WRITTEN


def create_filler_question(
    question_id: int,
    allowed_types: Iterable,
    topic: str = DEFAULT_TOPIC,
    variant: Optional[int] = None,
) -> QuizQuestion:
    """
    Build a deterministic filler question.
    
    Args:
        question_id: Id of the filler; also selects the bank variant
        allowed_types: Types the batch may contain
        topic: Topic label substituted into the templates
        variant: Bank position override (defaults to question_id - 1)
    """
    topic = topic.strip() if isinstance(topic, str) and topic.strip() else DEFAULT_TOPIC
    index = question_id - 1 if variant is None else variant
    qtype = filler_type(allowed_types)
    
    if qtype is QuestionType.MULTIPLE_CHOICE:
        return MultipleChoiceQuestion(
            id=question_id,
            text=_pick(MC_STEMS, index).format(topic=topic),
            points=1,
            options=[option.format(topic=topic) for option in _pick(MC_OPTION_BANKS, index)],
            correctIndex=0,
            explanation=f"Option 1 is directly tied to {topic}; others are less central or unrelated.",
        )
    
    if qtype is QuestionType.MATCHING:
        return MatchingQuestion(
            id=question_id,
            text=_pick(MATCHING_STEMS, index).format(topic=topic),
            points=1,
            leftItems=list(_pick(MATCHING_LEFT_BANKS, index)),
            rightItems=list(_pick(MATCHING_RIGHT_BANKS, index)),
            correctMatches=[0, 1, 2],
            explanation="Each item pairs with the like-labeled description.",
        )
    
    return WrittenQuestion(
        id=question_id,
        text=_pick(WRITTEN_PROMPTS, index).format(topic=topic),
        points=1,
        answerBoxes=1,
        expectedAnswers=["Concise definition/example"],
        explanation="A short, precise statement is enough.",
    )


def _next_filler(
    position: int,
    allowed_types: Sequence[QuestionType],
    topic: str,
    seen: Set[str],
) -> QuizQuestion:
    """Filler for `position`, skipping bank variants whose text is already used."""
    bank_size = _BANK_SIZES[filler_type(allowed_types)]
    first = None
    for offset in range(bank_size):
        candidate = create_filler_question(position, allowed_types, topic, variant=position - 1 + offset)
        if normalization_key(candidate.text) not in seen:
            return candidate
        if first is None:
            first = candidate
    
    logger.warning(f"Filler bank exhausted at position {position}; reusing question text")
    return first


def ensure_exact_count(
    questions: Sequence[QuizQuestion],
    target_count: int,
    allowed_types: Iterable,
    topic: str = DEFAULT_TOPIC,
) -> List[QuizQuestion]:
    """
    De-duplicate, pad or truncate to exactly `target_count` questions.
    
    1. Drop questions whose normalized text is empty or already seen
       (first occurrence wins).
    2. Append filler questions until the target is reached.
    3. Truncate to the target, preserving order.
    4. Renumber ids 1..target_count.
    """
    target_count = max(0, int(target_count))
    allowed = normalize_allowed_types(allowed_types)
    
    seen: Set[str] = set()
    unique: List[QuizQuestion] = []
    for question in questions:
        key = normalization_key(question.text)
        if key and key not in seen:
            seen.add(key)
            unique.append(question)
    
    dropped = len(questions) - len(unique)
    if dropped:
        logger.info(f"Dropped {dropped} duplicate or empty questions")
    
    fillers = 0
    while len(unique) < target_count:
        filler = _next_filler(len(unique) + 1, allowed, topic, seen)
        seen.add(normalization_key(filler.text))
        unique.append(filler)
        fillers += 1
    
    if fillers:
        logger.info(f"Padded batch with {fillers} filler questions")
    if len(unique) > target_count:
        logger.info(f"Truncated batch from {len(unique)} to {target_count} questions")
        unique = unique[:target_count]
    
    return [q.model_copy(update={"id": i}) for i, q in enumerate(unique, start=1)]
