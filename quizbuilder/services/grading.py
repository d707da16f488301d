"""
Exact-match grading of a submitted quiz.

Multiple-choice and matching questions are graded automatically;
written answers are always returned for manual review.
"""

import logging
from typing import List, Optional, Sequence

from quizbuilder.schemas.quiz import (
    MatchingQuestion,
    MultipleChoiceQuestion,
    QuizQuestion,
    QuizResult,
    QuizSubmission,
    ReviewItem,
)

logger = logging.getLogger(__name__)


def _option_text(question: MultipleChoiceQuestion, index: Optional[int]) -> Optional[str]:
    if index is None or not 0 <= index < len(question.options):
        return None
    return question.options[index]


def score_percent(correct: int, gradable: int) -> int:
    """Percentage rounded half up; 0 when nothing is auto-gradable."""
    if gradable <= 0:
        return 0
    return (correct * 200 + gradable) // (gradable * 2)


def grade_quiz(questions: Sequence[QuizQuestion], submission: QuizSubmission) -> QuizResult:
    """
    Grade a submission against the generated answer keys.
    
    A multiple-choice question without a correctIndex can never be
    answered correctly; a matching question without correctMatches is
    compared against an empty list.
    """
    review: List[ReviewItem] = []
    correct = 0
    gradable = 0
    
    for question in questions:
        if isinstance(question, MultipleChoiceQuestion):
            gradable += 1
            selected = submission.selectedAnswers.get(question.id)
            if question.correctIndex is not None and selected == question.correctIndex:
                correct += 1
                continue
            review.append(ReviewItem(
                question=question,
                yourAnswer=_option_text(question, selected),
                correctAnswer=_option_text(question, question.correctIndex),
                explanation=question.explanation,
            ))
        
        elif isinstance(question, MatchingQuestion):
            gradable += 1
            submitted = submission.matchingAnswers.get(question.id, [])
            expected = question.correctMatches or []
            if list(submitted) == list(expected):
                correct += 1
                continue
            review.append(ReviewItem(
                question=question,
                yourAnswer=submitted,
                correctAnswer=expected,
                explanation=question.explanation,
            ))
        
        else:
            review.append(ReviewItem(
                question=question,
                yourAnswer=submission.writtenAnswers.get(question.id, []),
                correctAnswer=question.expectedAnswers,
                explanation=question.explanation,
                autoGraded=False,
            ))
    
    score = score_percent(correct, gradable)
    logger.info(f"Graded quiz: {correct}/{gradable} auto-gradable correct ({score}%)")
    
    return QuizResult(total=len(questions), correct=correct, score=score, review=review)
