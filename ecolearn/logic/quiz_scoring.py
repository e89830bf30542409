"""
Quiz scoring

Scoring is pure: whether the user attempted the quiz before is passed in,
never looked up here.
"""
from typing import Dict, Any, List
import logging

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_POINTS = 10


def question_points(question: Dict[str, Any], default: int = DEFAULT_QUESTION_POINTS) -> int:
    points = question.get('points')
    return default if points is None else points


def total_points(questions: List[Dict[str, Any]], default: int = DEFAULT_QUESTION_POINTS) -> int:
    return sum(question_points(q, default) for q in questions)


def score_quiz(
    questions: List[Dict[str, Any]],
    answers: List[Dict[str, Any]],
    has_prior_attempt: bool,
    default_points: int = DEFAULT_QUESTION_POINTS
) -> Dict[str, Any]:
    """
    Score a quiz submission.

    Each question is matched to the answer with the same questionIndex and
    earns its points when answerIndex equals correctAnswer. Unanswered
    questions are reported with answerIndex -1.

    Args:
        questions: [{question, options, correctAnswer, points}]
        answers: [{questionIndex, answerIndex}]
        has_prior_attempt: the user already has a stored attempt for this quiz
        default_points: points for questions without an explicit value

    Returns:
        {score, totalPoints, percentage, answers, pointsAwarded, isFirstAttempt}
    """
    by_index = {}
    for answer in answers or []:
        by_index.setdefault(answer.get('questionIndex'), answer)

    score = 0
    total = 0
    results = []

    for index, question in enumerate(questions):
        points = question_points(question, default_points)
        total += points
        answer = by_index.get(index)
        answer_index = answer.get('answerIndex') if answer else -1
        is_correct = answer is not None and answer_index == question.get('correctAnswer')

        if is_correct:
            score += points

        results.append({
            'questionIndex': index,
            'answerIndex': answer_index,
            'isCorrect': is_correct,
            'points': points if is_correct else 0,
        })

    percentage = (score / total) * 100 if total > 0 else 0
    points_awarded = 0 if has_prior_attempt else score

    logger.info(f"Quiz scored: {score}/{total} ({percentage:.1f}%), first attempt: {not has_prior_attempt}")

    return {
        'score': score,
        'totalPoints': total,
        'percentage': percentage,
        'answers': results,
        'pointsAwarded': points_awarded,
        'isFirstAttempt': not has_prior_attempt,
    }


def hide_answers(quiz: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a quiz without correctAnswer on its questions"""
    visible = dict(quiz)
    visible['questions'] = [
        {k: v for k, v in question.items() if k != 'correctAnswer'}
        for question in quiz.get('questions', [])
    ]
    return visible
