"""
Quiz Service

Quiz catalog, quiz submission with first-attempt-only points, and the
daily question.
"""
import logging
from typing import Dict, Any, List, Optional

from ecolearn import dynamo, dynamo_learning
from ecolearn.config import get_settings
from ecolearn.errors import ForbiddenError, NotFoundError, ValidationError
from ecolearn.logic.gamification import apply_points
from ecolearn.logic.quiz_scoring import hide_answers, score_quiz, total_points
from ecolearn.services.access import content_school, ensure_can_manage, is_admin, visible_to
from ecolearn.services.module_service import module_service

logger = logging.getLogger(__name__)
settings = get_settings()


class QuizService:

    async def get_quiz(self, quiz_id: str) -> Dict[str, Any]:
        quiz = await dynamo_learning.get_quiz(quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")
        return quiz

    def view_for(self, quiz: Dict[str, Any], user: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Students never see correct answers"""
        if user and user.get('role') in ('teacher', 'admin'):
            return quiz
        return hide_answers(quiz)

    async def list_quizzes(self, user: Optional[Dict[str, Any]], module_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Active quizzes visible to the caller. Each carries canAttempt, false
        when the quiz requires completing a module the caller has not finished.
        """
        quizzes = await dynamo_learning.list_quizzes(active_only=True, module_id=module_id)
        results = []
        for quiz in quizzes:
            if not visible_to(quiz, user):
                continue
            view = self.view_for(quiz, user)
            view['canAttempt'] = await self._can_attempt(user, quiz)
            if user:
                view['lastScore'] = user.get('quizAttempts', {}).get(quiz['quiz_id'])
            results.append(view)
        return results

    async def _can_attempt(self, user: Optional[Dict[str, Any]], quiz: Dict[str, Any]) -> bool:
        if user is None:
            return False
        if not (quiz.get('requiresModuleCompletion') and quiz.get('module')):
            return True
        return await module_service.has_completed(user['user_id'], quiz['module'])

    async def create_quiz(self, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        if data.get('module'):
            await module_service.get_module(data['module'])

        now = dynamo.utc_now().isoformat()
        quiz = {
            **data,
            'quiz_id': dynamo.new_id(),
            'totalPoints': total_points(data['questions'], settings.DEFAULT_QUESTION_POINTS),
            'isDailyQuestion': False,
            'dailyDate': None,
            'school': content_school(user),
            'createdBy': user['user_id'],
            'createdAt': now,
        }
        await dynamo_learning.put_quiz(quiz)
        logger.info(f"Quiz {quiz['quiz_id']} created by {user['user_id']}")
        return quiz

    async def update_quiz(self, user: Dict[str, Any], quiz_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        quiz = await self.get_quiz(quiz_id)
        ensure_can_manage(user, quiz, "quiz")
        quiz.update(updates)
        if 'questions' in updates:
            quiz['totalPoints'] = total_points(quiz['questions'], settings.DEFAULT_QUESTION_POINTS)
        return await dynamo_learning.put_quiz(quiz)

    async def toggle_quiz(self, user: Dict[str, Any], quiz_id: str) -> Dict[str, Any]:
        quiz = await self.get_quiz(quiz_id)
        ensure_can_manage(user, quiz, "quiz")
        quiz['isActive'] = not quiz.get('isActive', True)
        return await dynamo_learning.put_quiz(quiz)

    async def delete_quiz(self, user: Dict[str, Any], quiz_id: str) -> None:
        quiz = await self.get_quiz(quiz_id)
        ensure_can_manage(user, quiz, "quiz", action="delete")
        await dynamo_learning.delete_quiz(quiz_id)

    # ========== SUBMISSION ==========

    async def submit_quiz(self, user: Dict[str, Any], quiz_id: str, answers: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Score a submission for the caller.

        Only attempts with score > 0 are stored; they also update the
        quizAttempts map with the latest score. Points go through the
        ledger on the first stored attempt only.
        """
        quiz = await self.get_quiz(quiz_id)

        if not await self._can_attempt(user, quiz):
            raise ForbiddenError("Complete the module before attempting this quiz")

        has_prior_attempt = await dynamo_learning.has_attempt(user['user_id'], quiz_id)
        result = score_quiz(
            quiz.get('questions', []),
            answers,
            has_prior_attempt=has_prior_attempt,
            default_points=settings.DEFAULT_QUESTION_POINTS
        )

        attempt_id = None
        points_awarded = 0
        if result['score'] > 0:
            attempt = await dynamo_learning.create_attempt({
                'attempt_id': dynamo.new_id(),
                'user_id': user['user_id'],
                'quiz_id': quiz_id,
                'score': result['score'],
                'totalPoints': result['totalPoints'],
                'answers': result['answers'],
                'percentage': result['percentage'],
                'submittedAt': dynamo.utc_now().isoformat(),
                'isFirstAttempt': result['isFirstAttempt'],
            })
            attempt_id = attempt['attempt_id']

            user.setdefault('quizAttempts', {})[quiz_id] = result['score']
            if result['isFirstAttempt']:
                points_awarded = result['pointsAwarded']
                apply_points(user, points_awarded, 'quiz_completed', f"Completed quiz: {quiz['title']}", quiz_id)
            await dynamo.save_user(user)
        else:
            logger.info(f"Attempt by {user['user_id']} on quiz {quiz_id} not stored: score is 0")

        if result['isFirstAttempt']:
            message = (
                f"Quiz completed! You scored {result['score']}/{result['totalPoints']} points "
                f"and earned {points_awarded} points."
            )
        else:
            message = f"Quiz revisited! Score: {result['score']}/{result['totalPoints']} points."

        return {
            'score': result['score'],
            'totalPoints': result['totalPoints'],
            'percentage': round(result['percentage']),
            'answers': result['answers'],
            'attemptId': attempt_id,
            'pointsAwarded': points_awarded,
            'isFirstAttempt': result['isFirstAttempt'],
            'message': message,
        }

    # ========== DAILY QUESTION ==========

    async def get_daily_question(self) -> Dict[str, Any]:
        """Today's daily quiz, falling back to any active daily quiz stamped with today's date"""
        today = dynamo.utc_now().date().isoformat()
        candidates = await dynamo_learning.list_daily_quizzes()
        if not candidates:
            raise NotFoundError("No daily question available")

        quiz = next((q for q in candidates if q.get('dailyDate') == today), None)
        if quiz is None:
            quiz = candidates[0]
            quiz['dailyDate'] = today
            await dynamo_learning.put_quiz(quiz)

        first = (quiz.get('questions') or [{}])[0]
        return {
            'quizId': quiz['quiz_id'],
            'question': first.get('question', 'No question available'),
            'options': first.get('options', []),
            'points': settings.DAILY_QUESTION_POINTS,
        }

    async def submit_daily_question(self, user: Dict[str, Any], quiz_id: str, answer_index: int) -> Dict[str, Any]:
        quiz = await dynamo_learning.get_quiz(quiz_id)
        if not quiz or not quiz.get('isDailyQuestion') or not quiz.get('questions'):
            raise NotFoundError("Daily question not found")

        now = dynamo.utc_now()
        last = dynamo.parse_time(user.get('lastDailyQuestion'))
        if last is not None and last.date() == now.date():
            raise ValidationError("Daily question already attempted, come back tomorrow")

        correct_answer = quiz['questions'][0].get('correctAnswer')
        is_correct = answer_index == correct_answer
        points = settings.DAILY_QUESTION_POINTS

        apply_points(
            user,
            points,
            'daily_question',
            f"Daily question: {'Correct' if is_correct else 'Incorrect'}",
            quiz_id,
            now=now
        )
        user['lastDailyQuestion'] = now.isoformat()
        user['streak'] = user.get('streak', 0) + 1 if is_correct else 0
        await dynamo.save_user(user)

        return {
            'isCorrect': is_correct,
            'correctAnswer': correct_answer,
            'pointsEarned': points,
            'streak': user['streak'],
        }

    async def mark_daily_question(self, user: Dict[str, Any], quiz_id: str) -> Dict[str, Any]:
        """Make this quiz today's daily question; other daily quizzes are unmarked"""
        if not is_admin(user):
            raise ForbiddenError("Only admins can set the daily question")

        quiz = await self.get_quiz(quiz_id)
        today = dynamo.utc_now().date().isoformat()

        for other in await dynamo_learning.list_daily_quizzes():
            if other['quiz_id'] != quiz_id:
                other['isDailyQuestion'] = False
                await dynamo_learning.put_quiz(other)

        quiz['isDailyQuestion'] = True
        quiz['dailyDate'] = today
        return await dynamo_learning.put_quiz(quiz)


quiz_service = QuizService()
