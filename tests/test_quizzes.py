"""
Tests for quiz scoring, first-attempt points and the daily question
"""
import pytest

from ecolearn import dynamo, dynamo_learning
from ecolearn.errors import ForbiddenError, ValidationError
from ecolearn.logic.quiz_scoring import hide_answers, score_quiz
from ecolearn.services.module_service import module_service
from ecolearn.services.quiz_service import quiz_service


QUESTIONS = [
    {'question': "Which gas traps heat?", 'options': ["CO2", "O2"], 'correctAnswer': 0, 'points': 10},
    {'question': "Best bin for glass?", 'options': ["Green", "Blue"], 'correctAnswer': 1, 'points': 10},
]


class TestScoreQuiz:

    def test_half_correct(self):
        result = score_quiz(QUESTIONS, [{'questionIndex': 0, 'answerIndex': 0}], has_prior_attempt=False)

        assert result['score'] == 10
        assert result['totalPoints'] == 20
        assert result['percentage'] == 50
        assert result['pointsAwarded'] == 10
        assert result['answers'][1] == {'questionIndex': 1, 'answerIndex': -1, 'isCorrect': False, 'points': 0}

    def test_prior_attempt_awards_nothing(self):
        answers = [{'questionIndex': 0, 'answerIndex': 0}, {'questionIndex': 1, 'answerIndex': 1}]
        result = score_quiz(QUESTIONS, answers, has_prior_attempt=True)

        assert result['score'] == 20
        assert result['pointsAwarded'] == 0
        assert result['isFirstAttempt'] is False

    def test_default_points_for_unset_questions(self):
        questions = [{'question': "?", 'options': ["a", "b"], 'correctAnswer': 0}]
        result = score_quiz(questions, [{'questionIndex': 0, 'answerIndex': 0}], False, default_points=7)
        assert result['score'] == 7

    def test_empty_quiz(self):
        result = score_quiz([], [], has_prior_attempt=False)
        assert result['percentage'] == 0

    def test_hide_answers(self):
        visible = hide_answers({'title': "Q", 'questions': QUESTIONS})
        assert all('correctAnswer' not in q for q in visible['questions'])
        assert 'correctAnswer' in QUESTIONS[0]


class TestSubmitQuiz:
    """Quiz submission against moto tables"""

    async def _quiz(self, teacher, **extra):
        return await quiz_service.create_quiz(teacher, {
            'title': "Climate Basics",
            'questions': QUESTIONS,
            'isActive': True,
            **extra,
        })

    async def test_first_attempt_credits_then_revisit_does_not(self, create_account):
        teacher = await create_account(role='teacher')
        student = await create_account()
        quiz = await self._quiz(teacher)
        assert quiz['totalPoints'] == 20

        first = await quiz_service.submit_quiz(student, quiz['quiz_id'], [{'questionIndex': 0, 'answerIndex': 0}])
        assert first['score'] == 10
        assert first['percentage'] == 50
        assert first['pointsAwarded'] == 10
        assert first['isFirstAttempt'] is True

        stored = await dynamo.get_user(student['user_id'])
        assert stored['points'] == 10
        assert stored['quizAttempts'] == {quiz['quiz_id']: 10}

        answers = [{'questionIndex': 0, 'answerIndex': 0}, {'questionIndex': 1, 'answerIndex': 1}]
        second = await quiz_service.submit_quiz(stored, quiz['quiz_id'], answers)
        assert second['pointsAwarded'] == 0
        assert second['isFirstAttempt'] is False

        stored = await dynamo.get_user(student['user_id'])
        assert stored['points'] == 10
        assert stored['quizAttempts'][quiz['quiz_id']] == 20
        assert len(await dynamo_learning.list_attempts(student['user_id'], quiz['quiz_id'])) == 2

    async def test_zero_score_not_stored(self, create_account):
        teacher = await create_account(role='teacher')
        student = await create_account()
        quiz = await self._quiz(teacher)

        result = await quiz_service.submit_quiz(student, quiz['quiz_id'], [{'questionIndex': 0, 'answerIndex': 1}])

        assert result['score'] == 0
        assert result['attemptId'] is None
        assert not await dynamo_learning.has_attempt(student['user_id'], quiz['quiz_id'])

        # the next scoring attempt is still the first one
        again = await quiz_service.submit_quiz(student, quiz['quiz_id'], [{'questionIndex': 0, 'answerIndex': 0}])
        assert again['isFirstAttempt'] is True
        assert again['pointsAwarded'] == 10

    async def test_module_gate(self, create_account):
        teacher = await create_account(role='teacher')
        student = await create_account()
        module = await module_service.create_module(teacher, {
            'title': "Energy", 'description': "...", 'category': "Renewable Energy",
            'lessons': [{'title': "One", 'content': "...", 'duration': 5, 'order': 1}], 'points': 5,
        })
        quiz = await self._quiz(teacher, module=module['module_id'], requiresModuleCompletion=True)

        with pytest.raises(ForbiddenError):
            await quiz_service.submit_quiz(student, quiz['quiz_id'], [{'questionIndex': 0, 'answerIndex': 0}])

        await module_service.update_lesson_progress(student, module['module_id'], 0)
        await module_service.complete_module(student, module['module_id'])
        result = await quiz_service.submit_quiz(student, quiz['quiz_id'], [{'questionIndex': 0, 'answerIndex': 0}])
        assert result['pointsAwarded'] == 10


class TestDailyQuestion:

    async def test_once_per_day(self, create_account):
        admin = await create_account(role='admin', school='ADMIN')
        student = await create_account()
        quiz = await quiz_service.create_quiz(admin, {'title': "Daily", 'questions': QUESTIONS[:1], 'isActive': True})
        await quiz_service.mark_daily_question(admin, quiz['quiz_id'])

        daily = await quiz_service.get_daily_question()
        assert daily['quizId'] == quiz['quiz_id']
        assert 'correctAnswer' not in daily

        result = await quiz_service.submit_daily_question(student, quiz['quiz_id'], 0)
        assert result['isCorrect'] is True
        assert result['streak'] == 1
        assert student['points'] == result['pointsEarned']

        with pytest.raises(ValidationError):
            await quiz_service.submit_daily_question(student, quiz['quiz_id'], 0)

    async def test_only_admin_marks_daily(self, create_account):
        teacher = await create_account(role='teacher')
        quiz = await quiz_service.create_quiz(teacher, {'title': "Daily", 'questions': QUESTIONS[:1], 'isActive': True})

        with pytest.raises(ForbiddenError):
            await quiz_service.mark_daily_question(teacher, quiz['quiz_id'])
