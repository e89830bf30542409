"""
School Service

Teacher dashboards over the students of their own school, and the
student-facing catalog of modules, quizzes and challenges their school
can see.
"""
import logging
from datetime import timedelta
from typing import Dict, Any, List

from ecolearn import dynamo, dynamo_challenges, dynamo_learning
from ecolearn.config import get_settings
from ecolearn.logic import challenges as challenge_rules
from ecolearn.services.access import visible_to
from ecolearn.services.module_service import module_service
from ecolearn.services.quiz_service import quiz_service

logger = logging.getLogger(__name__)
settings = get_settings()

STUDENT_FIELDS = [
    'user_id', 'name', 'email', 'school', 'points', 'modulesCompleted',
    'streak', 'quizAttempts', 'lastLogin', 'createdAt',
]


class SchoolService:

    # ========== TEACHER VIEWS ==========

    async def _students(self, school: str) -> List[Dict[str, Any]]:
        return [u for u in await dynamo.list_users(role='student') if u.get('school') == school]

    async def _school_module_ids(self, school: str) -> set:
        modules = await dynamo_learning.list_modules(active_only=True)
        return {m['module_id'] for m in modules if m.get('school') == school}

    async def students(self, teacher: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Students of the teacher's school with how many of its modules each has completed"""
        school = teacher.get('school')
        module_ids = await self._school_module_ids(school)

        results = []
        for student in await self._students(school):
            records = await dynamo_learning.list_user_progress(student['user_id'])
            completed = sum(1 for r in records if r.get('isCompleted') and r.get('module_id') in module_ids)
            row = dynamo.snake_to_camel({k: student.get(k) for k in STUDENT_FIELDS})
            row['schoolModulesCompleted'] = completed
            row['totalSchoolModules'] = len(module_ids)
            results.append(row)

        logger.info(f"Listed {len(results)} students for school {school}")
        return sorted(results, key=lambda s: (s.get('name') or '').lower())

    async def teacher_stats(self, teacher: Dict[str, Any]) -> Dict[str, Any]:
        school = teacher.get('school')
        students = await self._students(school)
        cutoff = dynamo.utc_now() - timedelta(days=settings.ACTIVE_STUDENT_DAYS)

        active = sum(1 for s in students if (dynamo.parse_time(s.get('lastLogin')) or cutoff) > cutoff)
        total_points = sum(s.get('points', 0) for s in students)
        return {
            'totalStudents': len(students),
            'activeStudents': active,
            'totalPoints': total_points,
            'avgPoints': round(total_points / len(students)) if students else 0,
            'totalModules': len(await self._school_module_ids(school)),
        }

    async def school_leaderboard(self, teacher: Dict[str, Any]) -> List[Dict[str, Any]]:
        students = await self._students(teacher.get('school'))
        students.sort(key=lambda s: (s.get('points', 0), s.get('modulesCompleted', 0)), reverse=True)
        return [
            {
                'userId': s['user_id'],
                'name': s.get('name'),
                'points': s.get('points', 0),
                'modulesCompleted': s.get('modulesCompleted', 0),
                'streak': s.get('streak', 0),
            }
            for s in students[:settings.SCHOOL_LEADERBOARD_SIZE]
        ]

    # ========== STUDENT VIEWS ==========

    async def student_modules(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Active modules for the caller's school, lesson bodies left out"""
        modules = await module_service.list_modules(user)
        return [
            {**m, 'lessons': [{k: v for k, v in lesson.items() if k != 'content'} for lesson in m.get('lessons', [])]}
            for m in modules
        ]

    async def student_quizzes(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        attempts = user.get('quizAttempts', {})
        results = []
        for quiz in await quiz_service.list_quizzes(user):
            module_id = quiz.get('module')
            quiz['hasAttempted'] = quiz['quiz_id'] in attempts
            quiz['isModuleCompleted'] = (
                await module_service.has_completed(user['user_id'], module_id) if module_id else True
            )
            results.append(quiz)
        return results

    async def student_challenges(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        challenges = await dynamo_challenges.list_challenges(active_only=True)
        visible = [c for c in challenges if visible_to(c, user)]
        return sorted(visible, key=lambda c: c.get('createdAt', ''), reverse=True)

    async def challenge_progress(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Each visible challenge with the caller's progress towards its target"""
        results = []
        for challenge in await self.student_challenges(user):
            participant = challenge_rules.find_participant(challenge, user['user_id'])
            criteria = challenge.get('completionCriteria', {})
            target = criteria.get('target') or 1
            current = (participant or {}).get('approvedSubmissions', 0)
            progress = min(100, current / target * 100) if criteria.get('requiresSubmission') else (participant or {}).get('progress', 0)
            completed = bool(participant and participant.get('completed'))
            results.append({
                **challenge,
                'progress': progress,
                'currentValue': current,
                'target': target,
                'isCompleted': completed,
                'canComplete': not completed and progress >= 100,
                'participantInfo': participant,
                'requiresTeacherValidation': bool(criteria.get('requiresSubmission')),
            })
        return results


school_service = SchoolService()
