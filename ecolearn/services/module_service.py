"""
Module Service

Module catalog management and per-user lesson progress, including the
module completion transition that credits points and awards the
category badge.
"""
import logging
from typing import Dict, Any, List, Optional

from ecolearn import dynamo, dynamo_learning
from ecolearn.errors import NotFoundError
from ecolearn.logic import progress as progress_rules
from ecolearn.logic.gamification import add_badge, apply_points
from ecolearn.services.access import content_school, ensure_can_manage, visible_to

logger = logging.getLogger(__name__)


class ModuleService:
    """
    Service for learning modules.

    Responsibilities:
    - Module CRUD with creator/admin ownership
    - School-scoped listing
    - Lesson progress tracking
    - Module completion rewards
    """

    # ========== CATALOG ==========

    async def get_module(self, module_id: str) -> Dict[str, Any]:
        module = await dynamo_learning.get_module(module_id)
        if not module:
            raise NotFoundError("Module not found")
        return module

    async def list_modules(self, user: Optional[Dict[str, Any]], include_inactive: bool = False) -> List[Dict[str, Any]]:
        modules = await dynamo_learning.list_modules(active_only=not include_inactive)
        visible = [m for m in modules if visible_to(m, user)]
        return sorted(visible, key=lambda m: m.get('createdAt', ''), reverse=True)

    async def list_teacher_modules(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        modules = await dynamo_learning.list_modules()
        if user.get('role') != 'admin':
            modules = [m for m in modules if m.get('createdBy') == user['user_id']]
        return sorted(modules, key=lambda m: m.get('createdAt', ''), reverse=True)

    async def create_module(self, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        now = dynamo.utc_now().isoformat()
        lessons = data.get('lessons', [])
        module = {
            **data,
            'module_id': dynamo.new_id(),
            'estimatedTime': sum(lesson['duration'] for lesson in lessons),
            'school': content_school(user),
            'createdBy': user['user_id'],
            'createdAt': now,
        }
        await dynamo_learning.put_module(module)
        logger.info(f"Module {module['module_id']} created by {user['user_id']} ({module['school']})")
        return module

    async def update_module(self, user: Dict[str, Any], module_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        module = await self.get_module(module_id)
        ensure_can_manage(user, module, "module")

        module.update(updates)
        if 'lessons' in updates:
            module['estimatedTime'] = sum(lesson['duration'] for lesson in module['lessons'])

        return await dynamo_learning.put_module(module)

    async def delete_module(self, user: Dict[str, Any], module_id: str) -> None:
        module = await self.get_module(module_id)
        ensure_can_manage(user, module, "module", action="delete")
        await dynamo_learning.delete_module(module_id)

    async def toggle_module(self, user: Dict[str, Any], module_id: str) -> Dict[str, Any]:
        module = await self.get_module(module_id)
        ensure_can_manage(user, module, "module")
        module['isActive'] = not module.get('isActive', True)
        logger.info(f"Module {module_id} isActive -> {module['isActive']}")
        return await dynamo_learning.put_module(module)

    # ========== PROGRESS ==========

    async def get_progress(self, user: Dict[str, Any], module_id: str) -> Dict[str, Any]:
        """Progress record for the caller, created empty on first access"""
        await self.get_module(module_id)
        progress = await dynamo_learning.get_progress(user['user_id'], module_id)
        if not progress:
            logger.info(f"No progress found for user {user['user_id']}, module {module_id}; creating")
            progress = await dynamo_learning.put_progress(progress_rules.new_progress(user['user_id'], module_id))
        return progress

    async def update_lesson_progress(
        self,
        user: Dict[str, Any],
        module_id: str,
        lesson_index: int,
        is_completed: bool = True
    ) -> Dict[str, Any]:
        module = await self.get_module(module_id)
        progress = await dynamo_learning.get_progress(user['user_id'], module_id)
        if not progress:
            progress = progress_rules.new_progress(user['user_id'], module_id)

        progress_rules.mark_lesson_complete(
            progress,
            lesson_index,
            lesson_count=len(module.get('lessons', [])),
            is_completed=is_completed
        )
        return await dynamo_learning.put_progress(progress)

    async def completion_status(self, user: Dict[str, Any], module_id: str) -> Dict[str, Any]:
        module = await self.get_module(module_id)
        progress = await dynamo_learning.get_progress(user['user_id'], module_id)
        return progress_rules.completion_status(progress, module)

    async def complete_module(self, user: Dict[str, Any], module_id: str) -> Dict[str, Any]:
        """
        Complete a module for the caller.

        Credits module.points through the ledger, increments
        modulesCompleted and awards "<category> Expert".

        Returns:
            {progress, pointsEarned, quizzes}
        """
        module = await self.get_module(module_id)
        progress = await dynamo_learning.get_progress(user['user_id'], module_id)
        if not progress:
            raise NotFoundError("Progress not found")

        progress_rules.complete_module(progress, module)
        await dynamo_learning.put_progress(progress)

        points = module.get('points', 0)
        apply_points(user, points, 'module_completed', f"Completed {module['title']}", module_id)
        user['modulesCompleted'] = user.get('modulesCompleted', 0) + 1
        add_badge(user, f"{module['category']} Expert", f"Awarded for completing {module['title']}")
        await dynamo.save_user(user)

        quizzes = await dynamo_learning.list_quizzes(active_only=True, module_id=module_id)
        logger.info(f"User {user['user_id']} completed module {module_id} (+{points} points)")

        return {
            'progress': progress,
            'pointsEarned': points,
            'quizzes': [
                {'quizId': q['quiz_id'], 'title': q.get('title'), 'description': q.get('description')}
                for q in quizzes
            ],
        }

    async def completed_modules(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        records = await dynamo_learning.list_user_progress(user['user_id'])
        return [r for r in records if r.get('isCompleted')]

    async def has_completed(self, user_id: str, module_id: str) -> bool:
        progress = await dynamo_learning.get_progress(user_id, module_id)
        return bool(progress and progress.get('isCompleted'))


module_service = ModuleService()
