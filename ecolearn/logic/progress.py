"""
Module progress rules

Lesson completion is idempotent; module completion is a one-way
transition gated on every lesson being completed.
"""
from typing import Dict, Any, Optional
from datetime import datetime
import logging

from ecolearn.dynamo import utc_now
from ecolearn.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)


def new_progress(user_id: str, module_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    now_iso = (now or utc_now()).isoformat()
    return {
        'user_id': user_id,
        'module_id': module_id,
        'completedLessons': [],
        'currentLesson': 0,
        'isCompleted': False,
        'completedAt': None,
        'earnedPoints': 0,
        'lastAccessed': now_iso,
        'createdAt': now_iso,
    }


def mark_lesson_complete(
    progress: Dict[str, Any],
    lesson_index: int,
    lesson_count: int,
    is_completed: bool = True,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Record a visit to a lesson, adding it to completedLessons when completed.

    completedLessons stays deduplicated and ascending. currentLesson and
    lastAccessed always move.
    """
    if lesson_index < 0 or lesson_index >= lesson_count:
        raise ValidationError(f"Lesson index {lesson_index} is out of range (module has {lesson_count} lessons)")

    completed = set(progress.get('completedLessons') or [])
    if is_completed and lesson_index not in completed:
        completed.add(lesson_index)
        logger.info(f"Lesson {lesson_index} completed for module {progress.get('module_id')}")

    progress['completedLessons'] = sorted(completed)
    progress['currentLesson'] = lesson_index
    progress['lastAccessed'] = (now or utc_now()).isoformat()
    return progress


def completion_status(progress: Optional[Dict[str, Any]], module: Dict[str, Any]) -> Dict[str, Any]:
    total = len(module.get('lessons') or [])
    completed = len(progress.get('completedLessons') or []) if progress else 0
    is_completed = bool(progress and progress.get('isCompleted'))
    return {
        'completed': completed,
        'total': total,
        'isCompleted': is_completed,
        'canComplete': completed == total and not is_completed,
    }


def complete_module(progress: Dict[str, Any], module: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Mark the module completed on the progress record.

    Raises:
        ValidationError: completed lesson count differs from the module's lesson count
        ConflictError: module already completed
    """
    status = completion_status(progress, module)

    if status['completed'] != status['total']:
        raise ValidationError(
            f"Cannot complete module. Please complete all {status['total']} lessons first.",
            completed=status['completed'],
            total=status['total']
        )

    if progress.get('isCompleted'):
        raise ConflictError("Module already completed")

    now_iso = (now or utc_now()).isoformat()
    progress['isCompleted'] = True
    progress['completedAt'] = now_iso
    progress['earnedPoints'] = module.get('points', 0)
    progress['lastAccessed'] = now_iso
    return progress
