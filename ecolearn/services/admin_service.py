"""
Admin Service

Account management across schools: listing, per-school rosters, school
summaries, edits and deletion.
"""
import logging
from typing import Dict, Any, List

from ecolearn import dynamo
from ecolearn.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ROLE_ORDER = {'teacher': 0, 'student': 1, 'admin': 2}


class AdminService:

    async def list_users(self) -> List[Dict[str, Any]]:
        users = await dynamo.list_users()
        users.sort(key=lambda u: u.get('createdAt', ''), reverse=True)
        return [dynamo.public_user(u) for u in users]

    async def users_by_school(self, school: str) -> List[Dict[str, Any]]:
        """Case-insensitive school match, teachers first, then by name"""
        needle = school.strip().lower()
        users = [u for u in await dynamo.list_users() if needle in (u.get('school') or '').lower()]
        users.sort(key=lambda u: (ROLE_ORDER.get(u.get('role'), 3), (u.get('name') or '').lower()))
        return [dynamo.public_user(u) for u in users]

    async def schools(self) -> List[Dict[str, Any]]:
        summary: Dict[str, Dict[str, Any]] = {}
        for user in await dynamo.list_users():
            school = user.get('school')
            if not school:
                continue
            entry = summary.setdefault(school, {
                'school': school, 'teacherCount': 0, 'studentCount': 0, 'totalPoints': 0, 'userCount': 0,
            })
            entry['userCount'] += 1
            entry['totalPoints'] += user.get('points', 0)
            if user.get('role') == 'teacher':
                entry['teacherCount'] += 1
            elif user.get('role') == 'student':
                entry['studentCount'] += 1
        return [summary[name] for name in sorted(summary)]

    async def update_user(self, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        if not await dynamo.get_user(user_id):
            raise NotFoundError("User not found")

        if updates.get('email'):
            updates['email'] = updates['email'].lower()
            existing = await dynamo.get_user_by_email(updates['email'])
            if existing and existing['user_id'] != user_id:
                raise ValidationError("Email already exists for another user")

        updated = await dynamo.update_user(user_id, updates)
        logger.info(f"Admin updated user {user_id}: {sorted(updates)}")
        return dynamo.public_user(updated)

    async def delete_user(self, admin: Dict[str, Any], user_id: str) -> None:
        if not await dynamo.get_user(user_id):
            raise NotFoundError("User not found")
        if user_id == admin['user_id']:
            raise ValidationError("Cannot delete your own account")
        await dynamo.delete_user(user_id)


admin_service = AdminService()
