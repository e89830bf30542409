"""Ownership and school visibility checks shared by the content services"""
from typing import Dict, Any, Optional

from ecolearn.errors import ForbiddenError

GLOBAL_SCHOOL = "ADMIN"


def is_admin(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user) and user.get('role') == 'admin'


def content_school(user: Dict[str, Any]) -> str:
    """School stamped on content created by this user; admin content is global"""
    return GLOBAL_SCHOOL if is_admin(user) else (user.get('school') or GLOBAL_SCHOOL)


def visible_to(item: Dict[str, Any], user: Optional[Dict[str, Any]]) -> bool:
    if is_admin(user):
        return True
    school = item.get('school') or GLOBAL_SCHOOL
    return school == GLOBAL_SCHOOL or (user is not None and school == user.get('school'))


def ensure_can_manage(user: Dict[str, Any], item: Dict[str, Any], noun: str, action: str = "update") -> None:
    """Only the creator or an admin may change an item"""
    if is_admin(user) or item.get('createdBy') == user.get('user_id'):
        return
    raise ForbiddenError(f"Not authorized to {action} this {noun}")
