"""Platform reviews: one per account, visible after admin approval"""
from typing import Dict, Any, Optional
from datetime import datetime

from ecolearn.dynamo import new_id, utc_now
from ecolearn.errors import ValidationError

REVIEW_STATUSES = ["pending", "approved", "rejected"]


def new_review(user: Dict[str, Any], rating: int, comment: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        'review_id': new_id(),
        'user_id': user['user_id'],
        'userName': user.get('name'),
        'userRole': user.get('role'),
        'rating': rating,
        'comment': comment,
        'status': 'pending',
        'createdAt': (now or utc_now()).isoformat(),
    }


def ensure_can_submit(existing: Optional[Dict[str, Any]]) -> None:
    """A rejected review may be replaced; a pending or approved one may not"""
    if existing and existing.get('status') in ('pending', 'approved'):
        raise ValidationError("You have already submitted a review")


def revise(review: Dict[str, Any], rating: int, comment: str) -> Dict[str, Any]:
    """Edits go back into moderation"""
    review['rating'] = rating
    review['comment'] = comment
    review['status'] = 'pending'
    return review


def set_status(review: Dict[str, Any], status: str) -> Dict[str, Any]:
    if status not in REVIEW_STATUSES:
        raise ValidationError(f"Invalid status '{status}'. Must be one of: {', '.join(REVIEW_STATUSES)}")
    review['status'] = status
    return review
