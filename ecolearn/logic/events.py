"""
Event registration rules
"""
from typing import Dict, Any, Optional, List
from datetime import datetime
import logging

from ecolearn.dynamo import new_id, parse_time, utc_now
from ecolearn.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def registration_deadline_passed(event: Dict[str, Any], now: Optional[datetime] = None) -> bool:
    deadline = parse_time(event.get('lastDateToRegister'))
    return deadline is not None and (now or utc_now()) > deadline


def is_full(event: Dict[str, Any]) -> bool:
    max_participants = event.get('maxParticipants', 0)
    return max_participants > 0 and event.get('currentParticipants', 0) >= max_participants


def registration_open(event: Dict[str, Any], now: Optional[datetime] = None) -> bool:
    now = now or utc_now()
    date = parse_time(event.get('date'))
    return (
        bool(event.get('isActive'))
        and date is not None and date > now
        and not registration_deadline_passed(event, now)
        and not is_full(event)
    )


def registration_status(event: Dict[str, Any], now: Optional[datetime] = None) -> str:
    if not event.get('isActive'):
        return 'inactive'
    if registration_deadline_passed(event, now):
        return 'closed'
    if is_full(event):
        return 'full'
    if registration_open(event, now):
        return 'open'
    return 'closed'


def validate_schedule(event: Dict[str, Any]) -> None:
    date = parse_time(event.get('date'))
    deadline = parse_time(event.get('lastDateToRegister'))
    if date and deadline and deadline > date:
        raise ValidationError("Last date to register must be on or before the event date")


def find_registration(event: Dict[str, Any], user_id: str) -> Optional[Dict[str, Any]]:
    return next((r for r in event.get('registrations', []) if r.get('userId') == user_id), None)


def add_registration(
    event: Dict[str, Any],
    user: Dict[str, Any],
    registration_data: Optional[Dict[str, Any]] = None,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Register a user, recording the points the registration is worth"""
    now = now or utc_now()
    if registration_deadline_passed(event, now):
        raise ValidationError("Registration period has ended for this event")
    if not registration_open(event, now):
        raise ValidationError("Registration is closed for this event")
    if find_registration(event, user['user_id']):
        raise ConflictError("User already registered for this event")

    registration = {
        'registrationId': new_id(),
        'userId': user['user_id'],
        'userName': user.get('name'),
        'userEmail': user.get('email'),
        'registrationDate': now.isoformat(),
        'registrationData': registration_data or {},
        'attended': False,
        'attendanceDate': None,
        'pointsAwarded': event.get('pointsReward', 0) or 0,
    }
    event.setdefault('registrations', []).append(registration)
    event['currentParticipants'] = event.get('currentParticipants', 0) + 1

    logger.info(f"User {user['user_id']} registered for event {event.get('event_id')}")
    return registration


def remove_registration(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Remove a user's registration and return it"""
    registration = find_registration(event, user_id)
    if registration is None:
        raise NotFoundError("User not registered for this event")

    event['registrations'] = [r for r in event['registrations'] if r is not registration]
    event['currentParticipants'] = max(0, event.get('currentParticipants', 0) - 1)

    logger.info(f"User {user_id} unregistered from event {event.get('event_id')}")
    return registration


def confirm_attendance(event: Dict[str, Any], registration_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    registration = next(
        (r for r in event.get('registrations', []) if r.get('registrationId') == registration_id),
        None
    )
    if registration is None:
        raise NotFoundError("Registration not found")

    registration['attended'] = True
    registration['attendanceDate'] = (now or utc_now()).isoformat()
    return registration


def bulk_mark_attendance(
    event: Dict[str, Any],
    attendance: List[Dict[str, Any]],
    now: Optional[datetime] = None
) -> int:
    """Apply [{userId, attended}] entries; unknown users are skipped. Returns the number updated."""
    now_iso = (now or utc_now()).isoformat()
    updated = 0
    for entry in attendance:
        registration = find_registration(event, entry.get('userId'))
        if registration is None:
            logger.warning(f"Registration not found for user {entry.get('userId')} in event {event.get('event_id')}")
            continue
        registration['attended'] = bool(entry.get('attended'))
        registration['attendanceDate'] = now_iso if registration['attended'] else None
        updated += 1
    return updated
