"""
Gamification logic for EcoLearn Service

Implements:
- Points ledger arithmetic with weekly/monthly rollover
- Badge awarding (unique by name)
- Login streak tracking

Everything here works on an in-memory account document; callers persist.
"""
from typing import Dict, Any, Optional
from datetime import datetime, timedelta
import logging

from ecolearn.dynamo import parse_time, utc_now
from ecolearn.errors import ValidationError

logger = logging.getLogger(__name__)

POINT_TYPES = [
    "module_completed",
    "quiz_completed",
    "daily_question",
    "challenge_completed",
    "reward_redemption",
    "initial_migration",
    "event_registration",
    "survey_completed",
    "other",
]

DEFAULT_BADGE_DESCRIPTION = "Earned for completing challenges"


# ============= POINTS LEDGER =============

def months_between(earlier: datetime, later: datetime) -> int:
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def apply_rollover(user: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Zero the weekly/monthly counters when their window has passed.

    Weekly: at least one full 7-day period since lastWeeklyReset.
    Monthly: the calendar month has advanced since lastMonthlyReset.
    A missing stamp is initialised to now without zeroing.
    """
    now = now or utc_now()

    last_weekly = parse_time(user.get('lastWeeklyReset'))
    if last_weekly is None:
        user['lastWeeklyReset'] = now.isoformat()
    elif (now - last_weekly) // timedelta(days=7) >= 1:
        logger.info(f"Weekly reset for user {user.get('user_id')}: {user.get('weeklyPoints', 0)} -> 0")
        user['weeklyPoints'] = 0
        user['lastWeeklyReset'] = now.isoformat()

    last_monthly = parse_time(user.get('lastMonthlyReset'))
    if last_monthly is None:
        user['lastMonthlyReset'] = now.isoformat()
    elif months_between(last_monthly, now) >= 1:
        logger.info(f"Monthly reset for user {user.get('user_id')}: {user.get('monthlyPoints', 0)} -> 0")
        user['monthlyPoints'] = 0
        user['lastMonthlyReset'] = now.isoformat()

    return user


def apply_points(
    user: Dict[str, Any],
    delta: int,
    point_type: str,
    description: str,
    related_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Apply a points delta to an account document.

    Runs the rollover checks first, then adds delta (which may be negative)
    to points, monthlyPoints and weeklyPoints and appends one history entry.

    Args:
        user: Account document (mutated in place)
        delta: Points to add
        point_type: One of POINT_TYPES
        description: Human readable reason
        related_id: Id of the module/quiz/challenge/event/survey involved
        now: Clock override

    Returns:
        The same account document
    """
    if point_type not in POINT_TYPES:
        raise ValidationError(f"Invalid points type '{point_type}'. Must be one of: {', '.join(POINT_TYPES)}")

    now = now or utc_now()
    apply_rollover(user, now)

    user['points'] = user.get('points', 0) + delta
    user['monthlyPoints'] = user.get('monthlyPoints', 0) + delta
    user['weeklyPoints'] = user.get('weeklyPoints', 0) + delta

    user.setdefault('pointsHistory', []).append({
        'points': delta,
        'type': point_type,
        'description': description,
        'relatedId': related_id,
        'earnedAt': now.isoformat(),
    })

    logger.info(
        f"User {user.get('user_id')} {delta:+d} points ({point_type}). "
        f"Total: {user['points']}, weekly: {user['weeklyPoints']}, monthly: {user['monthlyPoints']}"
    )
    return user


def points_summary(user: Dict[str, Any]) -> Dict[str, int]:
    return {
        'totalPoints': user.get('points', 0),
        'weeklyPoints': user.get('weeklyPoints', 0),
        'monthlyPoints': user.get('monthlyPoints', 0),
    }


# ============= BADGES =============

def add_badge(
    user: Dict[str, Any],
    name: str,
    description: str = DEFAULT_BADGE_DESCRIPTION,
    now: Optional[datetime] = None
) -> bool:
    """Add a badge unless one with the same name exists. Returns True if added."""
    badges = user.setdefault('badges', [])
    if any(badge.get('name') == name for badge in badges):
        logger.debug(f"User {user.get('user_id')} already has badge '{name}'")
        return False

    badges.append({
        'name': name,
        'description': description,
        'earnedAt': (now or utc_now()).isoformat(),
    })
    logger.info(f"Badge '{name}' awarded to user {user.get('user_id')}")
    return True


# ============= STREAKS =============

def update_login_streak(user: Dict[str, Any], now: Optional[datetime] = None) -> bool:
    """
    Update streak on login.

    Same calendar day: unchanged. Previous day: streak + 1. Any other gap
    (or first login): streak = 1.

    Returns:
        True if the account changed and should be saved
    """
    now = now or utc_now()
    last_login = parse_time(user.get('lastLogin'))

    if last_login is not None and last_login.date() == now.date():
        return False

    if last_login is not None and last_login.date() == (now - timedelta(days=1)).date():
        user['streak'] = user.get('streak', 0) + 1
    else:
        user['streak'] = 1

    user['lastLogin'] = now.isoformat()
    return True
