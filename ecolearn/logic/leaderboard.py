"""Leaderboard ranking over student accounts"""
from typing import Dict, Any, List, Optional

from ecolearn.errors import ValidationError

TIMEFRAME_FIELDS = {
    'all': 'points',
    'monthly': 'monthlyPoints',
    'weekly': 'weeklyPoints',
}


def _points_field(timeframe: str) -> str:
    if timeframe not in TIMEFRAME_FIELDS:
        raise ValidationError(f"Invalid timeframe '{timeframe}'. Must be one of: {', '.join(TIMEFRAME_FIELDS)}")
    return TIMEFRAME_FIELDS[timeframe]


def rank_users(users: List[Dict[str, Any]], timeframe: str = 'all') -> List[Dict[str, Any]]:
    """Sort by the timeframe's points, then modulesCompleted, then streak (all descending)"""
    field = _points_field(timeframe)
    ordered = sorted(
        users,
        key=lambda u: (u.get(field, 0), u.get('modulesCompleted', 0), u.get('streak', 0)),
        reverse=True
    )
    return [
        {
            'rank': position,
            'userId': user['user_id'],
            'name': user.get('name'),
            'school': user.get('school'),
            'points': user.get(field, 0),
            'modulesCompleted': user.get('modulesCompleted', 0),
            'streak': user.get('streak', 0),
            'badges': len(user.get('badges', [])),
        }
        for position, user in enumerate(ordered, start=1)
    ]


def paginate(entries: List[Dict[str, Any]], page: int, limit: int, key: str = 'leaderboard') -> Dict[str, Any]:
    page = max(1, page)
    limit = max(1, limit)
    start = (page - 1) * limit
    total = len(entries)
    return {
        key: entries[start:start + limit],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'pages': (total + limit - 1) // limit,
        },
    }


def find_rank(entries: List[Dict[str, Any]], user_id: str) -> Optional[Dict[str, Any]]:
    return next((entry for entry in entries if entry['userId'] == user_id), None)
