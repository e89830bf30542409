"""Leaderboard over student accounts"""
import logging
from typing import Dict, Any, Optional

from ecolearn import dynamo
from ecolearn.config import get_settings
from ecolearn.errors import NotFoundError
from ecolearn.logic.leaderboard import find_rank, paginate, rank_users

logger = logging.getLogger(__name__)
settings = get_settings()


class LeaderboardService:

    async def leaderboard(self, timeframe: str = 'all', page: int = 1, limit: Optional[int] = None) -> Dict[str, Any]:
        students = await dynamo.list_users(role='student')
        entries = rank_users(students, timeframe)
        return paginate(entries, page, limit or settings.LEADERBOARD_PAGE_SIZE)

    async def my_rank(self, user: Dict[str, Any], timeframe: str = 'all') -> Dict[str, Any]:
        students = await dynamo.list_users(role='student')
        entry = find_rank(rank_users(students, timeframe), user['user_id'])
        if entry is None:
            raise NotFoundError("User is not ranked on the leaderboard")
        return {**entry, 'totalStudents': len(students)}


leaderboard_service = LeaderboardService()
