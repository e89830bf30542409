"""Points ledger: the single entry point for crediting or debiting an account"""
from typing import Dict, Any, Optional
import logging

from ecolearn import dynamo
from ecolearn.errors import NotFoundError
from ecolearn.logic.gamification import apply_points, points_summary

logger = logging.getLogger(__name__)


async def update_user_points(
    user_id: str,
    delta: int,
    point_type: str,
    description: str,
    related_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Load the account, apply rollover and delta, append history and save.

    Returns:
        {totalPoints, weeklyPoints, monthlyPoints} after the update

    Raises:
        NotFoundError: account does not exist
    """
    user = await dynamo.get_user(user_id)
    if not user:
        raise NotFoundError("User not found")

    apply_points(user, delta, point_type, description, related_id)
    await dynamo.save_user(user)
    return points_summary(user)
