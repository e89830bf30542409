"""
Leaderboard endpoints
"""
import logging
from typing import Dict, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user
from ecolearn.services.leaderboard_service import leaderboard_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("/users")
async def user_leaderboard(
    timeframe: str = Query("all", description="all, monthly or weekly"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100)
):
    """Students ranked by points for the timeframe"""
    try:
        result = await leaderboard_service.leaderboard(timeframe, page, limit)
        return {"success": True, "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error building leaderboard: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/user-rank")
async def user_rank(
    timeframe: str = Query("all"),
    user: Dict[str, Any] = Depends(get_current_user)
):
    try:
        result = await leaderboard_service.my_rank(user, timeframe)
        return {"success": True, "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting rank for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
