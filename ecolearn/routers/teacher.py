"""
Teacher dashboard endpoints scoped to the caller's school
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import require_teacher
from ecolearn.services.school_service import school_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teacher", tags=["Teacher"])


@router.get("/students")
async def school_students(user: Dict[str, Any] = Depends(require_teacher())):
    try:
        students = await school_service.students(user)
        return {"success": True, "data": students, "count": len(students)}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing students for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats")
async def school_stats(user: Dict[str, Any] = Depends(require_teacher())):
    try:
        stats = await school_service.teacher_stats(user)
        return {"success": True, "data": stats}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error computing school stats for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/leaderboard")
async def school_leaderboard(user: Dict[str, Any] = Depends(require_teacher())):
    try:
        entries = await school_service.school_leaderboard(user)
        return {"success": True, "data": entries}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error building school leaderboard for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
