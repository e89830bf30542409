"""
Student views of their school's modules, quizzes and challenges
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user
from ecolearn.services.school_service import school_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/student", tags=["Student"])


@router.get("/modules")
async def student_modules(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        modules = await school_service.student_modules(user)
        return {"success": True, "data": modules}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing modules for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/quizzes")
async def student_quizzes(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        quizzes = await school_service.student_quizzes(user)
        return {"success": True, "data": quizzes}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing quizzes for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/challenges")
async def student_challenges(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        challenges = await school_service.student_challenges(user)
        return {"success": True, "data": challenges}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing challenges for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/challenges/progress")
async def challenge_progress(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        progress = await school_service.challenge_progress(user)
        return {"success": True, "data": progress}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error computing challenge progress for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
