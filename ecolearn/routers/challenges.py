"""
Challenge endpoints: catalog, participation and progress
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, require_admin, require_teacher
from ecolearn.schemas_challenges import ChallengeCreate, ChallengeUpdate, ProgressUpdate
from ecolearn.services.challenge_service import challenge_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/challenges", tags=["Challenges"])


@router.get("")
async def list_challenges():
    try:
        challenges = await challenge_service.list_active()
        return {"success": True, "count": len(challenges), "data": challenges}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing challenges: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/my-challenges")
async def my_challenges(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        challenges = await challenge_service.list_mine(user)
        return {"success": True, "data": challenges}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing challenges for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats")
async def my_challenge_stats(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        stats = await challenge_service.stats(user)
        return {"success": True, "data": stats}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error computing challenge stats for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/admin/all")
async def all_challenges(user: Dict[str, Any] = Depends(require_admin())):
    try:
        challenges = await challenge_service.list_all()
        return {"success": True, "data": challenges}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing all challenges: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_challenge(request: ChallengeCreate, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        challenge = await challenge_service.create(user, request.model_dump())
        return {"success": True, "data": challenge}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error creating challenge: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{challenge_id}")
async def get_challenge(challenge_id: str):
    try:
        challenge = await challenge_service.get_challenge(challenge_id)
        return {"success": True, "data": challenge}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting challenge {challenge_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{challenge_id}")
async def update_challenge(
    challenge_id: str,
    request: ChallengeUpdate,
    user: Dict[str, Any] = Depends(require_teacher())
):
    try:
        challenge = await challenge_service.update(user, challenge_id, request.model_dump(exclude_unset=True))
        return {"success": True, "data": challenge}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating challenge {challenge_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{challenge_id}")
async def delete_challenge(challenge_id: str, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        await challenge_service.delete(user, challenge_id)
        return {"success": True, "message": "Challenge deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting challenge {challenge_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{challenge_id}/join")
async def join_challenge(challenge_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        participant = await challenge_service.join(user, challenge_id)
        return {"success": True, "message": "Joined challenge", "data": participant}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error joining challenge {challenge_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{challenge_id}/progress")
async def update_progress(
    challenge_id: str,
    request: ProgressUpdate,
    user: Dict[str, Any] = Depends(get_current_user)
):
    try:
        participant = await challenge_service.update_progress(user, challenge_id, request.progress)
        return {"success": True, "data": participant}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating progress on challenge {challenge_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{challenge_id}/complete")
async def complete_challenge(challenge_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        result = await challenge_service.complete(user, challenge_id)
        return {"success": True, "message": "Challenge completed", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error completing challenge {challenge_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
