"""
Challenge submission and review endpoints
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, require_teacher
from ecolearn.schemas_challenges import SubmissionCreate, SubmissionReview
from ecolearn.services.challenge_service import challenge_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/submissions", tags=["Submissions"])


@router.post("/challenge/{challenge_id}/submit", status_code=status.HTTP_201_CREATED)
async def submit_work(
    challenge_id: str,
    request: SubmissionCreate,
    user: Dict[str, Any] = Depends(get_current_user)
):
    """Submit work for a joined challenge; it waits for review as pending"""
    try:
        result = await challenge_service.submit_work(user, challenge_id, request.submission, request.description)
        return {"success": True, "message": "Submission received", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error submitting work for challenge {challenge_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/my-submissions")
async def my_submissions(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        submissions = await challenge_service.my_submissions(user)
        return {"success": True, "data": submissions}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing submissions for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/challenge/{challenge_id}/submissions")
async def challenge_submissions(challenge_id: str, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        submissions = await challenge_service.challenge_submissions(user, challenge_id)
        return {"success": True, "data": submissions}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing submissions for challenge {challenge_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/challenge/{challenge_id}/participant/{participant_id}/submission/{submission_id}/review")
async def review_submission(
    challenge_id: str,
    participant_id: str,
    submission_id: str,
    request: SubmissionReview,
    user: Dict[str, Any] = Depends(get_current_user)
):
    """Approve or reject a pending submission, crediting bonus and completion points"""
    try:
        result = await challenge_service.review_submission(
            user,
            challenge_id,
            participant_id,
            submission_id,
            request.status,
            feedback=request.feedback,
            points_awarded=request.pointsAwarded
        )
        return {"success": True, "message": f"Submission {request.status}", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error reviewing submission {submission_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
