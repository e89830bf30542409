"""
Survey endpoints
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, require_admin
from ecolearn.schemas_community import SurveyCreate, SurveySubmission, SurveyUpdate
from ecolearn.services.community_service import survey_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/surveys", tags=["Surveys"])


@router.get("")
async def list_surveys(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        surveys = await survey_service.list_active(user)
        return {"success": True, "data": surveys}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing surveys: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/admin/all")
async def all_surveys(user: Dict[str, Any] = Depends(require_admin())):
    try:
        surveys = await survey_service.list_all()
        return {"success": True, "data": surveys}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing all surveys: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/admin", status_code=status.HTTP_201_CREATED)
async def create_survey(request: SurveyCreate, user: Dict[str, Any] = Depends(require_admin())):
    try:
        survey = await survey_service.create(user, request.model_dump())
        return {"success": True, "data": survey}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error creating survey: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/admin/{survey_id}")
async def update_survey(
    survey_id: str,
    request: SurveyUpdate,
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        survey = await survey_service.update(survey_id, request.model_dump(exclude_unset=True))
        return {"success": True, "data": survey}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating survey {survey_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/admin/{survey_id}")
async def delete_survey(survey_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        await survey_service.delete(survey_id)
        return {"success": True, "message": "Survey deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting survey {survey_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/admin/{survey_id}/submissions")
async def survey_submissions(survey_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        submissions = await survey_service.submissions(survey_id)
        return {"success": True, "data": submissions}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing submissions for survey {survey_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{survey_id}")
async def get_survey(survey_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        survey = await survey_service.get_survey(survey_id)
        return {"success": True, "data": survey_service.view(survey, user)}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting survey {survey_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{survey_id}/submit")
async def submit_survey(
    survey_id: str,
    request: SurveySubmission,
    user: Dict[str, Any] = Depends(get_current_user)
):
    try:
        result = await survey_service.submit(user, survey_id, request.answers)
        message = "Survey already completed, response recorded" if result['alreadyCompleted'] else "Survey submitted successfully"
        return {"success": True, "message": message, "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error submitting survey {survey_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
