"""
Quiz endpoints: catalog, submission and the daily question
"""
import logging
from typing import Dict, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, get_optional_user, require_admin, require_teacher
from ecolearn.schemas_learning import DailyQuestionSubmission, QuizCreate, QuizSubmission, QuizUpdate
from ecolearn.services.quiz_service import quiz_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quizzes", tags=["Quizzes"])


@router.get("/daily")
async def daily_question():
    try:
        result = await quiz_service.get_daily_question()
        return {"success": True, "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting daily question: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/daily/submit")
async def submit_daily_question(
    request: DailyQuestionSubmission,
    user: Dict[str, Any] = Depends(get_current_user)
):
    try:
        result = await quiz_service.submit_daily_question(user, request.quizId, request.answerIndex)
        return {"success": True, "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error submitting daily question: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("")
async def list_quizzes(
    module: Optional[str] = Query(None, description="Only quizzes of this module"),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user)
):
    try:
        quizzes = await quiz_service.list_quizzes(user, module_id=module)
        return {"success": True, "count": len(quizzes), "data": quizzes}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing quizzes: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_quiz(request: QuizCreate, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        quiz = await quiz_service.create_quiz(user, request.model_dump())
        return {"success": True, "data": quiz}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error creating quiz: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{quiz_id}")
async def get_quiz(quiz_id: str, user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    try:
        quiz = await quiz_service.get_quiz(quiz_id)
        return {"success": True, "data": quiz_service.view_for(quiz, user)}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting quiz {quiz_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{quiz_id}")
async def update_quiz(
    quiz_id: str,
    request: QuizUpdate,
    user: Dict[str, Any] = Depends(require_teacher())
):
    try:
        quiz = await quiz_service.update_quiz(user, quiz_id, request.model_dump(exclude_unset=True))
        return {"success": True, "data": quiz}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating quiz {quiz_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{quiz_id}")
async def delete_quiz(quiz_id: str, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        await quiz_service.delete_quiz(user, quiz_id)
        return {"success": True, "message": "Quiz deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting quiz {quiz_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{quiz_id}/toggle")
async def toggle_quiz(quiz_id: str, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        quiz = await quiz_service.toggle_quiz(user, quiz_id)
        return {"success": True, "data": quiz}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error toggling quiz {quiz_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{quiz_id}/submit")
async def submit_quiz(
    quiz_id: str,
    request: QuizSubmission,
    user: Dict[str, Any] = Depends(get_current_user)
):
    """Score the answers; points are only credited on the first stored attempt"""
    try:
        answers = [answer.model_dump() for answer in request.answers]
        result = await quiz_service.submit_quiz(user, quiz_id, answers)
        return {"success": True, "message": result.pop('message'), "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error submitting quiz {quiz_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{quiz_id}/daily")
async def mark_daily_question(quiz_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        quiz = await quiz_service.mark_daily_question(user, quiz_id)
        return {"success": True, "data": quiz}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error marking daily question {quiz_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
