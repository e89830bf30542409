"""
Learning module endpoints: catalog, lesson progress and completion
"""
import logging
from typing import Dict, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, get_optional_user, require_teacher
from ecolearn.schemas_learning import LessonProgressRequest, ModuleCreate, ModuleUpdate
from ecolearn.services.module_service import module_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/modules", tags=["Modules"])


@router.get("")
async def list_modules(user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    """Active modules visible to the caller's school"""
    try:
        modules = await module_service.list_modules(user)
        return {"success": True, "count": len(modules), "data": modules}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing modules: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/completed")
async def completed_modules(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        records = await module_service.completed_modules(user)
        return {"success": True, "data": records}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing completed modules for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/teacher/list")
async def teacher_modules(user: Dict[str, Any] = Depends(require_teacher())):
    try:
        modules = await module_service.list_teacher_modules(user)
        return {"success": True, "data": modules}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing modules for teacher {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_module(request: ModuleCreate, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        module = await module_service.create_module(user, request.model_dump())
        return {"success": True, "data": module}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error creating module: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{module_id}")
async def get_module(module_id: str):
    try:
        module = await module_service.get_module(module_id)
        return {"success": True, "data": module}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting module {module_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{module_id}")
async def update_module(
    module_id: str,
    request: ModuleUpdate,
    user: Dict[str, Any] = Depends(require_teacher())
):
    try:
        module = await module_service.update_module(user, module_id, request.model_dump(exclude_unset=True))
        return {"success": True, "data": module}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating module {module_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{module_id}")
async def delete_module(module_id: str, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        await module_service.delete_module(user, module_id)
        return {"success": True, "message": "Module deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting module {module_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{module_id}/toggle")
async def toggle_module(module_id: str, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        module = await module_service.toggle_module(user, module_id)
        return {"success": True, "data": module}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error toggling module {module_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{module_id}/progress")
async def get_progress(module_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        progress = await module_service.get_progress(user, module_id)
        return {"success": True, "data": progress}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting progress for module {module_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{module_id}/progress")
async def update_lesson_progress(
    module_id: str,
    request: LessonProgressRequest,
    user: Dict[str, Any] = Depends(get_current_user)
):
    try:
        progress = await module_service.update_lesson_progress(
            user, module_id, request.lessonIndex, request.isCompleted
        )
        return {"success": True, "data": progress}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating lesson progress for module {module_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{module_id}/completion-status")
async def completion_status(module_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        result = await module_service.completion_status(user, module_id)
        return {"success": True, "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error checking completion for module {module_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{module_id}/complete")
async def complete_module(module_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    """Complete the module once all lessons are done; credits points and the category badge"""
    try:
        result = await module_service.complete_module(user, module_id)
        return {"success": True, "message": "Module completed successfully", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error completing module {module_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
