"""
Admin endpoints: account management across schools
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import require_admin
from ecolearn.schemas import AdminUserUpdate
from ecolearn.services.admin_service import admin_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users")
async def list_users(user: Dict[str, Any] = Depends(require_admin())):
    try:
        users = await admin_service.list_users()
        return {"success": True, "data": users, "count": len(users)}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing users: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/schools")
async def list_schools(user: Dict[str, Any] = Depends(require_admin())):
    try:
        schools = await admin_service.schools()
        return {"success": True, "data": schools}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing schools: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/schools/{school}/users")
async def users_by_school(school: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        users = await admin_service.users_by_school(school)
        return {"success": True, "data": users, "count": len(users)}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing users for school {school}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/users/{user_id}")
async def update_user(user_id: str, request: AdminUserUpdate, user: Dict[str, Any] = Depends(require_admin())):
    try:
        updated = await admin_service.update_user(user_id, request.model_dump(exclude_none=True))
        return {"success": True, "message": "User updated", "data": updated}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/users/{user_id}")
async def delete_user(user_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        await admin_service.delete_user(user, user_id)
        return {"success": True, "message": "User deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
