"""
Pin request endpoints: students propose pins, admins decide
"""
import logging
from typing import Dict, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, require_admin
from ecolearn.schemas_ecomap import PinRequestCreate, PinRequestDecision
from ecolearn.services.ecomap_service import ecomap_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pin-requests", tags=["Eco-map"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_pin_request(request: PinRequestCreate, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        pin_request = await ecomap_service.submit_request(user, request.model_dump())
        return {"success": True, "message": "Pin request submitted for review", "data": pin_request}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error submitting pin request: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/my-requests")
async def my_pin_requests(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        requests = await ecomap_service.my_requests(user)
        return {"success": True, "data": requests}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing pin requests for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/admin")
async def all_pin_requests(
    status: Optional[str] = Query(None, description="pending, approved, rejected or all"),
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        requests = await ecomap_service.list_requests(status)
        return {"success": True, "data": requests, "count": len(requests)}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing pin requests: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{request_id}/approve")
async def approve_pin_request(
    request_id: str,
    request: PinRequestDecision,
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        result = await ecomap_service.approve_request(request_id, request.adminNotes)
        return {"success": True, "message": "Pin request approved and pin created", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error approving pin request {request_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{request_id}/reject")
async def reject_pin_request(
    request_id: str,
    request: PinRequestDecision,
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        pin_request = await ecomap_service.reject_request(request_id, request.adminNotes)
        return {"success": True, "message": "Pin request rejected", "data": pin_request}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error rejecting pin request {request_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
