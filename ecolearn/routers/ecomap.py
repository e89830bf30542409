"""
Eco-map endpoints: pins on the school map
"""
import logging
from typing import Dict, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, get_optional_user, require_teacher
from ecolearn.schemas_ecomap import PinCreate, PinUpdate
from ecolearn.services.ecomap_service import ecomap_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/eco-map", tags=["Eco-map"])


@router.get("/pins")
async def list_pins(
    type: Optional[str] = Query(None),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: float = Query(10, gt=0, description="Kilometres around lat/lng"),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user)
):
    try:
        pins = await ecomap_service.list_pins(user, type, lat, lng, radius)
        return {"success": True, "data": pins, "count": len(pins)}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing eco pins: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/pins/stats")
async def pin_stats():
    try:
        stats = await ecomap_service.stats()
        return {"success": True, "data": stats}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error computing eco pin stats: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/pins/{pin_id}")
async def get_pin(pin_id: str):
    try:
        pin = await ecomap_service.get_pin(pin_id)
        return {"success": True, "data": pin}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting eco pin {pin_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/pins", status_code=status.HTTP_201_CREATED)
async def create_pin(request: PinCreate, user: Dict[str, Any] = Depends(require_teacher())):
    try:
        pin = await ecomap_service.create_pin(user, request.model_dump())
        return {"success": True, "message": "Eco pin created", "data": pin}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error creating eco pin: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/pins/{pin_id}")
async def update_pin(pin_id: str, request: PinUpdate, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        pin = await ecomap_service.update_pin(user, pin_id, request.model_dump(exclude_unset=True))
        return {"success": True, "message": "Eco pin updated", "data": pin}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating eco pin {pin_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/pins/{pin_id}")
async def delete_pin(pin_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        await ecomap_service.delete_pin(user, pin_id)
        return {"success": True, "message": "Eco pin deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting eco pin {pin_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
