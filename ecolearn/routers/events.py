"""
Event endpoints: listing, registration and attendance
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, require_admin
from ecolearn.schemas_community import (
    BulkAttendanceRequest,
    EventCreate,
    EventRegistrationRequest,
    EventUpdate,
)
from ecolearn.services.community_service import event_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("/upcoming")
async def upcoming_events(limit: int = Query(10, ge=1, le=100)):
    try:
        events = await event_service.upcoming(limit)
        return {"success": True, "data": events}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing upcoming events: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/user/registered")
async def registered_events(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        events = await event_service.registered_for(user)
        return {"success": True, "data": events}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing registered events for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/statistics")
async def event_statistics():
    try:
        stats = await event_service.statistics()
        return {"success": True, "data": stats}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error computing event statistics: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/admin/all")
async def all_events(user: Dict[str, Any] = Depends(require_admin())):
    try:
        events = await event_service.list_all()
        return {"success": True, "data": events}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing all events: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(request: EventCreate, user: Dict[str, Any] = Depends(require_admin())):
    try:
        event = await event_service.create(user, request.model_dump())
        return {"success": True, "data": event}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error creating event: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{event_id}")
async def get_event(event_id: str):
    try:
        event = await event_service.get_event(event_id)
        return {"success": True, "data": event_service.view(event)}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error getting event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{event_id}")
async def update_event(
    event_id: str,
    request: EventUpdate,
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        event = await event_service.update(event_id, request.model_dump(exclude_unset=True))
        return {"success": True, "data": event}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{event_id}")
async def delete_event(event_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        await event_service.delete(event_id)
        return {"success": True, "message": "Event deleted"}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error deleting event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{event_id}/register")
async def register_for_event(
    event_id: str,
    request: EventRegistrationRequest,
    user: Dict[str, Any] = Depends(get_current_user)
):
    try:
        result = await event_service.register(user, event_id, request.registrationData)
        return {"success": True, "message": "Successfully registered for event", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error registering for event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{event_id}/unregister")
async def unregister_from_event(event_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        result = await event_service.unregister(user, event_id)
        return {"success": True, "message": "Successfully unregistered from event", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error unregistering from event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{event_id}/registrations")
async def event_registrations(event_id: str, user: Dict[str, Any] = Depends(require_admin())):
    try:
        registrations = await event_service.registrations(event_id)
        return {"success": True, "data": registrations}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing registrations for event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{event_id}/registrations/{registration_id}/confirm")
async def confirm_attendance(
    event_id: str,
    registration_id: str,
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        registration = await event_service.confirm_attendance(event_id, registration_id)
        return {"success": True, "data": registration}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error confirming attendance {registration_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{event_id}/attendance/bulk")
async def bulk_attendance(
    event_id: str,
    request: BulkAttendanceRequest,
    user: Dict[str, Any] = Depends(require_admin())
):
    try:
        entries = [entry.model_dump() for entry in request.attendanceData]
        updated = await event_service.bulk_attendance(event_id, entries)
        return {"success": True, "message": f"Attendance updated for {updated} participants", "data": {"updated": updated}}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating attendance for event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
