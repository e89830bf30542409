"""
Authentication endpoints: email OTP, registration, login and profile
"""
import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException, status

from ecolearn import dynamo
from ecolearn.errors import EcoLearnError
from ecolearn.middleware.auth import get_current_user, require_admin
from ecolearn.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    SendOtpRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
    VerifyOtpRequest,
)
from ecolearn.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/send-email-otp")
async def send_email_otp(request: SendOtpRequest):
    """Issue a verification code for an email address"""
    try:
        result = await auth_service.send_email_otp(request.email)
        return {"success": True, "message": "OTP sent to your email", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error sending OTP: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/verify-email-otp")
async def verify_email_otp(request: VerifyOtpRequest):
    try:
        result = await auth_service.verify_email_otp(request.email, request.otp)
        return {"success": True, "message": "Email verified successfully", "data": result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error verifying OTP: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """Register a student account (requires a verified email token)"""
    try:
        result = await auth_service.register(request.model_dump(), role='student')
        return {"success": True, **result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error registering user: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/register/teacher", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_teacher(request: RegisterRequest):
    try:
        result = await auth_service.register(request.model_dump(), role='teacher')
        return {"success": True, **result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error registering teacher: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    try:
        result = await auth_service.login(request.email, request.password)
        return {"success": True, **result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error logging in: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/me")
async def get_me(user: Dict[str, Any] = Depends(get_current_user)):
    return {"success": True, "data": dynamo.public_user(user)}


@router.put("/updatedetails")
async def update_details(
    request: UpdateDetailsRequest,
    user: Dict[str, Any] = Depends(get_current_user)
):
    try:
        updated = await auth_service.update_details(user, request.model_dump(exclude_none=True))
        return {"success": True, "data": updated}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating details for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/updatepassword")
async def update_password(
    request: UpdatePasswordRequest,
    user: Dict[str, Any] = Depends(get_current_user)
):
    try:
        result = await auth_service.update_password(user, request.currentPassword, request.newPassword)
        return {"success": True, **result}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error updating password for {user['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/points-history")
async def points_history(user: Dict[str, Any] = Depends(get_current_user)):
    """Ledger entries for the caller, newest first"""
    history = sorted(user.get('pointsHistory', []), key=lambda h: h.get('earnedAt', ''), reverse=True)
    return {
        "success": True,
        "data": {
            "totalPoints": user.get('points', 0),
            "weeklyPoints": user.get('weeklyPoints', 0),
            "monthlyPoints": user.get('monthlyPoints', 0),
            "history": history,
        }
    }


@router.get("/admin/users")
async def list_users(user: Dict[str, Any] = Depends(require_admin())):
    try:
        users = await dynamo.list_users()
        return {"success": True, "data": [dynamo.public_user(u) for u in users]}
    except (HTTPException, EcoLearnError):
        raise
    except Exception as e:
        logger.error(f"Error listing users: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
