"""
Pydantic schemas for accounts and authentication

All schemas use Pydantic v2 syntax with ConfigDict
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import timezone
from typing import Optional, Dict, List

from ecolearn.dynamo import parse_time


# ============= ENUMS AND CONSTANTS =============

VALID_ROLES = ["student", "teacher", "admin"]


# ============= OTP SCHEMAS =============

class SendOtpRequest(BaseModel):
    email: EmailStr = Field(..., description="Email address to verify")


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., min_length=6, max_length=6, description="6-digit code")


# ============= AUTH SCHEMAS =============

class RegisterRequest(BaseModel):
    """Schema for registering a new account"""
    name: str = Field(..., min_length=1, max_length=50, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="Password (min 6 chars)")
    phone: Optional[str] = None
    school: Optional[str] = None
    rollNumber: Optional[str] = None
    emailVerificationToken: Optional[str] = Field(
        default=None,
        description="Token returned by /auth/verify-email-otp"
    )

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UpdateDetailsRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    phone: Optional[str] = None
    school: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=500)


class UpdatePasswordRequest(BaseModel):
    currentPassword: str
    newPassword: str

    @field_validator('newPassword')
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class AdminUserUpdate(BaseModel):
    """Fields an admin may change on any account"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    school: Optional[str] = None
    rollNumber: Optional[str] = None
    role: Optional[str] = None

    @field_validator('role')
    @classmethod
    def validate_role(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in VALID_ROLES:
            raise ValueError(f"Invalid role '{v}'. Must be one of: {', '.join(VALID_ROLES)}")
        return v


# ============= USER SCHEMAS =============

class Badge(BaseModel):
    name: str
    description: Optional[str] = None
    earnedAt: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of an account"""
    userId: str
    name: str
    email: str
    role: str
    school: Optional[str] = None
    phone: Optional[str] = None
    rollNumber: Optional[str] = None
    bio: Optional[str] = None
    emailVerified: bool = False
    points: int = 0
    monthlyPoints: int = 0
    weeklyPoints: int = 0
    streak: int = 0
    modulesCompleted: int = 0
    badges: List[Badge] = Field(default_factory=list)
    quizAttempts: Dict[str, int] = Field(default_factory=dict)
    completedSurveys: List[str] = Field(default_factory=list)
    lastLogin: Optional[str] = None
    createdAt: Optional[str] = None

    @field_validator('role')
    @classmethod
    def validate_role(cls, v: str) -> str:
        if v not in VALID_ROLES:
            raise ValueError(f"Invalid role '{v}'. Must be one of: {', '.join(VALID_ROLES)}")
        return v

    model_config = ConfigDict(from_attributes=True, extra='ignore')


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    tokenType: str = "Bearer"
    user: UserResponse


# ============= SHARED VALIDATORS =============

def check_timestamp(value: Optional[str]) -> Optional[str]:
    """Accept ISO 8601 dates or timestamps and return them normalised to UTC"""
    if value is None:
        return value
    try:
        return parse_time(value).astimezone(timezone.utc).isoformat()
    except (AttributeError, TypeError, ValueError):
        raise ValueError(f"Invalid date '{value}'. Use ISO 8601, e.g. 2025-03-01T10:00:00Z")
