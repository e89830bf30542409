"""
Pydantic schemas for events and surveys
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any, List

from ecolearn.schemas import check_timestamp


# ============= EVENT SCHEMAS =============

class EventCreate(BaseModel):
    """Schema for creating an event"""
    name: str = Field(..., min_length=1, max_length=150)
    description: str = Field(..., min_length=1)
    date: str = Field(..., description="ISO timestamp of the event start")
    endDate: Optional[str] = None
    lastDateToRegister: Optional[str] = Field(default=None, description="Must not be after date")
    location: Optional[str] = None
    registrationLink: Optional[str] = None
    maxParticipants: int = Field(default=0, ge=0, description="0 means unlimited")
    pointsReward: int = Field(default=0, ge=0)
    isActive: bool = True

    @field_validator('date', 'endDate', 'lastDateToRegister')
    @classmethod
    def validate_dates(cls, v: Optional[str]) -> Optional[str]:
        return check_timestamp(v)


class EventUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    description: Optional[str] = None
    date: Optional[str] = None
    endDate: Optional[str] = None
    lastDateToRegister: Optional[str] = None
    location: Optional[str] = None
    registrationLink: Optional[str] = None
    maxParticipants: Optional[int] = Field(default=None, ge=0)
    pointsReward: Optional[int] = Field(default=None, ge=0)
    isActive: Optional[bool] = None

    @field_validator('date', 'endDate', 'lastDateToRegister')
    @classmethod
    def validate_dates(cls, v: Optional[str]) -> Optional[str]:
        return check_timestamp(v)


class EventRegistrationRequest(BaseModel):
    registrationData: Dict[str, Any] = Field(default_factory=dict)


class AttendanceEntry(BaseModel):
    userId: str
    attended: bool


class BulkAttendanceRequest(BaseModel):
    attendanceData: List[AttendanceEntry]


# ============= SURVEY SCHEMAS =============

class SurveyQuestion(BaseModel):
    question: str = Field(..., min_length=1)
    type: str = Field(default="text", description="text, single-choice, multiple-choice or rating")
    options: List[str] = Field(default_factory=list)
    required: bool = True


class SurveyCreate(BaseModel):
    """Schema for creating a survey"""
    title: str = Field(..., min_length=1, max_length=150)
    description: str = Field(..., min_length=1)
    organization: Optional[str] = None
    category: Optional[str] = None
    points: int = Field(default=0, ge=0)
    questions: List[SurveyQuestion] = Field(default_factory=list)
    targetAudience: str = Field(default="all")
    isActive: bool = True


class SurveyUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=150)
    description: Optional[str] = None
    organization: Optional[str] = None
    category: Optional[str] = None
    points: Optional[int] = Field(default=None, ge=0)
    questions: Optional[List[SurveyQuestion]] = None
    targetAudience: Optional[str] = None
    isActive: Optional[bool] = None


class SurveySubmission(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)


# ============= PLATFORM REVIEW SCHEMAS =============

class PlatformReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=500)
