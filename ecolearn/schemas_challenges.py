"""
Pydantic schemas for challenges and submissions
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from ecolearn.logic.challenges import CHALLENGE_CATEGORIES, REVIEW_STATUSES, SUBMISSION_TYPES
from ecolearn.schemas import check_timestamp


class CompletionCriteria(BaseModel):
    type: str = Field(default="custom")
    target: int = Field(default=10, ge=1, description="Approved submissions needed")
    requiresSubmission: bool = True
    submissionType: str = Field(default="any")
    submissionInstructions: Optional[str] = Field(default=None, max_length=500)

    @field_validator('type')
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v != 'custom':
            raise ValueError("Invalid criteria type. Must be one of: custom")
        return v

    @field_validator('submissionType')
    @classmethod
    def validate_submission_type(cls, v: str) -> str:
        if v not in SUBMISSION_TYPES:
            raise ValueError(f"Invalid submission type '{v}'. Must be one of: {', '.join(SUBMISSION_TYPES)}")
        return v


class ChallengeCreate(BaseModel):
    """Schema for creating a challenge"""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    category: str
    pointsReward: Optional[int] = Field(default=None, ge=1, description="Defaults to DEFAULT_CHALLENGE_REWARD")
    duration: int = Field(default=7, ge=1, description="Days")
    startDate: Optional[str] = Field(default=None, description="ISO timestamp, defaults to now")
    completionCriteria: CompletionCriteria = Field(default_factory=CompletionCriteria)
    isActive: bool = True

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in CHALLENGE_CATEGORIES:
            raise ValueError(f"Invalid category '{v}'. Must be one of: {', '.join(CHALLENGE_CATEGORIES)}")
        return v

    @field_validator('startDate')
    @classmethod
    def validate_start_date(cls, v: Optional[str]) -> Optional[str]:
        return check_timestamp(v)


class ChallengeUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = None
    pointsReward: Optional[int] = Field(default=None, ge=1)
    duration: Optional[int] = Field(default=None, ge=1)
    startDate: Optional[str] = None
    completionCriteria: Optional[CompletionCriteria] = None
    isActive: Optional[bool] = None

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in CHALLENGE_CATEGORIES:
            raise ValueError(f"Invalid category '{v}'. Must be one of: {', '.join(CHALLENGE_CATEGORIES)}")
        return v

    @field_validator('startDate')
    @classmethod
    def validate_start_date(cls, v: Optional[str]) -> Optional[str]:
        return check_timestamp(v)


class ProgressUpdate(BaseModel):
    progress: float = Field(..., description="Clamped to 0-100")


class SubmissionCreate(BaseModel):
    submission: str = Field(..., min_length=1, description="Text, link or file reference")
    description: str = Field(default="", max_length=1000)


class SubmissionReview(BaseModel):
    status: str = Field(..., description="approved or rejected")
    feedback: Optional[str] = Field(default=None, max_length=1000)
    pointsAwarded: int = Field(default=0, ge=0, description="Bonus points, granted regardless of status")

    @field_validator('status')
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in REVIEW_STATUSES:
            raise ValueError(f"Invalid status '{v}'. Must be one of: {', '.join(REVIEW_STATUSES)}")
        return v
