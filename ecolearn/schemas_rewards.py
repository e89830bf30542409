"""
Pydantic schemas for the reward catalog and redemptions
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from ecolearn.logic.rewards import REDEMPTION_STATUSES, REWARD_CATEGORIES, REWARD_TYPES


class RewardCreate(BaseModel):
    """Schema for creating a catalog reward"""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    pointsRequired: int = Field(..., ge=1)
    category: str = Field(default="Other")
    type: str = Field(default="product")
    cost: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0, description="None means unlimited")
    discountPercentage: Optional[int] = Field(default=None, ge=0, le=100)
    expiryDate: Optional[str] = None
    image: Optional[str] = None
    isLimited: bool = False
    isActive: bool = True

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in REWARD_CATEGORIES:
            raise ValueError(f"Invalid category '{v}'. Must be one of: {', '.join(REWARD_CATEGORIES)}")
        return v

    @field_validator('type')
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v not in REWARD_TYPES:
            raise ValueError(f"Invalid type '{v}'. Must be one of: {', '.join(REWARD_TYPES)}")
        return v


class RewardUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    pointsRequired: Optional[int] = Field(default=None, ge=1)
    category: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    discountPercentage: Optional[int] = Field(default=None, ge=0, le=100)
    expiryDate: Optional[str] = None
    image: Optional[str] = None
    isLimited: Optional[bool] = None
    isActive: Optional[bool] = None

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in REWARD_CATEGORIES:
            raise ValueError(f"Invalid category '{v}'. Must be one of: {', '.join(REWARD_CATEGORIES)}")
        return v


class RedemptionStatusUpdate(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in REDEMPTION_STATUSES:
            raise ValueError(f"Invalid status '{v}'. Must be one of: {', '.join(REDEMPTION_STATUSES)}")
        return v
