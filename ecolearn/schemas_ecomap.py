"""
Pydantic schemas for eco-map pins and pin requests
"""
import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from ecolearn.logic.ecomap import PIN_TYPES

URL_PATTERN = re.compile(r'^https?://.+\..+')


def _check_type(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in PIN_TYPES:
        raise ValueError(f"Invalid pin type '{v}'. Must be one of: {', '.join(PIN_TYPES)}")
    return v


def _check_url(v: Optional[str]) -> Optional[str]:
    if v and not URL_PATTERN.match(v):
        raise ValueError(f"Invalid URL '{v}'")
    return v


class PinCreate(BaseModel):
    """Schema for placing a pin on the eco-map"""
    title: str = Field(..., min_length=1, max_length=100)
    type: str = Field(default="park")
    description: str = Field(..., min_length=1, max_length=500)
    address: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    contact: Optional[str] = Field(default=None, max_length=50)
    whatsapp: Optional[str] = None
    discord: Optional[str] = None
    website: Optional[str] = None
    image: Optional[str] = None
    isActive: bool = True

    @field_validator('type')
    @classmethod
    def validate_type(cls, v: str) -> str:
        return _check_type(v)

    @field_validator('whatsapp', 'discord', 'website', 'image')
    @classmethod
    def validate_links(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class PinUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[str] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    contact: Optional[str] = Field(default=None, max_length=50)
    whatsapp: Optional[str] = None
    discord: Optional[str] = None
    website: Optional[str] = None
    image: Optional[str] = None
    isActive: Optional[bool] = None

    @field_validator('type')
    @classmethod
    def validate_type(cls, v: Optional[str]) -> Optional[str]:
        return _check_type(v)

    @field_validator('whatsapp', 'discord', 'website', 'image')
    @classmethod
    def validate_links(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class PinRequestCreate(BaseModel):
    """A student's proposal for a new pin"""
    title: str = Field(..., min_length=1, max_length=100)
    type: str = Field(default="park")
    description: str = Field(..., min_length=1, max_length=500)
    address: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    contact: Optional[str] = Field(default=None, max_length=50)
    whatsapp: Optional[str] = None
    discord: Optional[str] = None
    website: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator('type')
    @classmethod
    def validate_type(cls, v: str) -> str:
        return _check_type(v)

    @field_validator('whatsapp', 'discord', 'website')
    @classmethod
    def validate_links(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class PinRequestDecision(BaseModel):
    adminNotes: Optional[str] = Field(default=None, max_length=500)
