import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from tastebuddy.schemas.enums import EmailVisibility

URL_PATTERN = re.compile(r"^https?://.+")


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class UserUpdate(BaseModel):
    bio: Optional[str] = Field(default=None, max_length=500)
    instagram_url: Optional[str] = None
    website_url: Optional[str] = None

    @field_validator("instagram_url", "website_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v and not URL_PATTERN.match(v):
            raise ValueError("Invalid URL format")
        return v or None


class MinimalUserRead(BaseModel):
    id: str
    name: Optional[str] = None
    image: Optional[str] = None

    class Config:
        from_attributes = True


class UserRead(BaseModel):
    """Full profile, as seen by its owner"""
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    bio: Optional[str] = None
    instagram_url: Optional[str] = None
    website_url: Optional[str] = None
    email_visibility: EmailVisibility
    created_at: datetime

    class Config:
        from_attributes = True


class UserPublic(BaseModel):
    """Profile with privacy applied; email is None when hidden from the viewer"""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    bio: Optional[str] = None
    instagram_url: Optional[str] = None
    website_url: Optional[str] = None
    email_visibility: Optional[EmailVisibility] = None
    created_at: datetime


class PrivacySettings(BaseModel):
    email_visibility: EmailVisibility
