from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime

# ---------- ATTENDEES ----------
class AttendeeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    designation: str = Field(min_length=1, max_length=255)

class AttendeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    email: str
    designation: str
    created_at: datetime = Field(alias="createdAt")

class CountResponse(BaseModel):
    count: int


# ---------- SPEAKERS ----------
class SpeakerCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    bio: str = Field(min_length=1)
    avatar: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None

class SpeakerUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    bio: Optional[str] = Field(default=None, min_length=1)
    avatar: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None

    @field_validator("name", "bio")
    @classmethod
    def not_null(cls, v):
        # Omit a field to keep it; null would clear a required column
        if v is None:
            raise ValueError("may not be null")
        return v

class SpeakerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    bio: str
    avatar: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None


# ---------- SESSIONS ----------
class SessionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    time: str = Field(min_length=1, max_length=100)
    speakers: List[str] = []

class SessionUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    time: Optional[str] = Field(default=None, min_length=1, max_length=100)
    speakers: Optional[List[str]] = None

    @field_validator("title", "description", "time", "speakers")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    time: str
    speakers: List[str] = []


# ---------- ADMIN ----------
class LoginRequest(BaseModel):
    password: str = Field(min_length=1)

class LoginResponse(BaseModel):
    success: bool

class SessionStatusResponse(BaseModel):
    authenticated: bool

class DesignationCount(BaseModel):
    designation: str
    count: int

class StatsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    designation_breakdown: List[DesignationCount] = Field(alias="designationBreakdown")

class MessageResponse(BaseModel):
    message: str
