from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# ---------- ATTENDEE ----------
class AttendeeCreate(BaseModel):
    name: str
    email: str
    designation: str

class Attendee(AttendeeCreate):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    created_at: Optional[str] = Field(default=None, alias="createdAt")


# ---------- SPEAKER ----------
class SpeakerCreate(BaseModel):
    name: str
    bio: str
    avatar: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None

class Speaker(SpeakerCreate):
    id: str

class SpeakerUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None


# ---------- SESSION ----------
class SessionCreate(BaseModel):
    title: str
    description: str
    time: str
    speakers: List[str] = []

class Session(SessionCreate):
    id: str

class SessionUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    time: Optional[str] = None
    speakers: Optional[List[str]] = None


# ---------- DERIVED ----------
class SpeakerDetail(BaseModel):
    id: str
    name: str
    bio: str
    # Left unset (not None) when the speaker has no avatar
    avatar: Optional[str] = None

class SessionWithSpeakers(Session):
    model_config = ConfigDict(populate_by_name=True)

    speaker_details: List[SpeakerDetail] = Field(default_factory=list, alias="speakerDetails")


# ---------- ADMIN ----------
class DesignationCount(BaseModel):
    designation: str
    count: int

class AdminStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    designation_breakdown: List[DesignationCount] = Field(default_factory=list, alias="designationBreakdown")
