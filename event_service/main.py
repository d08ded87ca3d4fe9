from fastapi import FastAPI, APIRouter, Depends, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
import logging
import secrets

from event_service import config
from event_service.auth import (
    create_session_token,
    set_session_cookie,
    clear_session_cookie,
    require_admin,
)
from event_service.db import SessionLocal, init_db
from event_service.repository import Repository
from event_service.schemas import (
    AttendeeCreate,
    AttendeeResponse,
    CountResponse,
    SpeakerCreate,
    SpeakerUpdate,
    SpeakerResponse,
    SessionCreate,
    SessionUpdate,
    SessionResponse,
    LoginRequest,
    LoginResponse,
    SessionStatusResponse,
    StatsResponse,
    MessageResponse,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Event Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Accept"],
    allow_credentials=True
)

# ---------- DB ----------
async def get_db():
    async with SessionLocal() as session:
        yield session

def get_repository(db=Depends(get_db)) -> Repository:
    return Repository(db)

@app.on_event("startup")
async def startup():
    await init_db()
    logger.info("Event service ready")

public = APIRouter(prefix="/api")
admin_only = APIRouter(prefix="/api", dependencies=[Depends(require_admin)])

# ---------- ADMIN ----------
@public.post("/admin/login", response_model=LoginResponse)
async def login(data: LoginRequest, response: Response):
    if not config.ADMIN_PASSWORD:
        raise HTTPException(status_code=500, detail="Admin password not configured")

    if not secrets.compare_digest(data.password, config.ADMIN_PASSWORD):
        logger.warning("Rejected admin login")
        raise HTTPException(status_code=401, detail="Invalid password")

    set_session_cookie(response, create_session_token())
    logger.info("Admin logged in")
    return LoginResponse(success=True)

@public.post("/admin/logout", response_model=MessageResponse)
async def logout(response: Response):
    clear_session_cookie(response)
    logger.info("Admin logged out")
    return MessageResponse(message="Logged out successfully")

@admin_only.get("/admin/session", response_model=SessionStatusResponse)
async def session_status():
    return SessionStatusResponse(authenticated=True)

@admin_only.get("/admin/stats", response_model=StatsResponse)
async def get_stats(repo: Repository = Depends(get_repository)):
    breakdown = await repo.get_designation_breakdown()
    return StatsResponse(designation_breakdown=breakdown)

# ---------- ATTENDEES ----------
@public.post("/attendees", response_model=AttendeeResponse, status_code=201)
async def register_attendee(
    data: AttendeeCreate,
    repo: Repository = Depends(get_repository)
):
    return await repo.create_attendee(
        name=data.name,
        email=str(data.email).lower(),
        designation=data.designation
    )

@public.get("/attendees/count", response_model=CountResponse)
async def get_attendee_count(repo: Repository = Depends(get_repository)):
    return CountResponse(count=await repo.get_attendee_count())

@admin_only.get("/attendees", response_model=list[AttendeeResponse])
async def get_attendees(repo: Repository = Depends(get_repository)):
    return await repo.get_all_attendees()

@admin_only.delete("/attendees/{attendee_id}", response_model=MessageResponse)
async def delete_attendee(attendee_id: str, repo: Repository = Depends(get_repository)):
    await repo.delete_attendee(attendee_id)
    return MessageResponse(message="Attendee deleted successfully")

# ---------- SPEAKERS ----------
@public.get("/speakers", response_model=list[SpeakerResponse])
async def get_speakers(repo: Repository = Depends(get_repository)):
    return await repo.get_all_speakers()

@admin_only.post("/speakers", response_model=SpeakerResponse, status_code=201)
async def create_speaker(data: SpeakerCreate, repo: Repository = Depends(get_repository)):
    return await repo.create_speaker(**data.model_dump())

@admin_only.put("/speakers/{speaker_id}", response_model=SpeakerResponse)
async def update_speaker(
    speaker_id: str,
    data: SpeakerUpdate,
    repo: Repository = Depends(get_repository)
):
    speaker = await repo.update_speaker(speaker_id, data.model_dump(exclude_unset=True))
    if speaker is None:
        raise HTTPException(status_code=404, detail="Speaker not found")
    return speaker

@admin_only.delete("/speakers/{speaker_id}", response_model=MessageResponse)
async def delete_speaker(speaker_id: str, repo: Repository = Depends(get_repository)):
    await repo.delete_speaker(speaker_id)
    return MessageResponse(message="Speaker deleted successfully")

# ---------- SESSIONS ----------
@public.get("/sessions", response_model=list[SessionResponse])
async def get_sessions(repo: Repository = Depends(get_repository)):
    return await repo.get_all_sessions()

@admin_only.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(data: SessionCreate, repo: Repository = Depends(get_repository)):
    return await repo.create_session(**data.model_dump())

@admin_only.put("/sessions/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str,
    data: SessionUpdate,
    repo: Repository = Depends(get_repository)
):
    session = await repo.update_session(session_id, data.model_dump(exclude_unset=True))
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session

@admin_only.delete("/sessions/{session_id}", response_model=MessageResponse)
async def delete_session(session_id: str, repo: Repository = Depends(get_repository)):
    await repo.delete_session(session_id)
    return MessageResponse(message="Session deleted successfully")

app.include_router(public)
app.include_router(admin_only)
