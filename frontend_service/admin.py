from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
import logging

from frontend_service.api import ApiClient
from frontend_service.config import SESSION_COOKIE_NAME, SESSION_MAX_AGE
from frontend_service.deps import templates, get_api
from frontend_service.models import Session, Speaker
from frontend_service.public import render_home
from frontend_service.services import (
    AdminService,
    AttendeeService,
    SessionService,
    SpeakerService,
)
from frontend_service.views import (
    AdminPanel,
    AdminTab,
    LoginForm,
    SessionFormData,
    SpeakerFormData,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")

def admin_panel(api: ApiClient) -> AdminPanel:
    return AdminPanel(
        AdminService(api),
        AttendeeService(api),
        SpeakerService(api),
        SessionService(api)
    )

def to_home():
    response = RedirectResponse(url="/", status_code=302)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response

def render_admin(request: Request, panel: AdminPanel):
    if panel.redirect_to:
        return to_home()

    response = templates.TemplateResponse(
        request,
        "admin.html",
        {"panel": panel, "tabs": list(AdminTab)}
    )
    panel.unmount()
    return response

async def finish_mutation(request: Request, panel: AdminPanel, ok: bool):
    # A failed change skipped the re-fetch, but the page still needs data
    if not ok and not panel.redirect_to:
        await panel.fetch_all()
    return render_admin(request, panel)

# ---------- AUTH ----------
@router.post("/login")
async def login_submit(
    request: Request,
    password: str = Form(""),
    api: ApiClient = Depends(get_api)
):
    form = LoginForm(AdminService(api))
    if not await form.submit(password):
        return await render_home(request, api, login=form)

    redirect = RedirectResponse(url="/admin", status_code=302)
    token = api.session_token
    if token:
        redirect.set_cookie(
            key=SESSION_COOKIE_NAME,
            value=token,
            httponly=True,
            max_age=SESSION_MAX_AGE,
            samesite="lax"
        )
    return redirect

@router.post("/logout")
async def logout(api: ApiClient = Depends(get_api)):
    panel = admin_panel(api)
    await panel.logout()
    return to_home()

# ---------- PANEL ----------
@router.get("")
async def admin_page(
    request: Request,
    tab: Optional[AdminTab] = None,
    edit_speaker: Optional[str] = None,
    edit_session: Optional[str] = None,
    api: ApiClient = Depends(get_api)
):
    panel = admin_panel(api)
    await panel.load()

    if tab is not None:
        panel.active_tab = tab
    if edit_speaker and not panel.edit_speaker_by_id(edit_speaker):
        panel.alert = "Speaker not found"
    if edit_session and not panel.edit_session_by_id(edit_session):
        panel.alert = "Session not found"
    return render_admin(request, panel)

# ---------- ATTENDEES ----------
@router.post("/attendees/{attendee_id}/delete")
async def delete_attendee(request: Request, attendee_id: str, api: ApiClient = Depends(get_api)):
    panel = admin_panel(api)
    ok = await panel.delete_attendee(attendee_id)
    return await finish_mutation(request, panel, ok)

# ---------- SPEAKERS ----------
@router.post("/speakers")
async def save_speaker(
    request: Request,
    name: str = Form(""),
    bio: str = Form(""),
    avatar: str = Form(""),
    linkedin: str = Form(""),
    twitter: str = Form(""),
    speaker_id: str = Form(""),
    api: ApiClient = Depends(get_api)
):
    panel = admin_panel(api)
    panel.active_tab = AdminTab.SPEAKERS
    if speaker_id:
        panel.editing_speaker = Speaker(id=speaker_id, name=name, bio=bio)
    panel.speaker_form = SpeakerFormData(
        name=name, bio=bio, avatar=avatar, linkedin=linkedin, twitter=twitter
    )
    ok = await panel.submit_speaker()
    return await finish_mutation(request, panel, ok)

@router.post("/speakers/{speaker_id}/delete")
async def delete_speaker(request: Request, speaker_id: str, api: ApiClient = Depends(get_api)):
    panel = admin_panel(api)
    panel.active_tab = AdminTab.SPEAKERS
    ok = await panel.delete_speaker(speaker_id)
    return await finish_mutation(request, panel, ok)

# ---------- SESSIONS ----------
@router.post("/sessions")
async def save_session(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    time: str = Form(""),
    speakers: List[str] = Form([]),
    session_id: str = Form(""),
    api: ApiClient = Depends(get_api)
):
    panel = admin_panel(api)
    panel.active_tab = AdminTab.SESSIONS
    if session_id:
        panel.editing_session = Session(
            id=session_id, title=title, description=description, time=time, speakers=speakers
        )
    panel.session_form = SessionFormData(
        title=title, description=description, time=time, speakers=speakers
    )
    ok = await panel.submit_session()
    return await finish_mutation(request, panel, ok)

@router.post("/sessions/{session_id}/delete")
async def delete_session(request: Request, session_id: str, api: ApiClient = Depends(get_api)):
    panel = admin_panel(api)
    panel.active_tab = AdminTab.SESSIONS
    ok = await panel.delete_session(session_id)
    return await finish_mutation(request, panel, ok)
