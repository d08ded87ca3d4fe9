from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, WebSocket, WebSocketDisconnect
import logging

from frontend_service import config
from frontend_service.api import ApiClient
from frontend_service.deps import templates, get_api
from frontend_service.services import AttendeeService, SessionService, SpeakerService
from frontend_service.views import (
    DESIGNATIONS,
    CountPoller,
    LoginForm,
    RegistrationForm,
    SessionsSection,
)

logger = logging.getLogger(__name__)

router = APIRouter()

async def render_home(
    request: Request,
    api: ApiClient,
    registration: Optional[RegistrationForm] = None,
    login: Optional[LoginForm] = None
):
    sessions = SessionsSection(SessionService(api), SpeakerService(api))
    await sessions.load()

    if registration is None:
        registration = RegistrationForm(AttendeeService(api))
        await registration.mount(poll=False)

    response = templates.TemplateResponse(
        request,
        "index.html",
        {
            "event": {
                "title": config.EVENT_TITLE,
                "tagline": config.EVENT_TAGLINE,
                "date": config.EVENT_DATE,
                "venue": config.EVENT_VENUE,
            },
            "sessions": sessions,
            "registration": registration,
            "designations": DESIGNATIONS,
            "login": login,
            "dismiss_after_ms": int(registration.dismiss_after * 1000),
        }
    )
    # The page is rendered; nothing may touch this form any more
    registration.unmount()
    return response

@router.get("/")
async def home(request: Request, api: ApiClient = Depends(get_api)):
    return await render_home(request, api)

@router.post("/register")
async def register_submit(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    designation: str = Form(""),
    api: ApiClient = Depends(get_api)
):
    form = RegistrationForm(AttendeeService(api))
    form.update(name=name, email=email, designation=designation)

    if not await form.submit():
        await form.refresh_count()
    return await render_home(request, api, registration=form)

@router.websocket("/live/count")
async def live_count(websocket: WebSocket, api: ApiClient = Depends(get_api)):
    await websocket.accept()

    async def push(count: int):
        await websocket.send_json({"count": count})

    poller = CountPoller(AttendeeService(api), push)
    await poller.refresh()
    poller.start()
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Live count client disconnected")
    finally:
        poller.stop()
