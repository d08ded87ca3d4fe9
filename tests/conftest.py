from collections import Counter
from typing import Optional

import httpx
import pytest
import pytest_asyncio
from fastapi.requests import HTTPConnection
from fastapi.testclient import TestClient

from event_service import config as event_config
from event_service.db import Attendee, Speaker, EventSession, new_id, utcnow
from event_service.main import app as event_app_instance, get_repository
from frontend_service.api import ApiClient
from frontend_service.config import SESSION_COOKIE_NAME
from frontend_service.deps import get_api
from frontend_service.main import app as frontend_app_instance

ADMIN_PASSWORD = "let-me-in"
BASE_URL = "http://testserver/api"


class InMemoryRepository:
    """Same methods as event_service.repository.Repository, kept in dicts."""

    def __init__(self):
        self.attendees: dict[str, Attendee] = {}
        self.speakers: dict[str, Speaker] = {}
        self.sessions: dict[str, EventSession] = {}

    async def create_attendee(self, name, email, designation):
        attendee = Attendee(
            id=new_id(), name=name, email=email, designation=designation, created_at=utcnow()
        )
        self.attendees[attendee.id] = attendee
        return attendee

    async def get_all_attendees(self):
        return list(reversed(self.attendees.values()))

    async def get_attendee_count(self):
        return len(self.attendees)

    async def delete_attendee(self, attendee_id):
        self.attendees.pop(attendee_id, None)

    async def create_speaker(self, **fields):
        speaker = Speaker(id=new_id(), **fields)
        self.speakers[speaker.id] = speaker
        return speaker

    async def get_all_speakers(self):
        return list(self.speakers.values())

    async def update_speaker(self, speaker_id, fields) -> Optional[Speaker]:
        speaker = self.speakers.get(speaker_id)
        if speaker is None:
            return None
        for key, value in fields.items():
            setattr(speaker, key, value)
        return speaker

    async def delete_speaker(self, speaker_id):
        self.speakers.pop(speaker_id, None)

    async def create_session(self, **fields):
        session = EventSession(id=new_id(), **fields)
        self.sessions[session.id] = session
        return session

    async def get_all_sessions(self):
        return list(self.sessions.values())

    async def update_session(self, session_id, fields) -> Optional[EventSession]:
        session = self.sessions.get(session_id)
        if session is None:
            return None
        for key, value in fields.items():
            setattr(session, key, value)
        return session

    async def delete_session(self, session_id):
        self.sessions.pop(session_id, None)

    async def get_designation_breakdown(self):
        counts = Counter(a.designation for a in self.attendees.values())
        return [
            {"designation": d, "count": n}
            for d, n in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        ]


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def event_app(repo, monkeypatch):
    monkeypatch.setattr(event_config, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    event_app_instance.dependency_overrides[get_repository] = lambda: repo
    yield event_app_instance
    event_app_instance.dependency_overrides.clear()


@pytest.fixture
def event_client(event_app):
    return TestClient(event_app)


@pytest.fixture
def admin_client(event_client):
    res = event_client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return event_client


def make_api(app, token: Optional[str] = None) -> ApiClient:
    return ApiClient(base_url=BASE_URL, token=token, transport=httpx.ASGITransport(app=app))


@pytest_asyncio.fixture
async def api(event_app):
    async with make_api(event_app) as client:
        yield client


@pytest_asyncio.fixture
async def admin_api(api):
    res = await api.post("/admin/login", json={"password": ADMIN_PASSWORD})
    assert res == {"success": True}
    return api


@pytest.fixture
def frontend_client(event_app):
    async def api_over_asgi(conn: HTTPConnection):
        async with make_api(event_app, conn.cookies.get(SESSION_COOKIE_NAME)) as client:
            yield client

    frontend_app_instance.dependency_overrides[get_api] = api_over_asgi
    yield TestClient(frontend_app_instance)
    frontend_app_instance.dependency_overrides.clear()


def seed_attendees(repo: InMemoryRepository, designations: list[str]):
    for i, designation in enumerate(designations):
        attendee = Attendee(
            id=new_id(),
            name=f"Attendee {i}",
            email=f"a{i}@example.com",
            designation=designation,
            created_at=utcnow()
        )
        repo.attendees[attendee.id] = attendee
