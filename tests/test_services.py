import json

import httpx
import pytest

from frontend_service.api import ApiClient, ApiError
from frontend_service.models import AttendeeCreate, SpeakerCreate, SpeakerUpdate, SessionUpdate
from frontend_service.services import (
    AdminService,
    AttendeeService,
    SessionService,
    SpeakerService,
)

from conftest import ADMIN_PASSWORD, seed_attendees


def api_returning(payload, status=200, requests=None) -> ApiClient:
    def handler(request: httpx.Request):
        if requests is not None:
            requests.append(request)
        return httpx.Response(status, json=payload)

    return ApiClient(base_url="http://api.test/api", transport=httpx.MockTransport(handler))


# ---------- fail-soft reads ----------

@pytest.mark.asyncio
@pytest.mark.parametrize("service_cls", [AttendeeService, SpeakerService, SessionService])
@pytest.mark.parametrize("payload", [None, {"items": []}, "nope", 42])
async def test_get_all_with_non_list_payload_is_empty(service_cls, payload):
    async with api_returning(payload) as api:
        assert await service_cls(api).get_all() == []


@pytest.mark.asyncio
async def test_get_all_skips_malformed_records():
    payload = [
        {"id": "sp1", "name": "Grace", "bio": "COBOL"},
        {"name": "No id"},
        "garbage",
    ]
    async with api_returning(payload) as api:
        speakers = await SpeakerService(api).get_all()

    assert [s.id for s in speakers] == ["sp1"]


@pytest.mark.asyncio
async def test_get_count_with_bad_payload_is_zero():
    async with api_returning({"total": 4}) as api:
        assert await AttendeeService(api).get_count() == 0


@pytest.mark.asyncio
async def test_stats_with_non_list_breakdown_is_empty():
    async with api_returning({"designationBreakdown": None}) as api:
        stats = await AdminService(api).get_stats()

    assert stats.designation_breakdown == []


# ---------- writes ----------

@pytest.mark.asyncio
async def test_update_sends_only_set_fields():
    requests = []
    payload = {"id": "s1", "title": "Keynote", "description": "d", "time": "10:30", "speakers": []}
    async with api_returning(payload, requests=requests) as api:
        session = await SessionService(api).update("s1", SessionUpdate(time="10:30"))

    assert session.time == "10:30"
    assert requests[0].method == "PUT"
    assert requests[0].url.path == "/api/sessions/s1"
    assert json.loads(requests[0].content) == {"time": "10:30"}


@pytest.mark.asyncio
async def test_login_reports_success_flag():
    async with api_returning({"success": False}) as api:
        assert await AdminService(api).login("pw") is False
    async with api_returning({"success": True}) as api:
        assert await AdminService(api).login("pw") is True


# ---------- against the event service ----------

@pytest.mark.asyncio
async def test_register_then_count_reflects_increment(api, repo):
    seed_attendees(repo, ["Student"] * 10)
    attendees = AttendeeService(api)
    assert await attendees.get_count() == 10

    created = await attendees.register(AttendeeCreate(
        name="Ada", email="ada@example.com", designation="ML Engineer"
    ))

    assert created.id
    assert created.created_at
    assert await attendees.get_count() == 11


@pytest.mark.asyncio
async def test_speaker_round_trip_through_event_service(admin_api):
    speakers = SpeakerService(admin_api)

    created = await speakers.create(SpeakerCreate(name="Grace", bio="COBOL"))
    updated = await speakers.update(created.id, SpeakerUpdate(avatar="https://img/g.png"))

    assert updated.name == "Grace"
    assert updated.avatar == "https://img/g.png"
    assert [s.id for s in await speakers.get_all()] == [created.id]

    await speakers.delete(created.id)
    await speakers.delete(created.id)
    assert await speakers.get_all() == []


@pytest.mark.asyncio
async def test_check_session(api):
    admin = AdminService(api)
    assert await admin.check_session() is False

    assert await admin.login(ADMIN_PASSWORD) is True
    assert await admin.check_session() is True

    await admin.logout()
    assert await admin.check_session() is False


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [None, {"id": "sp1"}, ["not", "a", "record"]])
async def test_create_with_unexpected_body_is_an_api_error(payload):
    async with api_returning(payload, status=201) as api:
        with pytest.raises(ApiError):
            await SpeakerService(api).create(SpeakerCreate(name="Grace", bio="COBOL"))


@pytest.mark.asyncio
async def test_update_with_empty_body_is_an_api_error():
    def handler(request):
        return httpx.Response(200)

    async with ApiClient(base_url="http://api.test/api", transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(ApiError):
            await SessionService(api).update("s1", SessionUpdate(time="10:30"))
