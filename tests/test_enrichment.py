from unittest.mock import AsyncMock

import pytest

from frontend_service.api import ApiError
from frontend_service.enrichment import enrich_session, enrich_sessions, fetch_sessions_with_speakers
from frontend_service.models import Session, Speaker


SPEAKERS = [
    Speaker(id="sp1", name="Grace", bio="COBOL", avatar="https://img/grace.png", twitter="@grace"),
    Speaker(id="sp2", name="Alan", bio="Computability"),
    Speaker(id="sp3", name="Barbara", bio="Abstraction", avatar=""),
]


def session(*speaker_ids) -> Session:
    return Session(id="s1", title="Keynote", description="Opening", time="09:00", speakers=list(speaker_ids))


def test_details_follow_session_order():
    enriched = enrich_session(session("sp2", "sp1"), SPEAKERS)

    assert [d.id for d in enriched.speaker_details] == ["sp2", "sp1"]
    assert enriched.title == "Keynote"
    assert enriched.speakers == ["sp2", "sp1"]


def test_unresolved_ids_are_dropped():
    enriched = enrich_session(session("ghost", "sp3", "gone"), SPEAKERS)

    assert [d.id for d in enriched.speaker_details] == ["sp3"]


def test_no_resolvable_ids_gives_empty_details():
    assert enrich_session(session("ghost"), SPEAKERS).speaker_details == []
    assert enrich_session(session(), SPEAKERS).speaker_details == []
    assert enrich_session(session("sp1"), []).speaker_details == []


def test_duplicates_only_come_from_the_session():
    assert [d.id for d in enrich_session(session("sp1", "sp1"), SPEAKERS).speaker_details] == ["sp1", "sp1"]

    doubled = SPEAKERS + [Speaker(id="sp1", name="Impostor", bio="?")]
    details = enrich_session(session("sp1"), doubled).speaker_details
    assert [d.name for d in details] == ["Grace"]


def test_avatar_only_present_when_speaker_has_one():
    details = enrich_session(session("sp1", "sp2", "sp3"), SPEAKERS).speaker_details
    dumped = [d.model_dump(exclude_unset=True) for d in details]

    assert dumped[0] == {"id": "sp1", "name": "Grace", "bio": "COBOL", "avatar": "https://img/grace.png"}
    assert "avatar" not in dumped[1]
    assert "avatar" not in dumped[2]


def test_enrich_sessions_keeps_session_order():
    sessions = [
        Session(id="a", title="A", description="-", time="09:00", speakers=["sp1"]),
        Session(id="b", title="B", description="-", time="10:00", speakers=["sp2"]),
    ]

    enriched = enrich_sessions(sessions, SPEAKERS)

    assert [(s.id, [d.id for d in s.speaker_details]) for s in enriched] == [("a", ["sp1"]), ("b", ["sp2"])]


@pytest.mark.asyncio
async def test_fetch_issues_both_requests_and_joins():
    session_service = AsyncMock()
    session_service.get_all.return_value = [session("sp1", "ghost")]
    speaker_service = AsyncMock()
    speaker_service.get_all.return_value = SPEAKERS

    enriched = await fetch_sessions_with_speakers(session_service, speaker_service)

    session_service.get_all.assert_awaited_once()
    speaker_service.get_all.assert_awaited_once()
    assert [d.id for d in enriched[0].speaker_details] == ["sp1"]


@pytest.mark.asyncio
async def test_fetch_propagates_transport_errors():
    session_service = AsyncMock()
    session_service.get_all.return_value = []
    speaker_service = AsyncMock()
    speaker_service.get_all.side_effect = ApiError(500, "Failed to fetch speakers")

    with pytest.raises(ApiError):
        await fetch_sessions_with_speakers(session_service, speaker_service)
