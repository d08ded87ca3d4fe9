import asyncio
from typing import Optional, Sequence

from frontend_service.models import Session, Speaker, SpeakerDetail, SessionWithSpeakers
from frontend_service.services import SessionService, SpeakerService


def find_speaker(speakers: Sequence[Speaker], speaker_id: str) -> Optional[Speaker]:
    return next((s for s in speakers if s.id == speaker_id), None)


def speaker_detail(speaker: Speaker) -> SpeakerDetail:
    fields = {"id": speaker.id, "name": speaker.name, "bio": speaker.bio}
    if speaker.avatar:
        fields["avatar"] = speaker.avatar
    return SpeakerDetail(**fields)


def enrich_session(session: Session, speakers: Sequence[Speaker]) -> SessionWithSpeakers:
    """Join a session's speaker ids against the speaker list.

    Ids with no matching speaker are dropped; the rest keep the order of
    ``session.speakers``.
    """
    details = []
    for speaker_id in session.speakers or []:
        speaker = find_speaker(speakers, speaker_id)
        if speaker is not None:
            details.append(speaker_detail(speaker))

    return SessionWithSpeakers(
        **session.model_dump(include=set(Session.model_fields)),
        speaker_details=details
    )


def enrich_sessions(sessions: Sequence[Session], speakers: Sequence[Speaker]) -> list[SessionWithSpeakers]:
    return [enrich_session(s, speakers) for s in sessions]


async def fetch_sessions_with_speakers(
    session_service: SessionService,
    speaker_service: SpeakerService
) -> list[SessionWithSpeakers]:
    # Both lists are complete before the join runs; their order doesn't matter
    sessions, speakers = await asyncio.gather(
        session_service.get_all(),
        speaker_service.get_all(),
    )
    return enrich_sessions(sessions, speakers)
