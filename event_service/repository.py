import logging
from typing import Optional

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from event_service.db import Attendee, Speaker, EventSession, new_id, utcnow

logger = logging.getLogger(__name__)


class Repository:
    """Storage operations behind the REST handlers.

    Routes only talk to this class, so tests can swap in any object with
    the same methods.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- ATTENDEES ----------
    async def create_attendee(self, name: str, email: str, designation: str) -> Attendee:
        attendee = Attendee(
            id=new_id(),
            name=name,
            email=email,
            designation=designation,
            created_at=utcnow()
        )
        self.db.add(attendee)
        await self.db.commit()
        logger.info("Registered attendee %s", attendee.id)
        return attendee

    async def get_all_attendees(self) -> list[Attendee]:
        result = await self.db.execute(
            select(Attendee).order_by(Attendee.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_attendee_count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Attendee))
        return result.scalar_one()

    async def delete_attendee(self, attendee_id: str) -> None:
        await self.db.execute(delete(Attendee).where(Attendee.id == attendee_id))
        await self.db.commit()
        logger.info("Deleted attendee %s", attendee_id)

    # ---------- SPEAKERS ----------
    async def create_speaker(self, **fields) -> Speaker:
        speaker = Speaker(id=new_id(), **fields)
        self.db.add(speaker)
        await self.db.commit()
        logger.info("Created speaker %s", speaker.id)
        return speaker

    async def get_all_speakers(self) -> list[Speaker]:
        result = await self.db.execute(select(Speaker).order_by(Speaker.name))
        return list(result.scalars().all())

    async def update_speaker(self, speaker_id: str, fields: dict) -> Optional[Speaker]:
        speaker = await self.db.get(Speaker, speaker_id)
        if speaker is None:
            return None
        for key, value in fields.items():
            setattr(speaker, key, value)
        await self.db.commit()
        logger.info("Updated speaker %s (%s)", speaker_id, ", ".join(fields) or "no fields")
        return speaker

    async def delete_speaker(self, speaker_id: str) -> None:
        await self.db.execute(delete(Speaker).where(Speaker.id == speaker_id))
        await self.db.commit()
        logger.info("Deleted speaker %s", speaker_id)

    # ---------- SESSIONS ----------
    async def create_session(self, **fields) -> EventSession:
        session = EventSession(id=new_id(), **fields)
        self.db.add(session)
        await self.db.commit()
        logger.info("Created session %s", session.id)
        return session

    async def get_all_sessions(self) -> list[EventSession]:
        result = await self.db.execute(select(EventSession).order_by(EventSession.time))
        return list(result.scalars().all())

    async def update_session(self, session_id: str, fields: dict) -> Optional[EventSession]:
        session = await self.db.get(EventSession, session_id)
        if session is None:
            return None
        for key, value in fields.items():
            setattr(session, key, value)
        await self.db.commit()
        logger.info("Updated session %s (%s)", session_id, ", ".join(fields) or "no fields")
        return session

    async def delete_session(self, session_id: str) -> None:
        await self.db.execute(delete(EventSession).where(EventSession.id == session_id))
        await self.db.commit()
        logger.info("Deleted session %s", session_id)

    # ---------- STATS ----------
    async def get_designation_breakdown(self) -> list[dict]:
        count = func.count(Attendee.id).label("count")
        result = await self.db.execute(
            select(Attendee.designation, count)
            .group_by(Attendee.designation)
            .order_by(count.desc(), Attendee.designation)
        )
        return [
            {"designation": designation, "count": n}
            for designation, n in result.all()
        ]
