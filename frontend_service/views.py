"""Page state for the public site and the admin console.

Each view owns the state of one page for as long as it is mounted and
fetches what it needs itself. Results of requests that finish after the
view was unmounted are thrown away.
"""
import asyncio
import enum
import inspect
import logging
from dataclasses import dataclass, field, asdict
from typing import Awaitable, Callable, Optional, Union

from frontend_service.api import ApiError, Unauthorized, error_message
from frontend_service.config import COUNT_POLL_INTERVAL, SUCCESS_DISMISS_SECONDS
from frontend_service.enrichment import fetch_sessions_with_speakers
from frontend_service.models import (
    Attendee,
    AttendeeCreate,
    DesignationCount,
    Session,
    SessionCreate,
    SessionUpdate,
    SessionWithSpeakers,
    Speaker,
    SpeakerCreate,
    SpeakerUpdate,
)
from frontend_service.services import (
    AdminService,
    AttendeeService,
    SessionService,
    SpeakerService,
)

logger = logging.getLogger(__name__)

DESIGNATIONS = [
    "Software Engineer",
    "Senior Software Engineer",
    "Engineering Manager",
    "Product Manager",
    "Data Scientist",
    "ML Engineer",
    "DevOps Engineer",
    "QA Engineer",
    "Student",
    "Other",
]

CountListener = Callable[[int], Union[None, Awaitable[None]]]


class ViewState:

    def __init__(self):
        self.generation = 0
        self.mounted = True

    def unmount(self):
        self.mounted = False
        self.generation += 1

    def is_current(self, generation: int) -> bool:
        return self.mounted and generation == self.generation


class CountPoller:
    """Re-fetch the attendee count every ``interval`` seconds.

    Each tick launches its own request without waiting for the previous
    one. Counts that arrive after ``stop()`` are dropped.
    """

    def __init__(self, attendee_service: AttendeeService, on_count: CountListener,
                 interval: float = COUNT_POLL_INTERVAL):
        self.attendee_service = attendee_service
        self.on_count = on_count
        self.interval = interval
        self._generation = 0
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start(self):
        if self._timer is None:
            self._timer = asyncio.create_task(self._tick(self._generation))

    def stop(self):
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def refresh(self):
        """Fetch once right now, outside the timer."""
        await self.poll(self._generation)

    async def _tick(self, generation: int):
        while True:
            await asyncio.sleep(self.interval)
            task = asyncio.create_task(self.poll(generation))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

    async def poll(self, generation: int):
        try:
            count = await self.attendee_service.get_count()
        except ApiError as e:
            logger.error("Error fetching attendee count: %s", e)
            return

        if generation != self._generation:
            return

        try:
            result = self.on_count(count)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Count listener failed, stopping poller")
            self.stop()


# ---------- PUBLIC PAGE ----------

class SessionsSection(ViewState):

    def __init__(self, session_service: SessionService, speaker_service: SpeakerService):
        super().__init__()
        self.session_service = session_service
        self.speaker_service = speaker_service
        self.sessions: list[SessionWithSpeakers] = []
        self.loading = True
        self.error: Optional[str] = None

    async def load(self):
        generation = self.generation
        self.loading = True
        try:
            sessions = await fetch_sessions_with_speakers(self.session_service, self.speaker_service)
        except ApiError as e:
            logger.error("Error fetching sessions: %s", e)
            if self.is_current(generation):
                self.error = "Failed to load sessions. Please try again later."
        else:
            if self.is_current(generation):
                self.sessions = sessions
        finally:
            if self.is_current(generation):
                self.loading = False


class FormStatus(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class RegistrationForm(ViewState):
    """Registration form with the live attendee counter next to it.

    idle -> submitting -> success | failed. A failed submit keeps what
    the user typed; a successful one clears the form and shows a
    confirmation that goes away on its own.
    """

    FIELDS = ("name", "email", "designation")

    def __init__(
        self,
        attendee_service: AttendeeService,
        dismiss_after: float = SUCCESS_DISMISS_SECONDS,
        poll_interval: float = COUNT_POLL_INTERVAL
    ):
        super().__init__()
        self.attendee_service = attendee_service
        self.dismiss_after = dismiss_after
        self.poll_interval = poll_interval

        self.name = ""
        self.email = ""
        self.designation = ""
        self.status = FormStatus.IDLE
        self.error: Optional[str] = None
        self.show_success = False
        self.attendee_count = 0
        self.count_loading = True

        self._poller: Optional[CountPoller] = None
        self._dismiss_timer: Optional[asyncio.TimerHandle] = None

    @property
    def values(self) -> dict:
        return {f: getattr(self, f) for f in self.FIELDS}

    def update(self, **values):
        for key, value in values.items():
            if key not in self.FIELDS:
                raise ValueError(f"Unknown registration field: {key}")
            setattr(self, key, value)

    def reset(self):
        self.update(name="", email="", designation="")

    async def mount(self, poll: bool = True):
        await self.refresh_count()
        if poll and self.mounted:
            self._poller = CountPoller(self.attendee_service, self._set_count, self.poll_interval)
            self._poller.start()

    def unmount(self):
        super().unmount()
        if self._poller is not None:
            self._poller.stop()
            self._poller = None
        self._cancel_dismiss()

    def _set_count(self, count: int):
        self.attendee_count = count

    async def refresh_count(self):
        generation = self.generation
        try:
            count = await self.attendee_service.get_count()
        except ApiError as e:
            logger.error("Error fetching attendee count: %s", e)
        else:
            if self.is_current(generation):
                self.attendee_count = count
        finally:
            if self.is_current(generation):
                self.count_loading = False

    async def submit(self) -> bool:
        self.error = None
        if not all(v.strip() for v in self.values.values()):
            self.status = FormStatus.FAILED
            self.error = "Please fill in all fields."
            return False

        generation = self.generation
        self.status = FormStatus.SUBMITTING
        try:
            await self.attendee_service.create(AttendeeCreate(**self.values))
        except ApiError as e:
            if self.is_current(generation):
                self.status = FormStatus.FAILED
                self.error = error_message(e, "Registration failed. Please try again.")
            return False

        if not self.is_current(generation):
            return True

        # Ask the server rather than adding one: others may have registered too
        await self.refresh_count()
        self.reset()
        self.status = FormStatus.SUCCESS
        self.show_success = True
        self._schedule_dismiss()
        return True

    def dismiss_success(self):
        self._cancel_dismiss()
        self.show_success = False
        if self.status == FormStatus.SUCCESS:
            self.status = FormStatus.IDLE

    def _schedule_dismiss(self):
        self._cancel_dismiss()
        loop = asyncio.get_running_loop()
        self._dismiss_timer = loop.call_later(self.dismiss_after, self.dismiss_success)

    def _cancel_dismiss(self):
        if self._dismiss_timer is not None:
            self._dismiss_timer.cancel()
            self._dismiss_timer = None


class LoginForm:

    def __init__(self, admin_service: AdminService):
        self.admin_service = admin_service
        self.password = ""
        self.error: Optional[str] = None
        self.loading = False

    async def submit(self, password: Optional[str] = None) -> bool:
        if password is not None:
            self.password = password
        self.error = None
        self.loading = True
        try:
            if await self.admin_service.login(self.password):
                return True
            self.error = "Invalid password"
            return False
        except ApiError as e:
            self.error = error_message(e, "Login failed. Please try again.")
            return False
        finally:
            self.loading = False


# ---------- ADMIN CONSOLE ----------

@dataclass
class SpeakerFormData:
    name: str = ""
    bio: str = ""
    avatar: str = ""
    linkedin: str = ""
    twitter: str = ""

    @classmethod
    def from_speaker(cls, speaker: Speaker) -> "SpeakerFormData":
        return cls(
            name=speaker.name,
            bio=speaker.bio,
            avatar=speaker.avatar or "",
            linkedin=speaker.linkedin or "",
            twitter=speaker.twitter or "",
        )

    def _links(self) -> dict:
        return {k: v for k, v in asdict(self).items() if k in ("avatar", "linkedin", "twitter") and v}

    def to_create(self) -> SpeakerCreate:
        return SpeakerCreate(name=self.name, bio=self.bio, **self._links())

    def to_update(self) -> SpeakerUpdate:
        # Blank optional fields are left out, not cleared
        return SpeakerUpdate(name=self.name, bio=self.bio, **self._links())


@dataclass
class SessionFormData:
    title: str = ""
    description: str = ""
    time: str = ""
    speakers: list[str] = field(default_factory=list)

    @classmethod
    def from_session(cls, session: Session) -> "SessionFormData":
        return cls(
            title=session.title or "",
            description=session.description or "",
            time=session.time or "",
            speakers=list(session.speakers or []),
        )

    def to_create(self) -> SessionCreate:
        return SessionCreate(**asdict(self))

    def to_update(self) -> SessionUpdate:
        return SessionUpdate(**asdict(self))


class AdminTab(str, enum.Enum):
    ATTENDEES = "attendees"
    SPEAKERS = "speakers"
    SESSIONS = "sessions"


class AdminPanel(ViewState):
    """CRUD console over attendees, speakers and sessions.

    Every successful change is followed by a full re-fetch of all four
    collections (stats included) instead of patching local copies.
    """

    def __init__(
        self,
        admin_service: AdminService,
        attendee_service: AttendeeService,
        speaker_service: SpeakerService,
        session_service: SessionService
    ):
        super().__init__()
        self.admin_service = admin_service
        self.attendee_service = attendee_service
        self.speaker_service = speaker_service
        self.session_service = session_service

        self.active_tab = AdminTab.ATTENDEES
        self.attendees: list[Attendee] = []
        self.speakers: list[Speaker] = []
        self.sessions: list[Session] = []
        self.stats: list[DesignationCount] = []
        self.loading = True
        self.alert: Optional[str] = None
        self.redirect_to: Optional[str] = None

        self.editing_speaker: Optional[Speaker] = None
        self.editing_session: Optional[Session] = None
        self.speaker_form = SpeakerFormData()
        self.session_form = SessionFormData()

    @property
    def total_attendees(self) -> int:
        return len(self.attendees)

    def _clear(self):
        self.attendees = []
        self.speakers = []
        self.sessions = []
        self.stats = []

    def _log_out(self):
        self._clear()
        self.loading = False
        self.redirect_to = "/"

    async def load(self):
        """Check the admin session first, then fetch everything."""
        try:
            authenticated = await self.admin_service.check_session()
        except ApiError as e:
            logger.error("Error checking admin session: %s", e)
            self._clear()
            self.loading = False
            self.alert = "Failed to load admin data"
            return

        if not authenticated:
            self._log_out()
            return
        await self.fetch_all()

    async def fetch_all(self):
        generation = self.generation
        self.loading = True
        try:
            attendees, speakers, sessions, stats = await asyncio.gather(
                self.attendee_service.get_all(),
                self.speaker_service.get_all(),
                self.session_service.get_all(),
                self.admin_service.get_stats(),
            )
        except Unauthorized:
            if self.is_current(generation):
                self._log_out()
            return
        except ApiError as e:
            logger.error("Error fetching data: %s", e)
            if self.is_current(generation):
                self._clear()
                self.alert = "Failed to load admin data"
        else:
            if self.is_current(generation):
                self.attendees = attendees
                self.speakers = speakers
                self.sessions = sessions
                self.stats = stats.designation_breakdown
        finally:
            if self.is_current(generation):
                self.loading = False

    async def logout(self):
        try:
            await self.admin_service.logout()
        except ApiError as e:
            logger.error("Logout error: %s", e)
        self._log_out()

    async def _mutate(self, action: Awaitable, failure: str,
                      on_success: Optional[Callable[[], None]] = None) -> bool:
        self.alert = None
        try:
            await action
        except Unauthorized:
            self._log_out()
            return False
        except ApiError as e:
            logger.error("%s: %s", failure, e)
            self.alert = failure
            return False

        if on_success is not None:
            on_success()
        await self.fetch_all()
        return True

    # ---------- attendees ----------
    async def delete_attendee(self, attendee_id: str) -> bool:
        return await self._mutate(
            self.attendee_service.delete(attendee_id), "Failed to delete attendee"
        )

    # ---------- speakers ----------
    def edit_speaker(self, speaker: Speaker):
        self.active_tab = AdminTab.SPEAKERS
        self.editing_speaker = speaker
        self.speaker_form = SpeakerFormData.from_speaker(speaker)

    def edit_speaker_by_id(self, speaker_id: str) -> bool:
        speaker = next((s for s in self.speakers if s.id == speaker_id), None)
        if speaker is None:
            return False
        self.edit_speaker(speaker)
        return True

    def reset_speaker_form(self):
        self.editing_speaker = None
        self.speaker_form = SpeakerFormData()

    async def submit_speaker(self) -> bool:
        if self.editing_speaker is not None:
            action = self.speaker_service.update(self.editing_speaker.id, self.speaker_form.to_update())
        else:
            action = self.speaker_service.create(self.speaker_form.to_create())
        return await self._mutate(action, "Failed to save speaker", self.reset_speaker_form)

    async def delete_speaker(self, speaker_id: str) -> bool:
        return await self._mutate(
            self.speaker_service.delete(speaker_id), "Failed to delete speaker"
        )

    # ---------- sessions ----------
    def edit_session(self, session: Session):
        self.active_tab = AdminTab.SESSIONS
        self.editing_session = session
        self.session_form = SessionFormData.from_session(session)

    def edit_session_by_id(self, session_id: str) -> bool:
        session = next((s for s in self.sessions if s.id == session_id), None)
        if session is None:
            return False
        self.edit_session(session)
        return True

    def reset_session_form(self):
        self.editing_session = None
        self.session_form = SessionFormData()

    async def submit_session(self) -> bool:
        if self.editing_session is not None:
            action = self.session_service.update(self.editing_session.id, self.session_form.to_update())
        else:
            action = self.session_service.create(self.session_form.to_create())
        return await self._mutate(action, "Failed to save session", self.reset_session_form)

    async def delete_session(self, session_id: str) -> bool:
        return await self._mutate(
            self.session_service.delete(session_id), "Failed to delete session"
        )
