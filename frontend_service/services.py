import logging
from typing import Any, Generic, Type, TypeVar

from pydantic import BaseModel, ValidationError

from frontend_service.api import ApiClient, ApiError, Unauthorized
from frontend_service.models import (
    Attendee,
    AttendeeCreate,
    Speaker,
    Session,
    AdminStats,
    DesignationCount,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def parse_list(payload: Any, model: Type[T]) -> list[T]:
    """Turn a list payload into models; anything else becomes []."""
    if not isinstance(payload, list):
        if payload is not None:
            logger.warning("Expected a list of %s, got %s", model.__name__, type(payload).__name__)
        return []

    items = []
    for raw in payload:
        try:
            items.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping malformed %s: %s", model.__name__, e)
    return items


def parse_one(payload: Any, model: Type[T]) -> T:
    """Parse a single-record response; a bad shape counts as a failed call."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.warning("Unexpected %s response: %s", model.__name__, e)
        raise ApiError() from e


class ResourceService(Generic[T]):
    """getAll / create / delete over one REST collection."""

    path = ""
    model: Type[T]

    def __init__(self, api: ApiClient):
        self.api = api

    async def get_all(self) -> list[T]:
        return parse_list(await self.api.get(self.path), self.model)

    async def create(self, entity: BaseModel) -> T:
        data = await self.api.post(self.path, json=entity.model_dump(mode="json"))
        return parse_one(data, self.model)

    async def delete(self, entity_id: str) -> None:
        await self.api.delete(f"{self.path}/{entity_id}")


class EditableResourceService(ResourceService[T]):

    async def update(self, entity_id: str, changes: BaseModel) -> T:
        # Only explicitly set fields go out, so the rest stay as they are
        data = await self.api.put(
            f"{self.path}/{entity_id}",
            json=changes.model_dump(mode="json", exclude_unset=True)
        )
        return parse_one(data, self.model)


class AttendeeService(ResourceService[Attendee]):
    path = "/attendees"
    model = Attendee

    async def register(self, attendee: AttendeeCreate) -> Attendee:
        return await self.create(attendee)

    async def get_count(self) -> int:
        data = await self.api.get("/attendees/count")
        count = data.get("count") if isinstance(data, dict) else None
        return count if isinstance(count, int) else 0


class SpeakerService(EditableResourceService[Speaker]):
    path = "/speakers"
    model = Speaker


class SessionService(EditableResourceService[Session]):
    path = "/sessions"
    model = Session


class AdminService:

    def __init__(self, api: ApiClient):
        self.api = api

    async def login(self, password: str) -> bool:
        data = await self.api.post("/admin/login", json={"password": password})
        return isinstance(data, dict) and data.get("success") is True

    async def logout(self) -> None:
        await self.api.post("/admin/logout")

    async def check_session(self) -> bool:
        try:
            await self.api.get("/admin/session")
        except Unauthorized:
            return False
        return True

    async def get_stats(self) -> AdminStats:
        data = await self.api.get("/admin/stats")
        breakdown = data.get("designationBreakdown") if isinstance(data, dict) else None
        return AdminStats(designation_breakdown=parse_list(breakdown, DesignationCount))
