from pathlib import Path

from fastapi.requests import HTTPConnection
from fastapi.templating import Jinja2Templates

from frontend_service.api import ApiClient
from frontend_service.config import SESSION_COOKIE_NAME

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

async def get_api(conn: HTTPConnection):
    """One API client per request, carrying the browser's admin cookie"""
    async with ApiClient(token=conn.cookies.get(SESSION_COOKIE_NAME)) as api:
        yield api
