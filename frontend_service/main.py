from fastapi import FastAPI
import logging

from frontend_service.config import LOG_LEVEL
from frontend_service.public import router as public_router
from frontend_service.admin import router as admin_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(title="Event Frontend")

# Include routers
app.include_router(public_router)
app.include_router(admin_router)
