import os

from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080/api")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10.0"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "admin-session")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", "86400"))

# Seconds
COUNT_POLL_INTERVAL = float(os.getenv("COUNT_POLL_INTERVAL", "5"))
SUCCESS_DISMISS_SECONDS = float(os.getenv("SUCCESS_DISMISS_SECONDS", "3"))

EVENT_TITLE = os.getenv("EVENT_TITLE", "AI Workshop")
EVENT_TAGLINE = os.getenv("EVENT_TAGLINE", "Join the AI Workshop and be part of the innovation")
EVENT_DATE = os.getenv("EVENT_DATE", "")
EVENT_VENUE = os.getenv("EVENT_VENUE", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
