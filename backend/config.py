import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./cottage.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Shared admin secret accepted for every room, on top of each room's own token
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

MEDIA_DIR = os.getenv("MEDIA_DIR", "./media")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")

DEFAULT_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:4173",
]


def get_cors_origins() -> list:
    origins = list(DEFAULT_ORIGINS)
    if env_origins := os.getenv("CORS_ORIGINS"):
        origins.extend([o.strip() for o in env_origins.split(",") if o.strip()])
    return origins


def get_frontend_url() -> str:
    """Frontend URL used for share links and QR codes.

    In prod CORS_ORIGINS="https://cottage.example.app", in dev the Vite server.
    """
    cors_origins = os.getenv("CORS_ORIGINS", "").split(",")
    if cors_origins and cors_origins[0].strip():
        return cors_origins[0].strip().rstrip("/")
    return "http://localhost:5173"
