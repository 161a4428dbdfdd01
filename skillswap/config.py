import logging
import os
from pathlib import Path
from dotenv import load_dotenv

root = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=root / ".env")


def _build_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    db_host = os.getenv("DB_HOST", "127.0.0.1")
    db_port = os.getenv("DB_PORT", "5432")
    db_user = os.getenv("DB_USER", "postgres")
    db_pass = os.getenv("DB_PASS", "postgres")
    db_name = os.getenv("DB_NAME", "skillswap")
    return f"postgresql+asyncpg://{db_user}:{db_pass}@{db_host}:{db_port}/{db_name}"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = _build_database_url()
SQL_ECHO = _as_bool(os.getenv("SQL_ECHO", "false"))

SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME_JWT_SECRET")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

KAFKA_ENABLED = _as_bool(os.getenv("KAFKA_ENABLED", "false"))
KAFKA_BROKER_URL = os.getenv("KAFKA_BROKER_URL", "localhost:9092")

USER_SERVICE_URL = os.getenv("USER_SERVICE_URL", "http://localhost:8001")
COURSE_SERVICE_URL = os.getenv("COURSE_SERVICE_URL", "http://localhost:8002")
PROGRESS_SERVICE_URL = os.getenv("PROGRESS_SERVICE_URL", "http://localhost:8003")
MATCH_SERVICE_URL = os.getenv("MATCH_SERVICE_URL", "http://localhost:8004")
CHAT_SERVICE_URL = os.getenv("CHAT_SERVICE_URL", "http://localhost:8005")


def setup_logging():
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def get_cors_settings():
    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return {
        "allow_origins": [o.strip() for o in origins.split(",") if o.strip()],
        "allow_credentials": True,
        "allow_methods": ["*"],
        "allow_headers": ["*"],
    }
