"""
Production environment settings.
Use: DJANGO_SETTINGS_MODULE=ecs_project.settings_production

- Production DB (PostgreSQL recommended; SQLite supported)
- ECS Connect production API
- Real Celery broker, auto-sync on
- DEBUG=False, SECRET_KEY from env
- Log rotation and retention
"""

import os
from pathlib import Path

from .settings import *  # noqa: F401, F403

BASE_DIR = Path(__file__).resolve().parent.parent

# Production: never debug
DEBUG = False
SECRET_KEY = os.environ.get("SECRET_KEY")
if not SECRET_KEY:
    raise ValueError("SECRET_KEY environment variable must be set in production")
ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "").split(",")
if not ALLOWED_HOSTS or ALLOWED_HOSTS == [""]:
    raise ValueError("ALLOWED_HOSTS environment variable must be set in production")

# Database: prefer PostgreSQL if DATABASE_URL set
_db_url = os.environ.get("DATABASE_URL")
if _db_url and "postgres" in _db_url.lower():
    import dj_database_url

    DATABASES = {"default": dj_database_url.config(conn_max_age=600)}
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.environ.get("DB_PATH", str(BASE_DIR / "db_production.sqlite3")),
        }
    }

# Connectivity state is shared between the web process and the beat worker
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.filebased.FileBasedCache",
        "LOCATION": os.environ.get("CACHE_DIR", str(BASE_DIR / "cache")),
    }
}

# ECS Connect production API
ECS_API_BASE_URL = os.environ.get("ECS_API_BASE_URL", "").rstrip("/")
if not ECS_API_BASE_URL:
    raise ValueError("ECS_API_BASE_URL environment variable must be set in production")

OFFLINE_AUTO_SYNC = os.environ.get("OFFLINE_AUTO_SYNC", "true").lower() in ("1", "true", "yes")
CELERY_TASK_ALWAYS_EAGER = False

# Log retention
LOGS_DIR = Path(os.environ.get("LOGS_DIR", str(BASE_DIR / "logs")))
LOGS_DIR.mkdir(parents=True, exist_ok=True)

LOGGING["handlers"]["offline_file"] = {
    "level": "INFO",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": LOGS_DIR / "offline.log",
    "maxBytes": 10 * 1024 * 1024,  # 10 MB
    "backupCount": 30,
    "formatter": "simple",
}
LOGGING["handlers"]["offline_json_file"] = {
    "level": "INFO",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": LOGS_DIR / "offline_json.log",
    "maxBytes": 10 * 1024 * 1024,
    "backupCount": 30,
    "formatter": "json",
}
LOGGING["handlers"]["offline_error_file"] = {
    "level": "ERROR",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": LOGS_DIR / "offline_error.log",
    "maxBytes": 5 * 1024 * 1024,
    "backupCount": 90,  # 90 days for errors
    "formatter": "simple",
}
LOGGING["loggers"]["offline"]["handlers"] = [
    "console",
    "offline_file",
    "offline_json_file",
    "offline_error_file",
]
