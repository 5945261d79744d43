"""
Base settings for the ECS Connect offline sync project.
Use: DJANGO_SETTINGS_MODULE=ecs_project.settings

- SQLite database next to the project (survives restarts)
- ECS Connect API endpoint and timeouts from env
- Celery broker from env; eager mode unless a broker is configured
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


SECRET_KEY = os.environ.get("SECRET_KEY", "dev-only-insecure-key")
DEBUG = _env_bool("DEBUG", "true")
ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "offline",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

ROOT_URLCONF = "ecs_project.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

ASGI_APPLICATION = "ecs_project.asgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "ecs-offline",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_TZ = True
STATIC_URL = "static/"

# ECS Connect API (the remote completion endpoint)
ECS_API_BASE_URL = os.environ.get("ECS_API_BASE_URL", "http://localhost:5000").rstrip("/")
ECS_API_TOKEN = os.environ.get("ECS_API_TOKEN", "")
ECS_API_TIMEOUT = int(os.environ.get("ECS_API_TIMEOUT", "30") or "30")
ECS_HEALTH_PATH = os.environ.get("ECS_HEALTH_PATH", "/api/health")
ECS_PROBE_TIMEOUT = int(os.environ.get("ECS_PROBE_TIMEOUT", "5") or "5")

# Offline queue auto-sync (connectivity trigger + startup drain)
OFFLINE_AUTO_SYNC = _env_bool("OFFLINE_AUTO_SYNC")
OFFLINE_POLL_INTERVAL = int(os.environ.get("OFFLINE_POLL_INTERVAL", "30") or "30")

# Celery
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "")
CELERY_RESULT_BACKEND = os.environ.get("CELERY_RESULT_BACKEND", "")
CELERY_TASK_ALWAYS_EAGER = not CELERY_BROKER_URL
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BEAT_SCHEDULE = {
    "offline-poll-connectivity": {
        "task": "offline.poll_connectivity_task",
        "schedule": float(OFFLINE_POLL_INTERVAL),
    },
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
        "json": {
            "()": "offline.logging_formatter.JSONFormatter",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "offline": {
            "handlers": ["console"],
            "level": os.environ.get("OFFLINE_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
