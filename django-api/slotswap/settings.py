"""Django settings for the slotswap project.

Values come from SLOTSWAP_* environment variables with development defaults.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.environ.get("SLOTSWAP_SECRET_KEY", "dev-insecure-slotswap-key")
DEBUG = env_bool("SLOTSWAP_DEBUG", default=False)
ALLOWED_HOSTS = os.environ.get(
    "SLOTSWAP_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver"
).split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "swaps.apps.SwapsConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "slotswap.urls"
WSGI_APPLICATION = "slotswap.wsgi.application"

DB_ENGINE = os.environ.get("SLOTSWAP_DB_ENGINE", "sqlite3")

if DB_ENGINE == "postgresql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("SLOTSWAP_DB_NAME", "slotswap"),
            "USER": os.environ.get("SLOTSWAP_DB_USER", "slotswap"),
            "PASSWORD": os.environ.get("SLOTSWAP_DB_PASSWORD", ""),
            "HOST": os.environ.get("SLOTSWAP_DB_HOST", "localhost"),
            "PORT": os.environ.get("SLOTSWAP_DB_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.environ.get("SLOTSWAP_DB_NAME", str(BASE_DIR / "db.sqlite3")),
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True
TIME_ZONE = "UTC"
LANGUAGE_CODE = "en-us"
USE_I18N = False

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "UNAUTHENTICATED_USER": None,
    "TEST_REQUEST_DEFAULT_FORMAT": "json",
    "EXCEPTION_HANDLER": "swaps.handlers.errors.domain_exception_handler",
}

SWAPS = {
    "MAX_ATTEMPTS": int(os.environ.get("SLOTSWAP_MAX_ATTEMPTS", "3")),
    "RETRY_BACKOFF_SECONDS": float(
        os.environ.get("SLOTSWAP_RETRY_BACKOFF_SECONDS", "0.05")
    ),
    "LOCK_TIMEOUT_MS": int(os.environ.get("SLOTSWAP_LOCK_TIMEOUT_MS", "2000")),
}

LOG_LEVEL = os.environ.get("SLOTSWAP_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
        "consistency": {
            "format": (
                "%(asctime)s %(levelname)s CONSISTENCY-FAULT %(name)s %(message)s"
                " request=%(swap_request_id)s requestor=%(requestor_event_id)s"
                " target=%(target_event_id)s"
            ),
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
        "consistency": {
            "class": "logging.StreamHandler",
            "formatter": "consistency",
        },
    },
    "loggers": {
        "swaps": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "swaps.consistency": {
            "handlers": ["consistency"],
            "level": "WARNING",
            "propagate": False,
        },
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    },
}
