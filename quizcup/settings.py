"""
Django settings for the quizcup project.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("QUIZCUP_SECRET_KEY", "quizcup-development-key")

DEBUG = os.environ.get("QUIZCUP_DEBUG", "1") == "1"

ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "reversion",
    "quizcup.tournament_core",
    "quizcup.tournament",
]

MIDDLEWARE = [
    "django.middleware.common.CommonMiddleware",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("QUIZCUP_DB_NAME", str(BASE_DIR / "quizcup.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True
TIME_ZONE = "UTC"
LANGUAGE_CODE = "en-us"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "quizcup": {
            "handlers": ["console"],
            "level": os.environ.get("QUIZCUP_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

# Tournament engine configuration
QUIZCUP_BRACKET_LAYOUT = {}
QUIZCUP_DEFAULT_MIN_TEAMS = 2
QUIZCUP_DEFAULT_MAX_TEAMS = 16
QUIZCUP_AUTO_COMPLETE_ELIMINATION = False
