"""
With these settings, tests run faster.
"""

from .base import *  # noqa: F403
from .base import LOGGING
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="AlGzerkUv160WCFbKM8vn2qyFYWS5jX0AHND8TnRj55iqlMSPtJsUllwpba1oqOO",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["testserver", "localhost"]

# django-cors-headers
# ------------------------------------------------------------------------------
CORS_ALLOWED_ORIGINS = ["http://localhost:3000"]

# LOGGING
# ------------------------------------------------------------------------------
# Let pytest's caplog see records from project loggers.
LOGGING["loggers"]["linkup"]["propagate"] = True
LOGGING["loggers"]["linkup"]["handlers"] = []
# Your stuff...
# ------------------------------------------------------------------------------
