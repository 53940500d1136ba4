from .base import *  # noqa: F403
from .base import LOGGING
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="xPq6uKbH1nV0Yd3sWl9ZcR2aJfT8mEoG4iLtN7hB5yQwXeUvSgDkAzCrIpOjMn0",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# django-cors-headers
# ------------------------------------------------------------------------------
CORS_ALLOWED_ORIGINS = env.list(
    "CORS_ORIGINS",
    default=["http://localhost:3000", "http://127.0.0.1:3000"],
)

# LOGGING
# ------------------------------------------------------------------------------
LOGGING["loggers"]["linkup"]["level"] = env("DJANGO_LOG_LEVEL", default="DEBUG")
# Your stuff...
# ------------------------------------------------------------------------------
