"""Application configuration read from the environment.

Values are resolved once, when the module is imported, so environment
variables (or a ``.env`` file loaded by ``run.py``) must be in place
before the application factory runs.
"""
from __future__ import annotations

import os


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL", "sqlite:///salon_pos.db")
    # Some hosting providers still hand out the pre-1.4 SQLAlchemy scheme.
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Config:
    """Default settings for a deployed instance."""

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Left unset when the environment does not provide one; the factory
    # then generates a per-process key and logs a warning.
    SECRET_KEY = os.environ.get("SECRET_KEY") or None

    TOKEN_MAX_AGE = int(os.environ.get("TOKEN_MAX_AGE", 3600))
    PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "scrypt")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SECRET_KEY = "testing-secret-key"
    # Low iteration count keeps the suite fast; never use in production.
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
