from __future__ import annotations

import secrets
from collections.abc import Mapping

from flask import Flask
from flask_cors import CORS
from sqlalchemy import event

from .config import Config
from .errors import register_error_handlers
from .extensions import db
from .logging_config import setup_logging
from .routes import register_routes


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)

    if isinstance(config_object, Mapping):
        app.config.from_mapping(config_object)
    elif config_object is not None:
        app.config.from_object(config_object)
    app.config.from_envvar("APP_SETTINGS", silent=True)

    setup_logging(app.config.get("LOG_LEVEL", "INFO"))

    if not app.config.get("SECRET_KEY"):
        # Tokens signed with this key stop validating when the process restarts.
        app.config["SECRET_KEY"] = secrets.token_urlsafe(32)
        app.logger.warning("SECRET_KEY is not configured; using a random per-process signing key")

    db.init_app(app)

    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite"):
        with app.app_context():
            event.listen(db.engine, "connect", _enable_sqlite_foreign_keys)

    CORS(app,
         origins=app.config.get("CORS_ORIGINS", ["*"]),
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )

    register_error_handlers(app)
    register_routes(app)

    return app
