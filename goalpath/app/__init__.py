"""Application factory and app-wide configuration."""

import os
from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from goalpath.app.api.routes import api_bp
from goalpath.core.view_window import DEFAULT_FORWARD_YEARS
from goalpath.logging_config import setup_logging

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def _env_origins() -> list[str]:
    raw = os.environ.get("GOALPATH_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or list(DEFAULT_CORS_ORIGINS)


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app instance."""
    setup_logging()
    app = Flask(__name__)
    app.config.update(
        CORS_ORIGINS=_env_origins(),
        DEFAULT_FORWARD_YEARS=int(os.environ.get("GOALPATH_FORWARD_YEARS", DEFAULT_FORWARD_YEARS)),
    )
    if overrides:
        app.config.update(overrides)

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
