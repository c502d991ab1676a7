from __future__ import annotations

import logging
import sys
from pathlib import Path
from threading import RLock

from flask import Flask, send_from_directory
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.models import GameSettings
from .game.registry import RoomRegistry
from .game.scheduler import SocketIOTaskScheduler, TaskScheduler
from .realtime.broadcast import SocketIOBroadcaster
from .realtime.handlers import register_socketio_handlers
from .realtime.session import SessionStore


STATIC_DIR = Path(__file__).resolve().parent / "static"


def _pick_async_mode(configured: str) -> str:
    if configured:
        return configured
    # Default choice:
    # - Windows: threading (eventlet has known compatibility issues on newer Python)
    # - Python >= 3.13: threading (safer default)
    # - Otherwise: eventlet
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(config_class=Config, scheduler: TaskScheduler | None = None) -> tuple[Flask, SocketIO]:
    app = Flask(
        __name__,
        static_folder=str(STATIC_DIR),
        static_url_path="/static",
    )
    app.config.from_object(config_class)
    logging.getLogger("doodle").setLevel(str(app.config.get("LOG_LEVEL", "INFO")).upper())

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/static/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=_pick_async_mode(app.config.get("SOCKETIO_ASYNC_MODE", "")),
    )

    lock = RLock()
    registry = RoomRegistry(
        SocketIOBroadcaster(socketio),
        scheduler or SocketIOTaskScheduler(socketio, lock),
        settings=GameSettings.from_config(app.config),
        lock=lock,
    )
    sessions = SessionStore()
    app.extensions["doodle.registry"] = registry
    app.extensions["doodle.sessions"] = sessions

    register_socketio_handlers(socketio, registry, sessions)

    @app.get("/")
    def index():
        return send_from_directory(STATIC_DIR, "index.html")

    app.logger.debug("doodle app created (async_mode=%s)", socketio.async_mode)
    return app, socketio
