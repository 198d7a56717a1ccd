"""Route registration for the Flask app."""

from __future__ import annotations

from flask import Flask

from .announcements import announcements_bp
from .auth import auth_bp
from .gangs import gangs_bp
from .giveaways import giveaways_bp
from .health import health_bp, system_bp
from .notes import notes_bp, notifications_bp
from .shop import shop_bp
from .tickets import tickets_bp
from .users import users_bp


def register_routes(app: Flask) -> None:
    app.register_blueprint(tickets_bp)
    app.register_blueprint(gangs_bp)
    app.register_blueprint(giveaways_bp)
    app.register_blueprint(announcements_bp)
    app.register_blueprint(shop_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(notes_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(system_bp)
    app.register_blueprint(health_bp)
