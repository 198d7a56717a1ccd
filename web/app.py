"""Flask application factory for the portal JSON API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from flask import Flask
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from services import DiscordOAuthClient, StaffDirectory, WebhookNotifier
from storage import MemoryStorage
from web.auth import init_login_manager
from web.config_middleware import (
    configure_app,
    setup_error_handlers,
    setup_metrics,
    setup_security_headers,
)
from web.routes import register_routes

if TYPE_CHECKING:
    from config import Config


def create_app(
    config: Config,
    testing: bool = False,
    storage: Optional[MemoryStorage] = None,
    notifier: Optional[WebhookNotifier] = None,
    oauth_client: Optional[DiscordOAuthClient] = None,
) -> Flask:
    """Create and configure Flask application.

    Collaborators default to the real implementations built from ``config``;
    tests pass fakes instead.

    Args:
        config: Application configuration
        testing: Whether running in testing mode
        storage: Entity store shared by every request
        notifier: Webhook notifier for staff-facing events
        oauth_client: Discord OAuth client for the login flow

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    app.json.sort_keys = False

    configure_app(app, config, testing)

    app.config["STORAGE"] = storage if storage is not None else MemoryStorage()
    app.config["NOTIFIER"] = notifier if notifier is not None else WebhookNotifier.from_config(config)
    app.config["OAUTH_CLIENT"] = oauth_client if oauth_client is not None else DiscordOAuthClient.from_config(config)
    app.config["STAFF_DIRECTORY"] = StaffDirectory(config.staff_user_ids)
    app.config["GUILD_INVITE"] = config.guild_invite

    setup_security_headers(app)
    setup_metrics(app)
    setup_error_handlers(app)

    init_login_manager(app, config.admin_password)

    register_routes(app)
    _setup_routes(app)

    return app


def _setup_routes(app: Flask) -> None:
    """Setup routes that live outside the API blueprints."""
    @app.route('/metrics')
    def metrics():
        """Expose Prometheus metrics."""
        data = generate_latest()
        return data, 200, {'Content-Type': CONTENT_TYPE_LATEST}
