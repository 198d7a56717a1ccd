"""Flask application configuration and middleware setup."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from flask import Flask, g, jsonify, request
from prometheus_client import Counter, Histogram
from werkzeug.exceptions import HTTPException

from core import get_logger, RequestDefaults
from core.exceptions import ApplicationError

if TYPE_CHECKING:
    from config import Config

logger = get_logger(__name__)

# Prometheus metrics
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "HTTP request latency",
    ["method", "path"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_ERRORS = Counter(
    "http_request_errors_total",
    "Total number of 5xx responses",
    ["method", "path"],
)


def configure_app(app: Flask, config: Config, testing: bool = False) -> None:
    """Configure Flask application settings.

    Args:
        app: Flask application instance
        config: Application configuration
        testing: Whether running in testing mode
    """
    app.config.update(
        SECRET_KEY=config.secret_key,
        MAX_CONTENT_LENGTH=config.max_content_length,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SECURE=(config.environment != 'development' and not testing),
        SESSION_COOKIE_SAMESITE='Lax',
        TESTING=testing,
    )

    # Warn if insecure defaults detected
    if config.environment == 'production':
        if config.admin_password == "change_me":
            app.logger.warning("Insecure admin password detected in production")
        if not config.discord_client_secret:
            app.logger.warning("DISCORD_CLIENT_SECRET is not set")


def _route_label() -> str:
    return getattr(request.url_rule, 'rule', request.path)


def setup_security_headers(app: Flask) -> None:
    """Setup security headers middleware."""
    @app.after_request
    def add_security_headers(response):
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        response.headers.setdefault('X-Frame-Options', 'DENY')
        response.headers.setdefault('Referrer-Policy', 'same-origin')
        # API responses are polled; never serve them from a cache
        if request.path.startswith('/api/'):
            response.headers.setdefault('Cache-Control', 'no-store')
        return response


def setup_metrics(app: Flask) -> None:
    """Setup request timing, slow request logging and Prometheus metrics."""
    @app.before_request
    def before_metrics():
        g._metrics_start = time.perf_counter()

    @app.after_request
    def after_metrics(response):
        start = g.pop('_metrics_start', None)
        if start is None:
            return response
        duration = time.perf_counter() - start
        path = _route_label()
        REQUEST_LATENCY.labels(method=request.method, path=path).observe(duration)
        if response.status_code >= 500:
            REQUEST_ERRORS.labels(method=request.method, path=path).inc()
        if duration > RequestDefaults.SLOW_REQUEST_SECONDS:
            logger.warning(f"Slow request: {request.method} {request.path} took {duration:.2f}s")
        response.headers['X-Response-Time'] = f"{duration:.3f}s"
        return response


def setup_error_handlers(app: Flask) -> None:
    """Render every error as a JSON body of the form ``{"error": message}``."""
    @app.errorhandler(ApplicationError)
    def handle_application_error(error: ApplicationError):
        if error.status_code >= 500:
            logger.error(f"{request.method} {request.path} failed: {error.message}")
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({"error": "Internal server error"}), 500
