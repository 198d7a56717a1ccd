"""Health check, data reset and runtime settings."""

from __future__ import annotations

from flask import Blueprint, jsonify

from core import get_logger
from core.exceptions import ValidationError
from utils.performance import PerformanceMonitor
from web.routes.common import get_storage, json_body

logger = get_logger(__name__)

health_bp = Blueprint("health", __name__)
system_bp = Blueprint("system", __name__, url_prefix="/api")
monitor = PerformanceMonitor()


@health_bp.route("/health")
def health_check():
    stats = get_storage().stats()
    monitor.record_collection_sizes(stats)
    data = {
        "status": "ok",
        "collections": stats,
        "host": monitor.gather_host_metrics(),
    }
    return jsonify(data)


@system_bp.route("/reset", methods=["POST"])
def reset():
    get_storage().clear()
    logger.warning("All portal data cleared on request")
    return jsonify({"success": True, "message": "All data cleared"})


@system_bp.route("/settings/ai", methods=["GET"])
def get_ai_setting():
    return jsonify({"enabled": get_storage().get_ai_enabled()})


@system_bp.route("/settings/ai", methods=["PUT"])
def set_ai_setting():
    enabled = json_body().get("enabled")
    if not isinstance(enabled, bool):
        raise ValidationError("'enabled' must be a boolean")
    get_storage().set_ai_enabled(enabled)
    return jsonify({"enabled": enabled})
