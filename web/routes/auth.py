"""Login endpoints: Discord OAuth for members, shared password for staff."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_user, logout_user

from core import get_logger, WebhookEvent
from core.exceptions import OAuthError
from services.async_runner import run_coroutine_sync
from utils.validators import require_fields, require_string
from web.auth import AdminUser, validate_password
from web.routes.common import emit, json_body

logger = get_logger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


@auth_bp.route("/discord/auth", methods=["POST"])
def discord_auth():
    payload = json_body()
    require_fields(payload, ("code",), "Authorization code is required")
    code = require_string(payload, "code")
    redirect_uri = payload.get("redirectUri") or ""

    client = current_app.config["OAUTH_CLIENT"]
    identity = run_coroutine_sync(client.authenticate(code, redirect_uri))

    if not identity.in_guild:
        invite = current_app.config.get("GUILD_INVITE", "")
        logger.info(f"Login refused for {identity.user_id}: not a guild member")
        raise OAuthError(
            f"You must be a member of the Discord server to access this site. Join at: {invite}",
            status_code=403,
        )

    is_staff = current_app.config["STAFF_DIRECTORY"].is_staff(identity.user_id)
    logger.info(f"{identity.username} ({identity.user_id}) logged in, staff={is_staff}")

    response = jsonify({
        "username": identity.username,
        "token": identity.access_token,
        "isStaff": is_staff,
        "userId": identity.user_id,
        "discordId": identity.user_id,
    })
    emit(WebhookEvent.USER_LOGIN, {
        "username": identity.username,
        "userId": identity.user_id,
        "isStaff": is_staff,
    })
    return response


@auth_bp.route("/verify-staff", methods=["POST"])
def verify_staff():
    payload = json_body()
    require_fields(payload, ("userId",), "User ID is required")
    is_staff = current_app.config["STAFF_DIRECTORY"].is_staff(payload["userId"])
    return jsonify({"isStaff": is_staff})


@auth_bp.route("/auth/admin", methods=["POST"])
def admin_login():
    payload = json_body()
    credentials = current_app.config["ADMIN_CREDENTIALS"]
    if not validate_password(credentials, payload.get("password")):
        return jsonify({"success": False, "error": "Invalid password"}), 401
    login_user(AdminUser())
    return jsonify({"success": True})


@auth_bp.route("/auth/logout", methods=["POST"])
def admin_logout():
    logout_user()
    return jsonify({"success": True})


@auth_bp.route("/auth/session", methods=["GET"])
def admin_session():
    return jsonify({"authenticated": bool(current_user.is_authenticated)})
