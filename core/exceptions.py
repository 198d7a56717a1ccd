"""Application-wide exception classes.

Every error a request handler can raise on purpose derives from
``ApplicationError`` and carries the HTTP status it maps to.
"""

from __future__ import annotations


class ApplicationError(Exception):
    """Base exception for all application errors."""
    status_code = 500

    def __init__(self, message: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApplicationError):
    """Raised when request payload validation fails."""
    status_code = 400


class NotFoundError(ApplicationError):
    """Raised when an entity id is unknown to the store."""
    status_code = 404


class BusinessRuleError(ApplicationError):
    """Raised when a request is well formed but violates a domain rule."""
    status_code = 400


class InvalidGangPasswordError(BusinessRuleError):
    """Raised when a gang join supplies the wrong shared secret."""
    status_code = 401


class DuplicateMembershipError(BusinessRuleError):
    """Raised when a user joins a gang they already belong to."""
    pass


class InvalidTransitionError(BusinessRuleError):
    """Raised when a ticket status change is not allowed."""
    pass


class GiveawayClosedError(BusinessRuleError):
    """Raised when joining a giveaway that already ended."""
    pass


class CollaboratorError(ApplicationError):
    """Base exception for failures of external services."""
    status_code = 502


class OAuthError(CollaboratorError):
    """Raised when the Discord OAuth exchange fails."""
    pass


class WebhookError(CollaboratorError):
    """Raised when a webhook delivery fails."""
    pass
