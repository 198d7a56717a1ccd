"""Core application components."""

# Import in correct order to avoid circular dependencies
from core.logger import setup_logger, get_logger
from core.constants import (
    TicketStatus,
    MessageSender,
    GiveawayStatus,
    ShopCategory,
    NotificationType,
    WebhookEvent,
    TicketDefaults,
    GangDefaults,
    GiveawayDefaults,
    WebhookDefaults,
    RequestDefaults,
)
from core.exceptions import (
    ApplicationError,
    ValidationError,
    NotFoundError,
    BusinessRuleError,
    InvalidGangPasswordError,
    DuplicateMembershipError,
    InvalidTransitionError,
    GiveawayClosedError,
    CollaboratorError,
    OAuthError,
    WebhookError,
)

__all__ = [
    # Initializer
    'ApplicationInitializer',
    # Logging
    'setup_logger',
    'get_logger',
    # Constants
    'TicketStatus',
    'MessageSender',
    'GiveawayStatus',
    'ShopCategory',
    'NotificationType',
    'WebhookEvent',
    'TicketDefaults',
    'GangDefaults',
    'GiveawayDefaults',
    'WebhookDefaults',
    'RequestDefaults',
    # Exceptions
    'ApplicationError',
    'ValidationError',
    'NotFoundError',
    'BusinessRuleError',
    'InvalidGangPasswordError',
    'DuplicateMembershipError',
    'InvalidTransitionError',
    'GiveawayClosedError',
    'CollaboratorError',
    'OAuthError',
    'WebhookError',
]

# Import ApplicationInitializer last to avoid circular imports
from core.app_initializer import ApplicationInitializer
