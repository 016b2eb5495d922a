"""Handler objects — each describes its endpoints as Route/GroupRouter descriptors."""

from app.api.handlers.subscription import SubscriptionHandler
from app.api.handlers.system import SystemHandler
from app.api.handlers.user import UserHandler

__all__ = ["SubscriptionHandler", "SystemHandler", "UserHandler"]
