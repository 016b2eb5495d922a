"""ORM Models — SQLAlchemy declarative models for users and subscriptions.

Invariants:
    - All models inherit from Base (db/base.py)
    - Importing this package registers every table on Base.metadata
"""

from app.models.user import User  # noqa: F401
from app.models.subscription import Subscription  # noqa: F401
