"""Repositories — async SQLAlchemy data access for users and subscriptions.

Invariants:
    - Repositories receive the request's AsyncSession; they never create one
    - Missing rows raise ResourceNotFoundError, duplicates raise ConflictError
    - Every write commits before returning (one transaction per operation)
"""
