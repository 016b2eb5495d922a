"""Infrastructure Layer — database session management and observability.

Invariants:
    - Infrastructure never imports from api/
    - All database failures surface as DatabaseError
"""
