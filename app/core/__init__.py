"""Core Layer — route descriptors and registration, errors, cron and token rules.

Invariants:
    - No module in core/ imports from services/, api/, repositories/, or db/
    - Only routing.py touches the web framework; the rest is plain functions

Design Decisions:
    - Handlers depend on core descriptors, never the other way around
"""
