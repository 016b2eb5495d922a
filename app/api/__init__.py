"""API Layer — handler objects, chain middlewares, and error handlers.

Invariants:
    - Handler objects declare their routes as Route/GroupRouter descriptors
    - Descriptors are bound by core/routing.py from main.create_app()
    - All endpoints return the {code, message, data} envelope
"""
