"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Every response body is the {code, message, data} envelope (schemas/response.py)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
