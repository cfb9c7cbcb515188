"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain types from core/ used for enum fields
    - Response models read ORM rows via from_attributes; secrets (password_hash) never appear

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
