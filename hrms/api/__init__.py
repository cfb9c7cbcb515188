"""API Layer: FastAPI routes, request identity and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes delegate to services; services return ORM rows or plain dicts
"""
