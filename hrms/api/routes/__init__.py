"""Route Modules: one file per resource.

Invariants:
    - Each module defines its own APIRouter with an /api/v1 prefix and tags
    - Routes never contain business logic (delegate to services)
    - Identity is always injected through api/dependencies.py get_current_actor
"""
