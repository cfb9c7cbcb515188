"""Request helpers shared by the route tests."""

import uuid


def as_user(user_id: uuid.UUID, locale: str | None = None) -> dict[str, str]:
    """Headers the gateway forwards for an authenticated user."""
    headers = {"X-User-Id": str(user_id)}
    if locale:
        headers["Accept-Language"] = locale
    return headers
