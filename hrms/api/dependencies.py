"""API Dependencies: request identity and per-request service wiring.

Invariants:
    - The caller's identity comes only from the configured identity header,
      set by the upstream gateway after authentication
    - A missing or malformed header is 401 AUTHENTICATION_REQUIRED, never a 400
"""

from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.config import get_settings
from hrms.core.errors import AuthenticationError
from hrms.core.permissions import Actor
from hrms.infrastructure.database import get_db
from hrms.services.access import load_actor


async def get_current_actor(
    request: Request, db: AsyncSession = Depends(get_db),
) -> Actor:
    """Resolve the forwarded user id into an Actor for this request."""
    raw = request.headers.get(get_settings().identity_header)
    if not raw:
        raise AuthenticationError()
    try:
        user_id = UUID(raw.strip())
    except ValueError:
        raise AuthenticationError("Malformed user identity") from None
    return await load_actor(db, user_id)
