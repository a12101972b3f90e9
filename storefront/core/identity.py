"""
Request Identity

Resolves who is calling: an authenticated user (identity provider sets
X-User-Id at the gateway) or an anonymous visitor whose cart lives in the
device-scoped store selected by X-Device-Id.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .config import settings

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"
DEVICE_ID_HEADER = "X-Device-Id"


@dataclass(frozen=True)
class Identity:
    """Anonymous when user_id is None, Authenticated(user_id) otherwise"""
    user_id: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls()

    @classmethod
    def authenticated(cls, user_id: str) -> "Identity":
        if not user_id:
            raise ValueError("Authenticated identity requires a user id")
        return cls(user_id=user_id)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


@dataclass(frozen=True)
class RequestContext:
    """Identity plus the device scope of the calling client"""
    identity: Identity
    device_id: str


class IdentityMiddleware(BaseHTTPMiddleware):
    """
    Records the caller's identity on request.state.

    Requests without X-User-Id proceed as anonymous visitors.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        user_id = (request.headers.get(USER_ID_HEADER) or "").strip() or None
        device_id = (request.headers.get(DEVICE_ID_HEADER) or "").strip() or settings.default_device_id

        request.state.user_id = user_id
        request.state.device_id = device_id

        if user_id:
            logger.debug(f"Request from user={user_id} device={device_id}")

        return await call_next(request)


class IdentityDependency:
    """
    FastAPI dependency resolving the RequestContext.

    Falls back to reading headers directly when the middleware is not
    installed (e.g. a bare router under test).
    """

    def __init__(self, require_auth: bool = False):
        self.require_auth = require_auth

    async def __call__(self, request: Request) -> RequestContext:
        user_id = getattr(request.state, "user_id", None)
        device_id = getattr(request.state, "device_id", None)

        if device_id is None:
            user_id = (request.headers.get(USER_ID_HEADER) or "").strip() or None
            device_id = (request.headers.get(DEVICE_ID_HEADER) or "").strip() or settings.default_device_id

        if self.require_auth and not user_id:
            raise HTTPException(
                status_code=401,
                detail="This endpoint requires an authenticated user",
            )

        identity = Identity.authenticated(user_id) if user_id else Identity.anonymous()
        return RequestContext(identity=identity, device_id=device_id)


# Dependency instances
optional_identity = IdentityDependency(require_auth=False)
require_identity = IdentityDependency(require_auth=True)
