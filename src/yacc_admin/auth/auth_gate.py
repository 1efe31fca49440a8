"""Request-scoped administrator checks consumed by the settings controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import structlog

from .auth_service import ADMIN_ROLES, AuthError, AuthService, UserIdentity

logger = structlog.get_logger(__name__)


class AuthGate(Protocol):
    def current_user(self) -> UserIdentity | None: ...

    def is_administrator(self, user: UserIdentity) -> bool: ...


@dataclass(slots=True)
class BearerAuthGate:
    """Resolve the remote user from an ``Authorization: Bearer`` header.

    A missing, expired or malformed token means there is no current user;
    the caller decides how to answer.
    """

    service: AuthService
    authorization: str | None

    def current_user(self) -> UserIdentity | None:
        if not self.authorization:
            return None
        scheme, _, token = self.authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        try:
            return self.service.validate_token(token.strip())
        except AuthError as exc:
            logger.info("auth.token.rejected", reason=type(exc).__name__)
            return None

    def is_administrator(self, user: UserIdentity) -> bool:
        # Either an administrator or a system administrator may configure the hook.
        return bool(user.roles & ADMIN_ROLES)


__all__ = ["AuthGate", "BearerAuthGate"]
