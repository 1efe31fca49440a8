"""Admin authentication and JWT issuance."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterable

import jwt
from jwt import ExpiredSignatureError
from jwt import InvalidTokenError as PyJWTInvalidTokenError
import structlog


logger = structlog.get_logger(__name__)

ADMIN_ROLES = frozenset({"admin", "sys_admin"})


def _utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(tz=timezone.utc)


def hash_password(value: str) -> str:
    """Return hex sha256 hash for the provided password."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class UserIdentity:
    """Authenticated remote user."""

    username: str
    roles: frozenset[str] = frozenset()


@dataclass(slots=True)
class UserCredential:
    """Single user record loaded from runtime_credentials.json."""

    username: str
    password_hash: str
    roles: tuple[str, ...] = ("admin",)
    disabled: bool = False

    def verify(self, password: str) -> bool:
        return not self.disabled and self.password_hash == hash_password(password)


@dataclass(slots=True)
class FailedLoginState:
    """Tracks consecutive failures and throttle window per username."""

    failures: int = 0
    blocked_until: datetime | None = None


class AuthError(Exception):
    """Base class for auth failures."""


class InvalidCredentialsError(AuthError):
    """Raised when username/password mismatch."""


class LoginThrottledError(AuthError):
    """Raised when user hit throttle limit."""


class InvalidTokenError(AuthError):
    """Raised when token cannot be decoded."""


class TokenExpiredError(AuthError):
    """Raised when token is expired."""


@dataclass(slots=True)
class AuthService:
    """Authenticate configured users and issue JWT tokens."""

    credentials: dict[str, UserCredential]
    signing_key: str
    token_ttl: timedelta
    max_failures: int = 10
    block_duration: timedelta = timedelta(minutes=15)
    _failed_logins: dict[str, FailedLoginState] = field(default_factory=dict)

    @classmethod
    def from_file(
        cls,
        path: Path,
        signing_key: str,
        token_ttl_hours: int,
    ) -> "AuthService":
        credentials = cls._load_credentials(path)
        ttl = timedelta(hours=token_ttl_hours)
        if not signing_key:
            raise RuntimeError("JWT_SIGNING_KEY is not configured")
        return cls(credentials=credentials, signing_key=signing_key, token_ttl=ttl)

    @staticmethod
    def _load_credentials(path: Path) -> dict[str, UserCredential]:
        if not path.exists():
            raise FileNotFoundError(f"Credentials file not found: {path}")
        raw = json.loads(path.read_text(encoding="utf-8"))
        users = raw.get("users", [])
        if not isinstance(users, Iterable):
            raise ValueError("Invalid credentials structure: 'users' must be an array")
        records: dict[str, UserCredential] = {}
        for entry in users:
            username = entry.get("username")
            password_hash = entry.get("password_hash")
            if not username or not password_hash:
                raise ValueError("Each user entry must contain username and password_hash")
            records[username] = UserCredential(
                username=username,
                password_hash=password_hash,
                roles=tuple(entry.get("roles", ["admin"])),
                disabled=entry.get("disabled", False),
            )
        if not records:
            raise ValueError("No user credentials configured")
        return records

    def authenticate(
        self, username: str, password: str, client_ip: str | None = None
    ) -> tuple[str, int]:
        """Validate credentials and return JWT token + ttl seconds."""
        now = _utcnow()
        state = self._failed_logins.get(username)
        if state and state.blocked_until and now < state.blocked_until:
            logger.warning(
                "auth.login.failure",
                username=username,
                reason="throttled",
                blocked_until=state.blocked_until.isoformat(),
                client_ip=client_ip,
            )
            raise LoginThrottledError("Too many attempts, try later")

        credential = self.credentials.get(username)
        if not credential or not credential.verify(password):
            self._register_failure(username, now)
            logger.warning(
                "auth.login.failure",
                username=username,
                reason="invalid_credentials",
                client_ip=client_ip,
            )
            raise InvalidCredentialsError("Invalid username or password")

        self._failed_logins.pop(username, None)
        token = self._issue_token(username, now, credential.roles)
        expires_in = int(self.token_ttl.total_seconds())
        logger.info(
            "auth.login.success",
            username=username,
            client_ip=client_ip,
            expires_in=expires_in,
        )
        return token, expires_in

    def _register_failure(self, username: str, now: datetime) -> None:
        state = self._failed_logins.get(username)
        if not state:
            state = FailedLoginState()
            self._failed_logins[username] = state
        state.failures += 1
        if state.failures >= self.max_failures:
            state.failures = 0
            state.blocked_until = now + self.block_duration
        else:
            state.blocked_until = None

    def _issue_token(self, username: str, issued_at: datetime, roles: Iterable[str]) -> str:
        payload: dict[str, Any] = {
            "sub": username,
            "roles": sorted(roles),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.token_ttl).timestamp()),
        }
        return jwt.encode(payload, self.signing_key, algorithm="HS256")

    def validate_token(self, token: str) -> UserIdentity:
        """Decode JWT into the identity it was issued for."""
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.signing_key,
                algorithms=["HS256"],
                options={"require": ["exp", "iat", "sub"]},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Token expired") from exc
        except PyJWTInvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        roles = payload.get("roles") or []
        if not isinstance(roles, list):
            raise InvalidTokenError("Invalid roles claim")
        return UserIdentity(username=payload["sub"], roles=frozenset(map(str, roles)))


__all__ = [
    "ADMIN_ROLES",
    "AuthError",
    "AuthService",
    "FailedLoginState",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "LoginThrottledError",
    "TokenExpiredError",
    "UserCredential",
    "UserIdentity",
    "hash_password",
]
