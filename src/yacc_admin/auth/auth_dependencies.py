"""Common authentication dependencies for FastAPI routers."""

from __future__ import annotations

from fastapi import Depends, Request

from .auth_gate import BearerAuthGate
from .auth_service import AuthService


def get_auth_service(request: Request) -> AuthService:
    try:
        return request.app.state.auth_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("AuthService is not configured") from exc


def get_auth_gate(
    request: Request, service: AuthService = Depends(get_auth_service)
) -> BearerAuthGate:
    return BearerAuthGate(service=service, authorization=request.headers.get("Authorization"))


__all__ = ["get_auth_gate", "get_auth_service"]
