"""Reusable error primitives for API exception handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..exceptions import RenderError, RepositoryError

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class ApiError(Exception):
    """Structured application-level error for HTTP handlers."""

    status_code: int
    code: str
    message: str
    headers: Mapping[str, str] | None = None

    def to_response(self) -> JSONResponse:
        """Materialise the error into a ``JSONResponse`` instance."""

        return JSONResponse(
            status_code=self.status_code,
            content={"error": {"code": self.code, "message": self.message}},
            headers=dict(self.headers or {}),
        )


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    """Convert :class:`ApiError` exceptions into JSON payloads."""

    return exc.to_response()


async def render_error_handler(request: Request, exc: RenderError) -> JSONResponse:
    logger.error("http.render_failed", path=request.url.path, error=str(exc))
    return ApiError(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "render_failed", "Settings form could not be rendered"
    ).to_response()


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    logger.error("http.storage_failed", path=request.url.path, error=str(exc))
    return ApiError(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "storage_failed", "Settings storage is unavailable"
    ).to_response()


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RenderError, render_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RepositoryError, repository_error_handler)  # type: ignore[arg-type]


__all__ = [
    "ApiError",
    "api_error_handler",
    "register_error_handlers",
    "render_error_handler",
    "repository_error_handler",
]
