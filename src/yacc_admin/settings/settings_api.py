"""Admin form routes for the hook settings."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from ..auth.auth_dependencies import get_auth_gate
from ..auth.auth_gate import BearerAuthGate
from .settings_controller import ConfigController, Outcome, Redirect, Rendered, Unauthorized

router = APIRouter(prefix="/plugins/servlet/yacc", tags=["settings"])


def get_config_controller(request: Request) -> ConfigController:
    try:
        return request.app.state.config_controller  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("ConfigController is not configured") from exc


def _to_response(outcome: Outcome) -> Response:
    if isinstance(outcome, Rendered):
        return HTMLResponse(outcome.body, media_type=outcome.content_type)
    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.location, status_code=302)
    return Response(status_code=outcome.status_code)


@router.get("/admin", response_class=HTMLResponse)
def read_config(
    gate: BearerAuthGate = Depends(get_auth_gate),
    controller: ConfigController = Depends(get_config_controller),
) -> Response:
    return _to_response(controller.handle_load(gate))


@router.post("/admin", response_class=HTMLResponse)
async def submit_config(
    request: Request,
    gate: BearerAuthGate = Depends(get_auth_gate),
    controller: ConfigController = Depends(get_config_controller),
) -> Response:
    user = controller.authorize(gate)
    if user is None:
        return _to_response(Unauthorized())
    form = await request.form()
    items = [(name, value) for name, value in form.multi_items() if isinstance(value, str)]
    outcome = await run_in_threadpool(controller.submit_as, user, items)
    return _to_response(outcome)
