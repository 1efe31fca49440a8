from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from src.yacc_admin.api.errors import register_error_handlers
from src.yacc_admin.auth.auth_service import AuthService, UserCredential, hash_password
from src.yacc_admin.config import DEFAULT_TEMPLATES_DIR
from src.yacc_admin.exceptions import RenderError
from src.yacc_admin.nav import NavBuilder
from src.yacc_admin.settings.settings_api import router
from src.yacc_admin.settings.settings_controller import ConfigController
from src.yacc_admin.settings.settings_models import FieldMap
from src.yacc_admin.settings.settings_renderer import JinjaRenderer
from src.yacc_admin.settings.settings_repository import SETTINGS_KEY
from src.yacc_admin.settings.settings_validator import HookSettingsValidator

URL = "/plugins/servlet/yacc/admin"


class MemoryStore:
    def __init__(self) -> None:
        self.snapshots: dict[str, FieldMap] = {}
        self.saves = 0

    def load(self, key: str) -> FieldMap | None:
        return self.snapshots.get(key)

    def save(self, key: str, fields: FieldMap, *, updated_by: str | None = None) -> None:
        self.saves += 1
        self.snapshots[key] = FieldMap(fields)


class FailingRenderer:
    def render(self, template_id, context_id, data) -> str:
        raise RenderError("template exploded")


def build_auth_service() -> AuthService:
    return AuthService(
        credentials={
            "serg": UserCredential(username="serg", password_hash=hash_password("secret")),
            "viewer": UserCredential(
                username="viewer", password_hash=hash_password("secret"), roles=("project_read",)
            ),
        },
        signing_key="test-key",
        token_ttl=timedelta(hours=1),
    )


def build_client(store: MemoryStore, renderer=None) -> tuple[TestClient, AuthService]:
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(router)
    auth_service = build_auth_service()
    app.state.auth_service = auth_service
    app.state.config_controller = ConfigController(
        store=store,
        validator=HookSettingsValidator(),
        renderer=renderer or JinjaRenderer(DEFAULT_TEMPLATES_DIR),
        nav=NavBuilder(),
    )
    return TestClient(app), auth_service


def auth_headers(service: AuthService, username: str = "serg") -> dict[str, str]:
    token, _ = service.authenticate(username, "secret")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


def test_get_requires_authentication(store: MemoryStore) -> None:
    client, _ = build_client(store)

    response = client.get(URL)

    assert response.status_code == 401


def test_non_admin_is_rejected(store: MemoryStore) -> None:
    client, service = build_client(store)

    response = client.post(
        URL, data={"issueKeyPattern": "ABC"}, headers=auth_headers(service, "viewer")
    )

    assert response.status_code == 401
    assert store.saves == 0


def test_get_renders_empty_form(store: MemoryStore) -> None:
    client, service = build_client(store)

    response = client.get(URL, headers=auth_headers(service))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert 'name="issueKeyPattern" value=""' in response.text


def test_invalid_post_redisplays_form(store: MemoryStore) -> None:
    store.snapshots[SETTINGS_KEY] = FieldMap({"issueKeyPattern": "[A-Z]+-[0-9]+"})
    client, service = build_client(store)

    response = client.post(
        URL,
        data={"issueKeyPattern": "BADPATTERN(", "submit": "Save"},
        headers=auth_headers(service),
        follow_redirects=False,
    )

    assert response.status_code == 200
    assert 'value="BADPATTERN("' in response.text
    assert "not a valid pattern" in response.text
    assert store.snapshots[SETTINGS_KEY] == {"issueKeyPattern": "[A-Z]+-[0-9]+"}


def test_valid_post_saves_and_redirects(store: MemoryStore) -> None:
    store.snapshots[SETTINGS_KEY] = FieldMap({"issueKeyPattern": "[A-Z]+-[0-9]+"})
    client, service = build_client(store)
    headers = auth_headers(service)

    response = client.post(
        URL,
        data={"requireMatchingAuthorEmail": "true", "submit": "Save"},
        headers=headers,
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/plugins/servlet/upm"
    assert store.snapshots[SETTINGS_KEY] == {"requireMatchingAuthorEmail": "true"}

    page = client.get(URL, headers=headers)
    assert 'id="requireMatchingAuthorEmail" name="requireMatchingAuthorEmail" value="true" checked' in page.text


def test_render_failure_is_a_server_error(store: MemoryStore) -> None:
    client, service = build_client(store, renderer=FailingRenderer())

    response = client.get(URL, headers=auth_headers(service))

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "render_failed"


def test_missing_template_is_a_render_failure(store: MemoryStore, tmp_path) -> None:
    client, service = build_client(store, renderer=JinjaRenderer(tmp_path))

    response = client.get(URL, headers=auth_headers(service))

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "render_failed"


def test_unauthorized_post_does_not_parse_form(
    store: MemoryStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    parsed: list[bool] = []

    def recording_form(self, **kwargs):
        parsed.append(True)
        raise AssertionError("form parsed before authorization")

    monkeypatch.setattr(Request, "form", recording_form)
    client, _ = build_client(store)

    response = client.post(URL, data={"issueKeyPattern": "ABC", "submit": "Save"})

    assert response.status_code == 401
    assert parsed == []
    assert store.saves == 0
