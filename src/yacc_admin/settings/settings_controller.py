"""GET/POST workflow for the hook settings form."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from ..auth.auth_gate import AuthGate
from ..auth.auth_service import UserIdentity
from ..nav import NavBuilder
from .settings_models import ConfigForm, FieldMap
from .settings_renderer import CONFIG_CONTEXT_ID, CONFIG_TEMPLATE_ID, Renderer
from .settings_repository import SETTINGS_KEY, SettingsStore
from .settings_validator import Validator, run_validator

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Unauthorized:
    status_code: int = 401


@dataclass(frozen=True, slots=True)
class Rendered:
    body: str
    content_type: str = "text/html;charset=UTF-8"


@dataclass(frozen=True, slots=True)
class Redirect:
    location: str


Outcome = Unauthorized | Rendered | Redirect


@dataclass(slots=True)
class ConfigController:
    """Load, validate, display and persist the hook configuration.

    The controller keeps no per-request state; every call builds its own
    :class:`ConfigForm`, so one instance can serve concurrent requests.
    """

    store: SettingsStore
    validator: Validator
    renderer: Renderer
    nav: NavBuilder
    settings_key: str = SETTINGS_KEY

    def handle_load(self, gate: AuthGate) -> Outcome:
        logger.debug("settings.load")
        if self.authorize(gate) is None:
            return Unauthorized()

        fields = self.store.load(self.settings_key)
        if fields is None:
            fields = FieldMap()

        form = ConfigForm(fields=fields)
        run_validator(self.validator, form.fields, form.errors, actor=None)
        return self._display(form)

    def handle_submit(self, gate: AuthGate, form_items: Iterable[tuple[str, str]]) -> Outcome:
        user = self.authorize(gate)
        if user is None:
            return Unauthorized()
        return self.submit_as(user, form_items)

    def submit_as(self, user: UserIdentity, form_items: Iterable[tuple[str, str]]) -> Outcome:
        """Validate and persist a submission from an already authorized administrator."""
        form = ConfigForm(fields=FieldMap.from_form(form_items))
        run_validator(self.validator, form.fields, form.errors, actor=user)

        if form.errors:
            return self._display(form)

        for key, value in form.fields.items():
            logger.debug("settings.save.field", field=key, value=value)
        self.store.save(self.settings_key, form.fields, updated_by=user.username)

        location = self.nav.addons().build_relative()
        logger.debug("settings.save.redirect", location=location)
        return Redirect(location=location)

    def authorize(self, gate: AuthGate) -> UserIdentity | None:
        user = gate.current_user()
        if user is None:
            logger.info("settings.auth.anonymous")
            return None
        if not gate.is_administrator(user):
            logger.info("settings.auth.not_admin", username=user.username)
            return None
        return user

    def _display(self, form: ConfigForm) -> Rendered:
        logger.debug(
            "settings.display",
            config=form.fields.to_dict(),
            field_errors=form.errors.to_dict(),
        )
        body = self.renderer.render(
            CONFIG_TEMPLATE_ID,
            CONFIG_CONTEXT_ID,
            {"config": form.fields, "errors": form.errors},
        )
        return Rendered(body=body)


__all__ = ["ConfigController", "Outcome", "Redirect", "Rendered", "Unauthorized"]
