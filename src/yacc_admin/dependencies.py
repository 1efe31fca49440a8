"""Dependency wiring helpers."""

from fastapi import FastAPI

from .api.errors import register_error_handlers
from .auth.auth_api import router as auth_router
from .auth.auth_service import AuthService
from .config import AppConfig
from .nav import NavBuilder
from .settings.settings_api import router as settings_router
from .settings.settings_controller import ConfigController
from .settings.settings_renderer import JinjaRenderer
from .settings.settings_repository import SettingsRepository
from .settings.settings_validator import HookSettingsValidator


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Mount module routers and attach services."""
    controller = ConfigController(
        store=SettingsRepository(config.session_factory),
        validator=HookSettingsValidator(),
        renderer=JinjaRenderer(config.templates_dir),
        nav=NavBuilder(config.base_url),
    )
    auth_service = AuthService.from_file(
        path=config.admin_credentials_path,
        signing_key=config.jwt_signing_key,
        token_ttl_hours=config.admin_jwt_ttl_hours,
    )

    app.state.config = config
    app.state.config_controller = controller
    app.state.auth_service = auth_service

    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(settings_router)
