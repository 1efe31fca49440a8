"""Persistence for the hook settings snapshot."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

import structlog
from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from ..db.db_models import PluginSettingModel
from ..exceptions import handle_sqlalchemy_errors
from .settings_models import FieldMap

logger = structlog.get_logger(__name__)

SETTINGS_KEY = "com.isroot.stash.plugin.yacc.settings"


class SettingsStore(Protocol):
    def load(self, key: str) -> FieldMap | None: ...

    def save(self, key: str, fields: FieldMap, *, updated_by: str | None = None) -> None: ...


class SettingsRepository:
    """Key-value store keeping one JSON blob per settings key."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def load(self, key: str) -> FieldMap | None:
        with handle_sqlalchemy_errors(entity="plugin_settings"):
            with self._session_factory() as session:
                model = session.get(PluginSettingModel, key)
                raw = model.value if model is not None else None
        if raw is None:
            return None
        try:
            stored = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("settings.store.corrupt_blob", key=key)
            return None
        if not isinstance(stored, dict):
            logger.warning("settings.store.unexpected_blob", key=key, blob_type=type(stored).__name__)
            return None
        return FieldMap.from_stored(stored)

    def save(self, key: str, fields: FieldMap, *, updated_by: str | None = None) -> None:
        blob = json.dumps(dict(fields))
        with handle_sqlalchemy_errors(entity="plugin_settings"):
            try:
                self._write(key, blob, updated_by)
            except sa_exc.IntegrityError:
                # a concurrent first save created the row; last writer wins
                logger.info("settings.store.save_retry", key=key)
                self._write(key, blob, updated_by)

    def _write(self, key: str, blob: str, updated_by: str | None) -> None:
        with self._session_factory() as session:
            session.merge(
                PluginSettingModel(
                    key=key,
                    value=blob,
                    updated_at=datetime.utcnow(),
                    updated_by=updated_by,
                )
            )
            session.commit()


__all__ = ["SETTINGS_KEY", "SettingsRepository", "SettingsStore"]
