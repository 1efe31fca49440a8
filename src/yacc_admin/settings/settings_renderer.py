"""Server-side rendering of the settings form."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import structlog
from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from ..exceptions import RenderError

logger = structlog.get_logger(__name__)

CONFIG_TEMPLATE_ID = "com.isroot.stash.plugin.yacc:yaccHook-config-serverside"
CONFIG_CONTEXT_ID = "com.atlassian.stash.repository.hook.ref.config"


class Renderer(Protocol):
    def render(self, template_id: str, context_id: str, data: Mapping[str, Any]) -> str: ...


class JinjaRenderer:
    """Render ``<module>:<template>`` ids from a directory of Jinja2 files.

    I/O failures surface as :class:`OSError`, everything else that goes wrong
    while rendering becomes :class:`RenderError`.
    """

    def __init__(self, templates_dir: Path) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )

    @staticmethod
    def template_name(template_id: str) -> str:
        _, _, name = template_id.rpartition(":")
        return f"{name}.html"

    def render(self, template_id: str, context_id: str, data: Mapping[str, Any]) -> str:
        name = self.template_name(template_id)
        try:
            template = self._env.get_template(name)
            return template.render(context_id=context_id, **data)
        except TemplateError as exc:
            # TemplateNotFound is also an OSError; a missing template is not an I/O failure.
            logger.error("settings.render.failed", template=name, error=repr(exc))
            raise RenderError(f"failed to render {template_id}") from exc
        except OSError:
            raise
        except Exception as exc:
            cause = exc.__cause__
            if isinstance(cause, OSError):
                raise cause from exc
            logger.error("settings.render.failed", template=name, error=repr(exc))
            raise RenderError(f"failed to render {template_id}") from exc


__all__ = ["CONFIG_CONTEXT_ID", "CONFIG_TEMPLATE_ID", "JinjaRenderer", "Renderer"]
