"""Validator contract and the default rules for the commit checker hook."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

import structlog

from .settings_models import FieldCheck, FieldErrors, FieldMap, ValidationErrors

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..auth.auth_service import UserIdentity

logger = structlog.get_logger(__name__)

PATTERN_FIELDS = (
    "issueKeyPattern",
    "commitMessageRegex",
    "committerEmailRegex",
    "excludeByRegex",
    "excludeBranchRegex",
    "branchNameRegex",
)

BOOLEAN_FIELDS = (
    "requireMatchingAuthorEmail",
    "requireMatchingAuthorName",
    "requireJiraIssue",
    "ignoreUnknownIssueProjectKeys",
    "excludeMergeCommits",
    "excludeServiceUserCommits",
    "requireCustomHeader",
)

FieldRule = Callable[[str], FieldCheck]


class Validator(Protocol):
    def validate(
        self,
        fields: FieldMap,
        errors: ValidationErrors,
        actor: "UserIdentity | None",
    ) -> None: ...


def check_pattern(value: str) -> FieldCheck:
    try:
        re.compile(value)
    except re.error:
        return FieldCheck.failed("not a valid pattern")
    return FieldCheck.ok()


def check_boolean(value: str) -> FieldCheck:
    if value.lower() in ("true", "false"):
        return FieldCheck.ok()
    return FieldCheck.failed("must be true or false")


def _default_rules() -> dict[str, FieldRule]:
    rules: dict[str, FieldRule] = {name: check_pattern for name in PATTERN_FIELDS}
    rules.update({name: check_boolean for name in BOOLEAN_FIELDS})
    return rules


@dataclass(slots=True)
class HookSettingsValidator:
    """Check every submitted field that has a registered rule.

    Each rule produces a :class:`FieldCheck`. A rule that blows up is turned
    into a fault result, logged and skipped so the remaining fields are still
    checked.
    """

    rules: Mapping[str, FieldRule] = field(default_factory=_default_rules)

    def validate(
        self,
        fields: FieldMap,
        errors: ValidationErrors,
        actor: "UserIdentity | None" = None,
    ) -> None:
        for name, value in fields.items():
            rule = self.rules.get(name)
            if rule is None:
                continue
            result = self._run_rule(rule, value)
            if result.is_fault:
                logger.warning(
                    "settings.validate.rule_fault",
                    field=name,
                    error=repr(result.error),
                    actor=actor.username if actor else None,
                )
                continue
            for message in result.messages:
                errors.add_field_error(name, message)

        if fields.get("requireJiraIssue", "").lower() == "true" and not (
            fields.get("issueKeyPattern") or fields.get("jqlMatcher")
        ):
            errors.add_form_error(
                "requireJiraIssue needs either issueKeyPattern or jqlMatcher"
            )

    @staticmethod
    def _run_rule(rule: FieldRule, value: str) -> FieldCheck:
        try:
            return rule(value)
        except Exception as exc:  # noqa: BLE001 - rule faults are reported as data
            return FieldCheck.fault(exc)


def run_validator(
    validator: Validator,
    fields: FieldMap,
    field_errors: FieldErrors,
    actor: "UserIdentity | None" = None,
) -> ValidationErrors:
    """Clear ``field_errors`` and populate it by running ``validator``.

    A fault raised by the validator is logged and swallowed; errors recorded
    before the fault are kept.
    """
    sink = ValidationErrors(field_errors)
    try:
        validator.validate(fields, sink, actor)
    except Exception as exc:  # noqa: BLE001 - validation faults never reach the transport
        logger.warning("settings.validate.fault", error=repr(exc), exc_info=exc)
    return sink


__all__ = [
    "BOOLEAN_FIELDS",
    "FieldRule",
    "HookSettingsValidator",
    "PATTERN_FIELDS",
    "Validator",
    "check_boolean",
    "check_pattern",
    "run_validator",
]
