"""Form submission flow: validate, persist, then reconcile errors into an ActionState."""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger
from pydantic import ValidationError

from rewards_admin.core.settings import Settings
from rewards_admin.schemas.action_state import ActionState
from rewards_admin.schemas.validation import issues_from_error

from .cache import PathCache
from .field_errors import FieldErrors, reduce_field_errors
from .repository import EntityRepository

EMPTY_ACTION_STATE = ActionState()

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"


def to_action_state(message: str, *, redirect_to: str | None = None, redirect_after_ms: int | None = None) -> ActionState:
    return ActionState(
        message=message,
        status="success",
        redirect_to=redirect_to,
        redirect_after_ms=redirect_after_ms,
    )


def from_error_to_action_state(error: Any) -> ActionState:
    """Render anything raised during a submission as an ActionState."""

    if isinstance(error, ValidationError):
        return ActionState(
            status="invalid",
            field_errors=reduce_field_errors(issues_from_error(error)),
        )
    if isinstance(error, Exception):
        return ActionState(status="failed", message=str(error) or UNKNOWN_ERROR_MESSAGE)
    return ActionState(status="failed", message=UNKNOWN_ERROR_MESSAGE)


def submitted_id(form: Mapping[str, Any], key: str = "id") -> str | None:
    """The non-blank identifier a form carries under ``key``, if any."""

    value = form.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class FormActionPipeline:
    def __init__(self, repository: EntityRepository, cache: PathCache, settings: Settings) -> None:
        self._repository = repository
        self._cache = cache
        self._settings = settings

    @property
    def config(self):
        return self._repository.config

    async def submit(self, form: Mapping[str, Any]) -> ActionState:
        config = self.config
        parsed = self._repository.validate(form)
        if not parsed.success:
            errors = FieldErrors.from_issues(parsed.issues)
            logger.info(
                "Dashboard submission invalid",
                entity=config.name,
                fields=sorted(errors.errors),
            )
            return ActionState(
                status="invalid",
                field_errors=errors.errors,
                message=errors.messages[0] if errors.messages else "",
            )

        entity_id = submitted_id(form)
        try:
            if entity_id is not None:
                result = await self._repository.update(entity_id, parsed.data)
            else:
                result = await self._repository.create(parsed.data)
        except Exception as exc:
            logger.exception("Dashboard submission failed", entity=config.name, entity_id=entity_id)
            return from_error_to_action_state(exc)

        if isinstance(result.error, FieldErrors):
            return ActionState(status="invalid", field_errors=result.error.errors)
        if result.error is not None:
            logger.warning(
                "Dashboard submission rejected by store",
                entity=config.name,
                entity_id=entity_id,
                code=getattr(result.error, "code", None),
                error=getattr(result.error, "message", str(result.error)),
            )
            return ActionState(status="failed", message=config.save_error_message)

        for path in config.revalidation_paths:
            await self._cache.revalidate_path(path)
        message = config.updated_message if entity_id is not None else config.created_message
        logger.info(
            "Dashboard submission saved",
            entity=config.name,
            entity_id=entity_id,
            mode="update" if entity_id is not None else "create",
        )
        return to_action_state(
            message,
            redirect_to=config.cache_path,
            redirect_after_ms=self._settings.success_redirect_delay_ms,
        )


__all__ = [
    "EMPTY_ACTION_STATE",
    "FormActionPipeline",
    "UNKNOWN_ERROR_MESSAGE",
    "from_error_to_action_state",
    "submitted_id",
    "to_action_state",
]
