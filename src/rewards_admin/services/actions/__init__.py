"""Generic validate, persist and reconcile flow shared by every dashboard entity."""

from .cache import PathCache
from .field_errors import FieldErrors, reduce_field_errors
from .pipeline import (
    EMPTY_ACTION_STATE,
    FormActionPipeline,
    from_error_to_action_state,
    to_action_state,
)
from .registry import ENTITY_CONFIGS, EntityConfig, get_entity_config
from .repository import EntityRepository

__all__ = [
    "EMPTY_ACTION_STATE",
    "ENTITY_CONFIGS",
    "EntityConfig",
    "EntityRepository",
    "FieldErrors",
    "FormActionPipeline",
    "PathCache",
    "from_error_to_action_state",
    "get_entity_config",
    "reduce_field_errors",
    "to_action_state",
]
