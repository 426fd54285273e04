"""Server-side model of the dashboard entity forms.

A form is derived from an entity's configuration: the same schema that the
submit pipeline validates against drives the client-side precheck, so the two
never disagree about what a valid submission is.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from rewards_admin.db.store import Store
from rewards_admin.schemas.action_state import ActionState
from rewards_admin.schemas.validation import safe_parse
from rewards_admin.services.actions.field_errors import reduce_field_errors
from rewards_admin.services.actions.registry import EntityConfig


class FormOption(BaseModel):
    value: str
    label: str


class FormFieldView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    label: str
    input_type: str = Field(alias="inputType")
    required: bool = False
    value: Any = None
    multiple: bool = False
    choices: list[str] = Field(default_factory=list)
    options: list[FormOption] = Field(default_factory=list)


class FormView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entity: str
    mode: Literal["create", "edit"]
    title: str
    submit_label: str = Field(alias="submitLabel")
    cancel_href: str = Field(alias="cancelHref")
    fields: list[FormFieldView]


class FormOutcome(BaseModel):
    """What the client does once the server action has answered."""

    model_config = ConfigDict(populate_by_name=True)

    notification: str | None = None
    level: Literal["success", "error"] | None = None
    redirect_to: str | None = Field(default=None, alias="redirectTo")
    delay_ms: int | None = Field(default=None, alias="delayMs")

    @property
    def navigates(self) -> bool:
        return self.redirect_to is not None


class EntityForm:
    def __init__(self, config: EntityConfig) -> None:
        self.config = config

    def render(
        self,
        existing: Mapping[str, Any] | None = None,
        options: Mapping[str, list[FormOption]] | None = None,
    ) -> FormView:
        """Describe the form, pre-filled from ``existing`` in edit mode."""

        options = options or {}
        editing = existing is not None
        fields: list[FormFieldView] = []
        if editing:
            fields.append(
                FormFieldView(name="id", label="", input_type="hidden", value=str(existing["id"]))
            )
        for form_field in self.config.fields:
            value = existing.get(form_field.name, form_field.default) if editing else form_field.default
            fields.append(
                FormFieldView(
                    name=form_field.name,
                    label=form_field.label,
                    input_type=form_field.input_type,
                    required=form_field.required,
                    value=_display_value(value),
                    multiple=form_field.multiple,
                    choices=list(form_field.choices),
                    options=list(options.get(form_field.name, [])),
                )
            )
        label = self.config.label
        return FormView(
            entity=self.config.name,
            mode="edit" if editing else "create",
            title=f"Edit {label}" if editing else f"New {label}",
            submit_label="Update" if editing else "Create",
            cancel_href=self.config.cache_path,
            fields=fields,
        )

    def precheck(self, submission: Mapping[str, Any]) -> dict[str, str]:
        """Field errors for ``submission``; a non-empty result blocks submit."""

        result = safe_parse(self.config.schema, submission)
        if result.success:
            return {}
        return reduce_field_errors(result.issues)

    async def load_options(self, store: Store) -> dict[str, list[FormOption]]:
        """Fetch dropdown options, one read per referenced table."""

        by_source: dict[tuple[str, str, bool], list[FormOption]] = {}
        options: dict[str, list[FormOption]] = {}
        for form_field in self.config.fields:
            if form_field.options_from is None:
                continue
            key = (form_field.options_from, form_field.option_label, form_field.options_active_only)
            if key not in by_source:
                by_source[key] = await self._fetch_options(store, *key)
            options[form_field.name] = by_source[key]
        return options

    def after_submit(self, state: ActionState) -> FormOutcome:
        if state.status == "success":
            return FormOutcome(
                notification=state.message or None,
                level="success",
                redirect_to=state.redirect_to or self.config.cache_path,
                delay_ms=state.redirect_after_ms,
            )
        if state.message:
            return FormOutcome(notification=state.message, level="error")
        return FormOutcome()

    async def _fetch_options(self, store: Store, table: str, label: str, active_only: bool) -> list[FormOption]:
        query = store.table(table).select("id", label)
        if active_only:
            query = query.eq("active", True)
        result = await query.order(label).execute()
        if result.error is not None:
            logger.warning(
                "Form options unavailable",
                entity=self.config.name,
                table=table,
                error=result.error.message,
            )
            return []
        return [
            FormOption(value=str(row["id"]), label=str(row[label]) if row[label] is not None else str(row["id"]))
            for row in result.data
        ]


def _display_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str, list, dict)):
        return value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


__all__ = ["EntityForm", "FormFieldView", "FormOption", "FormOutcome", "FormView"]
