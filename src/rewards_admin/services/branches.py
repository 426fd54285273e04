"""Branch form that registers the branch's address in the same submission."""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from rewards_admin.core.settings import Settings
from rewards_admin.db.store import Store
from rewards_admin.schemas.action_state import ActionState
from rewards_admin.services.actions import (
    EntityRepository,
    FieldErrors,
    PathCache,
    from_error_to_action_state,
    get_entity_config,
    to_action_state,
)
from rewards_admin.services.actions.pipeline import submitted_id

ADDRESS_FIELDS = (
    "street",
    "number",
    "city",
    "state",
    "zip_code",
    "country",
    "place_id",
    "latitude",
    "longitude",
)


def split_submission(form: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Separate the address inputs from the branch inputs.

    Both halves keep ``organization_id`` so the address belongs to the same
    organization as its branch.
    """

    address = {key: value for key, value in form.items() if key in ADDRESS_FIELDS}
    branch = {
        key: value
        for key, value in form.items()
        if key not in ADDRESS_FIELDS and key not in {"id", "address_id"}
    }
    if "organization_id" in form:
        address["organization_id"] = form["organization_id"]
    return address, branch


class BranchWithAddressPipeline:
    """Validate both halves, write the address, then the branch that points at it.

    Neither row is written unless both halves validate. A branch write that
    fails after a new address was created removes that address again.
    Sending ``address_id`` edits the existing address instead of adding one.
    """

    def __init__(self, store: Store, cache: PathCache, settings: Settings) -> None:
        self._address_config = get_entity_config("address")
        self._branch_config = get_entity_config("branch")
        self._addresses = EntityRepository(store, self._address_config)
        self._branches = EntityRepository(store, self._branch_config)
        self._cache = cache
        self._settings = settings

    async def submit(self, form: Mapping[str, Any]) -> ActionState:
        address_payload, branch_payload = split_submission(form)
        address = self._addresses.validate(address_payload)
        branch = self._branches.validate(branch_payload)
        if not (address.success and branch.success):
            errors = FieldErrors.from_issues([*address.issues, *branch.issues])
            return ActionState(
                status="invalid",
                field_errors=errors.errors,
                message=errors.messages[0] if errors.messages else "",
            )

        branch_id = submitted_id(form)
        address_id = submitted_id(form, "address_id")
        try:
            if address_id is not None:
                address_result = await self._addresses.update(address_id, address.data)
            else:
                address_result = await self._addresses.create(address.data)
            if address_result.error is not None:
                return self._failed(self._address_config.save_error_message, address_result.error)

            linked = {**branch.data.model_dump(), "address_id": address_result.data["id"]}
            if branch_id is not None:
                branch_result = await self._branches.update(branch_id, linked)
            else:
                branch_result = await self._branches.create(linked)
            if branch_result.error is not None and address_id is None:
                await self._addresses.delete(address_result.data["id"])
        except Exception as exc:
            logger.exception("Branch with address submission failed", branch_id=branch_id)
            return from_error_to_action_state(exc)

        if branch_result.error is not None:
            return self._failed(self._branch_config.save_error_message, branch_result.error)

        paths = dict.fromkeys([*self._branch_config.revalidation_paths, *self._address_config.revalidation_paths])
        for path in paths:
            await self._cache.revalidate_path(path)
        config = self._branch_config
        return to_action_state(
            config.updated_message if branch_id is not None else config.created_message,
            redirect_to=config.cache_path,
            redirect_after_ms=self._settings.success_redirect_delay_ms,
        )

    def _failed(self, message: str, error: Any) -> ActionState:
        logger.warning(
            "Branch with address rejected by store",
            code=getattr(error, "code", None),
            error=getattr(error, "message", str(error)),
        )
        return ActionState(status="failed", message=message)


__all__ = ["ADDRESS_FIELDS", "BranchWithAddressPipeline", "split_submission"]
