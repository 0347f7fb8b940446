"""New tenant dialog: validation, copy-from and creation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from agents.shared.i18n import Translate, identity_translator
from backend.clients.rent_api import RentApiClient
from backend.core.logging import get_logger

from .dto import Tenant
from .errors import (
    TENANT_COPY_SOURCE_MISSING,
    TENANT_COPY_SOURCE_NOT_FOUND,
    TENANT_CREATE_MESSAGES,
    TENANT_NAME_MISSING,
    RentsError,
    error_for_status,
    message_for,
)

# Contract data that must not be carried over to a copied tenant
NON_COPYABLE_FIELDS = frozenset(
    {
        "_id",
        "reference",
        "name",
        "manager",
        "terminated",
        "beginDate",
        "endDate",
        "terminationDate",
        "properties",
        "discount",
        "guaranty",
    }
)


class NewTenantForm(BaseModel):
    """Fields of the new tenant dialog."""

    name: str = Field(..., min_length=1)
    is_copy_from: bool = Field(default=False, alias="isCopyFrom")
    copy_from: str = Field(default="", alias="copyFrom")

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @model_validator(mode="after")
    def _copy_source_required(self) -> NewTenantForm:
        if self.is_copy_from and not self.copy_from:
            raise ValueError("copyFrom is required when isCopyFrom is set")
        return self


def copy_options(tenants: Iterable[Tenant]) -> list[dict[str, Any]]:
    """Select-field options, one per tenant name (first occurrence wins)."""
    seen: set[str] = set()
    options = []
    for tenant in tenants:
        if tenant.name in seen:
            continue
        seen.add(tenant.name)
        options.append({"id": tenant.id, "label": tenant.name, "value": tenant.id})
    return options


def build_tenant_payload(form: NewTenantForm, tenants: Iterable[Tenant]) -> dict[str, Any]:
    payload: dict[str, Any] = {"name": form.name, "company": form.name}
    if not form.is_copy_from:
        return payload
    source = next((tenant for tenant in tenants if tenant.id == form.copy_from), None)
    if source is None:
        raise LookupError(f"unknown tenant to copy from: {form.copy_from}")
    copied = {k: v for k, v in source.to_json().items() if k not in NON_COPYABLE_FIELDS}
    return {**copied, **payload}


class NewTenantDialog:
    """Creates a tenant from the dialog values; ``error`` holds the message."""

    def __init__(self, client: RentApiClient, tenants: Iterable[Tenant] = (), t: Translate | None = None):
        self.client = client
        self.tenants = list(tenants)
        self.t = t or identity_translator()
        self.logger = get_logger(__name__)
        self.error = ""
        self.last_error: RentsError | None = None
        self.submitting = False

    @property
    def options(self) -> list[dict[str, Any]]:
        return copy_options(self.tenants)

    @staticmethod
    def validate(values: dict[str, Any]) -> dict[str, str]:
        """Field errors of the form, empty when valid."""
        try:
            NewTenantForm.model_validate(values)
        except ValidationError as exc:
            errors = {}
            for item in exc.errors():
                loc = item.get("loc") or ()
                errors[str(loc[0]) if loc else "copyFrom"] = item.get("msg", "invalid")
            return errors
        return {}

    def _reject(self, error: RentsError, message: str) -> None:
        self.last_error = error
        self.error = self.t(message)
        self.logger.info("Tenant form rejected", extra={"reason": type(error).__name__})
        return None

    async def submit(self, values: dict[str, Any]) -> Tenant | None:
        """Create the tenant; answers it on success, None otherwise."""
        self.error = ""
        self.last_error = None
        field_errors = self.validate(values)
        if field_errors:
            message = TENANT_NAME_MISSING if "name" in field_errors else TENANT_COPY_SOURCE_MISSING
            return self._reject(error_for_status(422, "; ".join(field_errors.values())), message)
        form = NewTenantForm.model_validate(values)
        try:
            payload = build_tenant_payload(form, self.tenants)
        except LookupError as exc:
            return self._reject(error_for_status(404, str(exc)), TENANT_COPY_SOURCE_NOT_FOUND)

        self.submitting = True
        try:
            response = await self.client.create_tenant(payload)
        finally:
            self.submitting = False

        if not response.is_success:
            error = error_for_status(response.status_code, response.error)
            self.last_error = error
            self.error = message_for(error, TENANT_CREATE_MESSAGES, self.t)
            self.logger.warning("Tenant not created", extra={"status_code": response.status_code})
            return None

        data = response.data if isinstance(response.data, dict) else payload
        tenant = Tenant.from_json(data)
        self.tenants.append(tenant)
        self.logger.info("Tenant created", extra={"tenant_id": tenant.id})
        return tenant
