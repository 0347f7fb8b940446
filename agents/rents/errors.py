"""Error taxonomy for rent desk operations.

Backend status codes are mapped to exception classes; each handler owns a
message table keyed by those classes and shows the translated text on its
local ``error`` attribute.
"""

from __future__ import annotations

from collections.abc import Mapping

from agents.shared.i18n import Translate


class RentsError(Exception):
    """Base error for a failed backend operation."""

    status_code: int | None = None

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message or self.__class__.__name__)
        if status_code is not None:
            self.status_code = status_code


class ValidationError(RentsError):
    status_code = 422


class AuthorizationError(RentsError):
    status_code = 403


class NotFoundError(RentsError):
    status_code = 404


class ConflictError(RentsError):
    status_code = 409


class TransportError(RentsError):
    """Any other non-200 status, or no response at all (status 0)."""


_BY_STATUS: dict[int, type[RentsError]] = {
    422: ValidationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
}

GENERIC_MESSAGE = "Something went wrong"


def error_for_status(status_code: int, detail: str | None = None) -> RentsError:
    """Build the error matching a non-200 status code."""
    error_cls = _BY_STATUS.get(status_code, TransportError)
    return error_cls(detail or f"http_{status_code}", status_code=status_code)


def message_for(
    error: RentsError,
    messages: Mapping[type[RentsError], str],
    t: Translate,
    fallback: str = GENERIC_MESSAGE,
) -> str:
    """Translated message for ``error`` from a handler's message table."""
    return t(messages.get(type(error), fallback))


SEND_MESSAGES: dict[type[RentsError], str] = {
    AuthorizationError: "You are not allowed to send documents.",
}
SEND_FALLBACK = "Email service cannot send emails."
REFETCH_FALLBACK = "Cannot fetch rents from server"

LEASE_SAVE_MESSAGES: dict[type[RentsError], str] = {
    ValidationError: "Some fields are missing",
    AuthorizationError: "You are not allowed to update the lease",
    NotFoundError: "Lease is not found",
    ConflictError: "The lease already exists",
}

LEASE_REMOVE_MESSAGES: dict[type[RentsError], str] = {
    ValidationError: "One lease is used by tenants, it cannot be removed",
    AuthorizationError: "You are not allowed to update the lease",
}

TENANT_NAME_MISSING = "Tenant name is missing."
TENANT_COPY_SOURCE_MISSING = "Select the tenant to copy from."
TENANT_COPY_SOURCE_NOT_FOUND = "The tenant to copy from is not found."

TENANT_CREATE_MESSAGES: dict[type[RentsError], str] = {
    ValidationError: TENANT_NAME_MISSING,
    AuthorizationError: "You are not allowed to create a tenant.",
    ConflictError: "The tenant already exists.",
}
