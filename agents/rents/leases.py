"""Lease settings handlers: list, create, update, activate and remove."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from agents.shared.i18n import Translate, identity_translator
from agents.shared.observable import Observable
from backend.clients.rent_api import TRANSPORT_FAILURE, ApiResponse, RentApiClient
from backend.clients.rent_api.dto import ensure_list_payload
from backend.core.logging import get_logger

from .dto import Lease
from .errors import (
    LEASE_REMOVE_MESSAGES,
    LEASE_SAVE_MESSAGES,
    RentsError,
    error_for_status,
    message_for,
)


class LeaseManager(Observable):
    """Lease collection plus the lease being edited.

    Failed calls set ``error`` and leave ``items`` and ``selected`` as they
    were before the call.
    """

    def __init__(self, client: RentApiClient, t: Translate | None = None):
        super().__init__()
        self.client = client
        self.t = t or identity_translator()
        self.logger = get_logger(__name__)
        self.items: list[Lease] = []
        self.selected: Lease | None = None
        self.error = ""
        self.last_error: RentsError | None = None

    def _fail(self, response: ApiResponse, messages: Mapping[type[RentsError], str]) -> bool:
        error = error_for_status(response.status_code, response.error)
        self.last_error = error
        self.error = message_for(error, messages, self.t)
        self.logger.warning("Lease request failed", extra={"status_code": response.status_code})
        self._notify()
        return False

    def _reset_error(self) -> None:
        self.error = ""
        self.last_error = None

    def _upsert(self, lease: Lease) -> None:
        for index, item in enumerate(self.items):
            if item.id == lease.id:
                self.items[index] = lease
                return
        self.items.append(lease)

    async def fetch(self) -> int:
        response = await self.client.fetch_leases()
        if not response.is_success:
            return response.status_code
        try:
            items = [Lease.from_json(item) for item in ensure_list_payload(response.data, "leases")]
        except (ValueError, TypeError) as exc:
            self.logger.warning("Invalid leases payload", extra={"error": str(exc)})
            return TRANSPORT_FAILURE
        self.items = items
        self._notify()
        return response.status_code

    async def fetch_one(self, lease_id: str) -> int:
        response = await self.client.fetch_lease(lease_id)
        if not response.is_success:
            return response.status_code
        try:
            lease = Lease.from_json(response.data)
        except (ValueError, TypeError) as exc:
            self.logger.warning("Invalid lease payload", extra={"lease_id": lease_id, "error": str(exc)})
            return TRANSPORT_FAILURE
        self.set_selected(lease)
        return response.status_code

    def set_selected(self, lease: Lease | None) -> None:
        self.selected = lease
        self._notify()

    def _lease_from_response(self, response: ApiResponse, fallback: Mapping[str, Any]) -> Lease:
        data = response.data if isinstance(response.data, Mapping) else fallback
        return Lease.from_json(data)

    async def add_lease(self) -> Lease | None:
        """Create a blank lease named "New lease" and select it."""
        self._reset_error()
        payload = {"name": self.t("New lease")}
        response = await self.client.create_lease(payload)
        if not response.is_success:
            self._fail(response, LEASE_SAVE_MESSAGES)
            return None
        lease = self._lease_from_response(response, payload)
        self._upsert(lease)
        self.set_selected(lease)
        return lease

    async def save(self, lease_part: Mapping[str, Any]) -> bool:
        """Merge ``lease_part`` into the selected lease; create or update it."""
        self._reset_error()
        current = self.selected.to_json() if self.selected else {}
        payload = {**current, **lease_part}

        if payload.get("_id"):
            response = await self.client.update_lease(payload)
        else:
            response = await self.client.create_lease(payload)

        if not response.is_success:
            return self._fail(response, LEASE_SAVE_MESSAGES)

        lease = self._lease_from_response(response, payload)
        self._upsert(lease)
        self.set_selected(lease)
        return True

    async def toggle_active(self, lease: Lease, active: bool) -> bool:
        self._reset_error()
        payload = {**lease.to_json(), "active": active}
        response = await self.client.update_lease(payload)
        if not response.is_success:
            return self._fail(response, LEASE_SAVE_MESSAGES)

        lease.active = active
        self._notify()
        return True

    def removal_blocker(self, lease: Lease | None = None) -> str:
        """Why the lease cannot be deleted, or an empty string."""
        lease = lease or self.selected
        if lease is None:
            return ""
        if lease.used_by_tenants:
            return self.t("Lease currently used in tenant contracts")
        if lease.system:
            return self.t("System lease cannot be removed")
        return ""

    async def remove(self) -> bool:
        """Delete the selected lease."""
        self._reset_error()
        lease = self.selected
        if lease is None or not lease.id:
            return False
        blocker = self.removal_blocker(lease)
        if blocker:
            self.error = blocker
            self._notify()
            return False

        response = await self.client.delete_lease([lease.id])
        if not response.is_success:
            return self._fail(response, LEASE_REMOVE_MESSAGES)

        self.items = [item for item in self.items if item.id != lease.id]
        self.set_selected(None)
        return True

    def describe_terms(self, lease: Lease) -> str:
        if lease.system or not lease.number_of_terms:
            return ""
        return self.t(
            "{{numberOfTerms}} {{timeRange}}",
            {"numberOfTerms": lease.number_of_terms, "timeRange": lease.time_range or ""},
        )
