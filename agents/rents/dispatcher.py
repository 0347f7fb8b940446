"""Bulk sending of rent documents to the selected tenants.

One send is in flight at most: while a document kind is being sent, every
other kind is disabled and further ``send`` calls are rejected without any
network call.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from agents.shared.i18n import Translate, identity_translator
from agents.shared.observable import Observable
from backend.clients.rent_api import RentApiClient, SendDocumentRequest
from backend.core.logging import get_logger

from .dto import DocumentKind, Period
from .errors import (
    REFETCH_FALLBACK,
    SEND_FALLBACK,
    SEND_MESSAGES,
    RentsError,
    error_for_status,
    message_for,
)
from .period import PeriodStore
from .selection import SelectionTracker


class SendState(Enum):
    IDLE = "idle"
    SENDING = "sending"
    DISABLED = "disabled"


class DispatchOutcome(Enum):
    SENT = "sent"
    SEND_FAILED = "send_failed"
    REFETCH_FAILED = "refetch_failed"
    REJECTED = "rejected"


@dataclass
class DispatchResult:
    outcome: DispatchOutcome
    document: DocumentKind
    tenant_ids: list[str] = field(default_factory=list)
    error: RentsError | None = None
    message: str = ""

    @property
    def success(self) -> bool:
        return self.outcome is DispatchOutcome.SENT


class NotificationDispatcher(Observable):
    """Sends one document kind to the selected rents and refreshes the store."""

    def __init__(
        self,
        client: RentApiClient,
        store: PeriodStore,
        selection: SelectionTracker,
        t: Translate | None = None,
    ):
        super().__init__()
        self.client = client
        self.store = store
        self.selection = selection
        self.t = t or identity_translator()
        self.logger = get_logger(__name__)
        self.states: dict[DocumentKind, SendState] = {kind: SendState.IDLE for kind in DocumentKind}
        self.error = ""

    @property
    def busy(self) -> bool:
        return any(state is not SendState.IDLE for state in self.states.values())

    def state(self, document: DocumentKind | str) -> SendState:
        return self.states[DocumentKind(document)]

    def _set_states(self, active: DocumentKind | None) -> None:
        if active is None:
            self.states = {kind: SendState.IDLE for kind in DocumentKind}
        else:
            self.states = {
                kind: SendState.SENDING if kind is active else SendState.DISABLED
                for kind in DocumentKind
            }
        self._notify()

    @staticmethod
    def _coerce_period(period: Period | Mapping[str, Any]) -> Period:
        if isinstance(period, Period):
            return period
        return Period(int(period["year"]), int(period["month"]))

    async def send(
        self,
        document: DocumentKind | str,
        selected_ids: Iterable[str] | None = None,
        period: Period | Mapping[str, Any] | None = None,
    ) -> DispatchResult:
        """Send ``document`` to the tenants of the selected rents.

        Defaults to the tracker's selection (in display order) and the
        period the store's rents were loaded for.
        """
        kind = DocumentKind(document)
        if selected_ids is None:
            tenant_ids = self.selection.ordered_ids(self.store.items)
        else:
            tenant_ids = list(selected_ids)

        if self.busy:
            self.logger.info(
                "Send rejected while another document is in flight",
                extra={"document": kind.value},
            )
            return DispatchResult(DispatchOutcome.REJECTED, kind, tenant_ids)
        if not tenant_ids:
            return DispatchResult(DispatchOutcome.REJECTED, kind, tenant_ids)

        target = self._coerce_period(period) if period is not None else self.store.loaded_period
        if target is None:
            self.logger.info("Send rejected: no rents loaded", extra={"document": kind.value})
            return DispatchResult(DispatchOutcome.REJECTED, kind, tenant_ids)
        request = SendDocumentRequest(kind.value, tenant_ids, target.year, target.month)

        self.error = ""
        self._set_states(kind)
        try:
            response = await self.client.send_document(request)
        finally:
            self._set_states(None)

        if not response.is_success:
            error = error_for_status(response.status_code, response.error)
            self.error = message_for(error, SEND_MESSAGES, self.t, SEND_FALLBACK)
            self.logger.warning(
                "Documents not sent",
                extra={
                    "document": kind.value,
                    "period": target.key,
                    "count": len(tenant_ids),
                    "status_code": response.status_code,
                },
            )
            self._notify()
            return DispatchResult(DispatchOutcome.SEND_FAILED, kind, tenant_ids, error, self.error)

        self.logger.info(
            "Documents sent",
            extra={"document": kind.value, "period": target.key, "count": len(tenant_ids)},
        )

        status = await self.store.fetch()
        if status != 200:
            error = error_for_status(status)
            self.error = self.t(REFETCH_FALLBACK)
            self._notify()
            return DispatchResult(DispatchOutcome.REFETCH_FAILED, kind, tenant_ids, error, self.error)

        self.selection.clear_all()
        self._notify()
        return DispatchResult(DispatchOutcome.SENT, kind, tenant_ids)
