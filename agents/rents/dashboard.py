"""Dashboard aggregates and the summary cards of the rents page."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from agents.shared.i18n import Translate, identity_translator
from agents.shared.observable import Observable
from backend.clients.rent_api import TRANSPORT_FAILURE, RentApiClient
from backend.clients.rent_api.dto import ensure_list, ensure_mapping
from backend.core.logging import get_logger

from .period import PeriodStore

NO_PAYMENT_REASON = "Cannot enter a payment without renting a property to a tenant"


@dataclass
class DashboardOverview:
    tenant_count: int = 0
    property_count: int = 0
    occupancy_rate: float = 0.0
    total_year_revenues: float = 0.0

    @classmethod
    def from_json(cls, payload: Any) -> DashboardOverview:
        data = ensure_mapping(payload or {}, "DashboardOverview")
        return cls(
            tenant_count=int(data.get("tenantCount", 0) or 0),
            property_count=int(data.get("propertyCount", 0) or 0),
            occupancy_rate=float(data.get("occupancyRate", 0) or 0),
            total_year_revenues=float(data.get("totalYearRevenues", 0) or 0),
        )


@dataclass
class DashboardData:
    overview: DashboardOverview = field(default_factory=DashboardOverview)
    top_unpaid: list[dict[str, Any]] = field(default_factory=list)
    revenues: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_json(cls, payload: Any) -> DashboardData:
        data = ensure_mapping(payload, "DashboardData")
        return cls(
            overview=DashboardOverview.from_json(data.get("overview")),
            top_unpaid=ensure_list(data.get("topUnpaid")),
            revenues=ensure_list(data.get("revenues")),
        )


class DashboardStore(Observable):
    def __init__(self, client: RentApiClient, t: Translate | None = None):
        super().__init__()
        self.client = client
        self.t = t or identity_translator()
        self.data: DashboardData | None = None
        self.logger = get_logger(__name__)

    async def fetch(self) -> int:
        response = await self.client.fetch_dashboard()
        if not response.is_success:
            return response.status_code
        try:
            data = DashboardData.from_json(response.data or {})
        except (ValueError, TypeError) as exc:
            self.logger.warning("Invalid dashboard payload", extra={"error": str(exc)})
            return TRANSPORT_FAILURE
        self.data = data
        self._notify()
        return response.status_code

    @property
    def can_enter_payment(self) -> bool:
        return bool(self.data and self.data.overview.tenant_count)

    @property
    def payment_disabled_reason(self) -> str:
        return "" if self.can_enter_payment else self.t(NO_PAYMENT_REASON)


@dataclass
class SummaryCard:
    title: str
    info: str
    value: float


def rent_summary_cards(store: PeriodStore, t: Translate) -> list[SummaryCard]:
    """Rents, Paid and Not paid cards of the active period."""
    period_label = store.current_period.first_day.strftime("%B %Y")
    paid_count = store.count_paid + store.count_partially_paid
    return [
        SummaryCard(t("Rents"), t("Rents of {{period}}", {"period": period_label}), store.count_all),
        SummaryCard(t("Paid"), t("{{count}} rents paid", {"count": paid_count}), store.total_paid),
        SummaryCard(
            t("Not paid"),
            t("{{count}} rents not paid", {"count": store.count_not_paid}),
            store.total_to_pay,
        ),
    ]
