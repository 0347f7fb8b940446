"""Period store: selected billing period and its rent collection.

Observers subscribe with a callback and are notified after every state
change; re-rendering is the subscriber's business.
"""

from __future__ import annotations

import calendar
from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Any

from agents.shared.observable import Observable
from backend.clients.rent_api import TRANSPORT_FAILURE, RentApiClient
from backend.core.logging import get_logger

from .dto import FilterCriteria, Period, Rent, RentsOverview
from .filters import RentFilterer


class PeriodStore(Observable):
    """Holds the active period, its rents and the rent list filters."""

    def __init__(self, client: RentApiClient, period: Period | str | date | None = None):
        super().__init__()
        self.client = client
        self.logger = get_logger(__name__)
        self._period = self._coerce_period(period) if period is not None else Period.from_date(date.today())
        self._items: list[Rent] = []
        self._overview = RentsOverview()
        self._filters = FilterCriteria()
        self._selected: Rent | None = None
        self._filterer = RentFilterer()
        self._revision = 0
        self._loaded_period: Period | None = None

    # Period

    @staticmethod
    def _coerce_period(value: Period | str | date) -> Period:
        if isinstance(value, Period):
            return value
        if isinstance(value, str):
            return Period.parse(value)
        if isinstance(value, date):
            return Period.from_date(value)
        raise TypeError(f"unsupported period value: {value!r}")

    def set_period(self, value: Period | str | date) -> Period:
        """Select a period; ``YYYY.MM`` strings are parsed strictly.

        Switching to another period drops the loaded rents until the next
        ``fetch``.
        """
        period = self._coerce_period(value)
        if period != self._period:
            self._period = period
            self._items = []
            self._overview = RentsOverview()
            self._selected = None
            self._loaded_period = None
            self._revision += 1
            self._notify()
        return period

    @property
    def current_period(self) -> Period:
        return self._period

    @property
    def period(self) -> str:
        """URL key of the active period (``YYYY.MM``)."""
        return self._period.key

    @property
    def year(self) -> int:
        return self._period.year

    @property
    def month(self) -> int:
        return self._period.month

    # Rents

    @property
    def items(self) -> list[Rent]:
        return list(self._items)

    @property
    def overview(self) -> RentsOverview:
        return self._overview

    @property
    def revision(self) -> int:
        """Bumped each time the rent collection is replaced or dropped."""
        return self._revision

    @property
    def loaded_period(self) -> Period | None:
        """Period of the rents in ``items``; None until a fetch succeeds."""
        return self._loaded_period

    async def fetch(self) -> int:
        """Reload the rents of the active period; answers the status code.

        On any failure the current items are left untouched.
        """
        period = self._period
        response = await self.client.fetch_rents(period.year, period.month)
        if not response.is_success:
            self.logger.warning(
                "Cannot fetch rents",
                extra={"period": period.key, "status_code": response.status_code},
            )
            return response.status_code

        try:
            rents, overview = self._parse_rents_payload(response.data)
        except (ValueError, TypeError) as exc:
            self.logger.warning(
                "Invalid rents payload", extra={"period": period.key, "error": str(exc)}
            )
            return TRANSPORT_FAILURE

        if period != self._period:
            self.logger.info("Discarding rents of a previous period", extra={"period": period.key})
            return response.status_code

        self._items = rents
        self._overview = overview
        self._loaded_period = period
        self._revision += 1
        if self._selected is not None:
            self._selected = next((r for r in rents if r.id == self._selected.id), None)
        self.logger.info("Rents fetched", extra={"period": period.key, "count": len(rents)})
        self._notify()
        return response.status_code

    @staticmethod
    def _parse_rents_payload(payload: Any) -> tuple[list[Rent], RentsOverview]:
        if isinstance(payload, list):
            rents = [Rent.from_json(item) for item in payload]
            return rents, RentsOverview.from_rents(rents)
        if not isinstance(payload, dict):
            raise ValueError("expected rents list or object")
        raw_rents = payload.get("rents", payload.get("items", []))
        if not isinstance(raw_rents, list):
            raise ValueError("expected 'rents' to be a list")
        rents = [Rent.from_json(item) for item in raw_rents]
        if payload.get("overview") is not None:
            overview = RentsOverview.from_json(payload["overview"])
        else:
            overview = RentsOverview.from_rents(rents)
        return rents, overview

    # Rent list filters (rents page)

    @property
    def filters(self) -> FilterCriteria:
        return self._filters

    def set_filters(self, status: str = "", search_text: str = "") -> None:
        self._filters = FilterCriteria(status=status or "", search_text=search_text or "")
        self._notify()

    @property
    def filtered_items(self) -> list[Rent]:
        return self._filterer.filter(self._items, self._filters)

    # Selected rent (payment page)

    @property
    def selected(self) -> Rent | None:
        return self._selected

    def set_selected(self, rent: Rent | None) -> None:
        self._selected = rent
        self._notify()

    # Summary cards

    @property
    def count_all(self) -> int:
        return self._overview.count_all

    @property
    def count_paid(self) -> int:
        return self._overview.count_paid

    @property
    def count_partially_paid(self) -> int:
        return self._overview.count_partially_paid

    @property
    def count_not_paid(self) -> int:
        return self._overview.count_not_paid

    @property
    def total_paid(self) -> float:
        return self._overview.total_paid

    @property
    def total_to_pay(self) -> float:
        return self._overview.total_to_pay


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_term(term: str, frequency: str, t: Callable[..., str]) -> str:
    """Human label of a rent term (``YYYYMMDDHH``) for a lease frequency.

    Weeks start on Sunday. Unknown frequencies give an empty label.
    """
    term_date = datetime.strptime(str(term), "%Y%m%d%H").date()
    if frequency == "years":
        return f"{term_date.year:04d}"
    if frequency == "months":
        return t(
            "{{month}} {{year}}",
            {"month": calendar.month_name[term_date.month], "year": f"{term_date.year:04d}"},
        )
    if frequency == "weeks":
        start = term_date - timedelta(days=(term_date.weekday() + 1) % 7)
        end = start + timedelta(days=6)
        return t(
            "{{month}} {{startDay}} to {{endDay}}",
            {
                "month": calendar.month_abbr[term_date.month],
                "startDay": _ordinal(start.day),
                "endDay": _ordinal(end.day),
            },
        )
    if frequency == "days":
        return term_date.strftime("%m/%d/%Y")
    return ""
