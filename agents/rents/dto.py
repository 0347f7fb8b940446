"""Data Transfer Objects for the rent desk.

Provides type-safe structures for rents, occupants, leases and tenants,
parsed from the backend's JSON payloads.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from backend.clients.rent_api.dto import ensure_list, ensure_mapping


class DocumentKind(Enum):
    """Documents that can be e-mailed to tenants and downloaded."""

    RENTCALL = "rentcall"
    RENTCALL_REMINDER = "rentcall_reminder"
    RENTCALL_LAST_REMINDER = "rentcall_last_reminder"
    INVOICE = "invoice"

    @property
    def download_label(self) -> str:
        """Label used in the suggested file name (translation key)."""
        return _DOWNLOAD_LABELS[self]

    @property
    def column_label(self) -> str:
        return _COLUMN_LABELS[self]

    @property
    def send_label(self) -> str:
        return _SEND_LABELS[self]


_DOWNLOAD_LABELS = {
    DocumentKind.RENTCALL: "first notice",
    DocumentKind.RENTCALL_REMINDER: "second notice",
    DocumentKind.RENTCALL_LAST_REMINDER: "last notice",
    DocumentKind.INVOICE: "invoice",
}

_COLUMN_LABELS = {
    DocumentKind.RENTCALL: "First notice",
    DocumentKind.RENTCALL_REMINDER: "Second notice",
    DocumentKind.RENTCALL_LAST_REMINDER: "Last notice",
    DocumentKind.INVOICE: "Receipt",
}

_SEND_LABELS = {
    DocumentKind.RENTCALL: "Send first notice",
    DocumentKind.RENTCALL_REMINDER: "Send second notice",
    DocumentKind.RENTCALL_LAST_REMINDER: "Send last notice",
    DocumentKind.INVOICE: "Send receipt",
}


class RentStatus(Enum):
    PAID = "paid"
    PARTIALLY_PAID = "partiallypaid"
    NOT_PAID = "notpaid"


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_amount(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class Period:
    """Billing period; ``month`` is 1-12."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")

    @classmethod
    def parse(cls, year_month: str) -> Period:
        """Parse the ``YYYY.MM`` URL form strictly."""
        try:
            parsed = datetime.strptime(year_month, "%Y.%m")
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid period: {year_month!r}") from exc
        if len(year_month) != 7:
            raise ValueError(f"invalid period: {year_month!r}")
        return cls(parsed.year, parsed.month)

    @classmethod
    def from_date(cls, value: date) -> Period:
        return cls(value.year, value.month)

    @property
    def key(self) -> str:
        return f"{self.year:04d}.{self.month:02d}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class DocumentEmailStatus:
    sent: bool = False
    last_sent_date: datetime | None = None


@dataclass
class Occupant:
    id: str
    name: str
    contact_emails: list[str] = field(default_factory=list)

    @property
    def has_contact_emails(self) -> bool:
        return len(self.contact_emails) > 0

    @classmethod
    def from_json(cls, payload: Any) -> Occupant:
        data = ensure_mapping(payload, "Occupant")
        emails = [str(email) for email in ensure_list(data.get("contactEmails")) if email]
        return cls(
            id=str(data.get("_id", "")),
            name=str(data.get("name", "")),
            contact_emails=emails,
        )


@dataclass
class Rent:
    """One tenant's billing obligation for one period."""

    id: str
    term: str
    occupant: Occupant
    status: str = RentStatus.NOT_PAID.value
    total_to_pay: float = 0.0
    payment: float = 0.0
    uid: str = ""
    email_status: dict[DocumentKind, DocumentEmailStatus] = field(default_factory=dict)

    @property
    def displayed_amount(self) -> float:
        return self.total_to_pay if self.total_to_pay > 0 else 0.0

    def document_status(self, kind: DocumentKind) -> DocumentEmailStatus:
        return self.email_status.get(kind, DocumentEmailStatus())

    @classmethod
    def from_json(cls, payload: Any) -> Rent:
        data = ensure_mapping(payload, "Rent")
        return cls(
            id=str(data.get("_id", "")),
            uid=str(data.get("uid", "")),
            term=str(data.get("term", "")),
            occupant=Occupant.from_json(data.get("occupant") or {}),
            status=str(data.get("status", RentStatus.NOT_PAID.value)),
            total_to_pay=_parse_amount(data.get("totalToPay")),
            payment=_parse_amount(data.get("payment")),
            email_status=_parse_email_status(data.get("emailStatus")),
        )


def _parse_email_status(payload: Any) -> dict[DocumentKind, DocumentEmailStatus]:
    """Normalise ``{status: {kind: bool}, last: {kind: {sentDate}}}``."""
    if not isinstance(payload, Mapping):
        return {}
    flags = payload.get("status") or {}
    last = payload.get("last") or {}
    result: dict[DocumentKind, DocumentEmailStatus] = {}
    for kind in DocumentKind:
        sent = bool(flags.get(kind.value)) if isinstance(flags, Mapping) else False
        last_entry = last.get(kind.value) if isinstance(last, Mapping) else None
        sent_date = _parse_datetime(last_entry.get("sentDate")) if isinstance(last_entry, Mapping) else None
        if sent or sent_date:
            result[kind] = DocumentEmailStatus(sent=sent, last_sent_date=sent_date)
    return result


@dataclass
class FilterCriteria:
    status: str = ""
    search_text: str = ""


@dataclass
class RentsOverview:
    count_all: int = 0
    count_paid: int = 0
    count_partially_paid: int = 0
    count_not_paid: int = 0
    total_to_pay: float = 0.0
    total_paid: float = 0.0
    total_not_paid: float = 0.0

    @classmethod
    def from_json(cls, payload: Any) -> RentsOverview:
        data = ensure_mapping(payload, "RentsOverview")
        return cls(
            count_all=int(data.get("countAll", 0) or 0),
            count_paid=int(data.get("countPaid", 0) or 0),
            count_partially_paid=int(data.get("countPartiallyPaid", 0) or 0),
            count_not_paid=int(data.get("countNotPaid", 0) or 0),
            total_to_pay=_parse_amount(data.get("totalToPay")),
            total_paid=_parse_amount(data.get("totalPaid")),
            total_not_paid=_parse_amount(data.get("totalNotPaid")),
        )

    @classmethod
    def from_rents(cls, rents: list[Rent]) -> RentsOverview:
        overview = cls(count_all=len(rents))
        for rent in rents:
            if rent.status == RentStatus.PAID.value:
                overview.count_paid += 1
            elif rent.status == RentStatus.PARTIALLY_PAID.value:
                overview.count_partially_paid += 1
            else:
                overview.count_not_paid += 1
            overview.total_paid += rent.payment
            overview.total_to_pay += rent.displayed_amount
            if rent.status != RentStatus.PAID.value:
                overview.total_not_paid += rent.displayed_amount
        return overview


@dataclass
class Lease:
    id: str | None = None
    name: str = ""
    description: str = ""
    number_of_terms: int | None = None
    time_range: str | None = None
    active: bool = True
    system: bool = False
    used_by_tenants: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, payload: Any) -> Lease:
        data = dict(ensure_mapping(payload, "Lease"))
        known = {"_id", "name", "description", "numberOfTerms", "timeRange", "active", "system", "usedByTenants"}
        number_of_terms = data.get("numberOfTerms")
        return cls(
            id=str(data["_id"]) if data.get("_id") else None,
            name=str(data.get("name", "")),
            description=str(data.get("description", "") or ""),
            number_of_terms=int(number_of_terms) if number_of_terms else None,
            time_range=data.get("timeRange"),
            active=bool(data.get("active", True)),
            system=bool(data.get("system", False)),
            used_by_tenants=bool(data.get("usedByTenants", False)),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {**self.extra}
        if self.id:
            payload["_id"] = self.id
        payload.update(
            {
                "name": self.name,
                "description": self.description,
                "numberOfTerms": self.number_of_terms,
                "timeRange": self.time_range,
                "active": self.active,
            }
        )
        return payload


@dataclass
class Tenant:
    """Tenant record; contract fields stay in ``fields`` untouched."""

    id: str | None
    name: str
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, payload: Any) -> Tenant:
        data = dict(ensure_mapping(payload, "Tenant"))
        return cls(
            id=str(data["_id"]) if data.get("_id") else None,
            name=str(data.get("name", "")),
            fields={k: v for k, v in data.items() if k not in {"_id", "name"}},
        )

    def to_json(self) -> dict[str, Any]:
        payload = {**self.fields, "name": self.name}
        if self.id:
            payload["_id"] = self.id
        return payload
