"""Fixtures for rent desk tests: rent factories and a fake backend client."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from agents.rents.dto import Occupant, Rent
from agents.shared.i18n import Translator
from backend.clients.rent_api import ApiResponse


def make_rent(
    rent_id: str,
    name: str,
    emails: list[str] | None = None,
    status: str = "notpaid",
    total_to_pay: float = 500.0,
    term: str = "2024030100",
) -> Rent:
    return Rent(
        id=rent_id,
        term=term,
        occupant=Occupant(id=f"occ-{rent_id}", name=name, contact_emails=list(emails or [])),
        status=status,
        total_to_pay=total_to_pay,
    )


def rent_json(
    rent_id: str,
    name: str,
    emails: list[str] | None = None,
    status: str = "notpaid",
    total_to_pay: float = 500.0,
    term: str = "2024030100",
    email_status: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload = {
        "_id": rent_id,
        "uid": f"uid-{rent_id}",
        "term": term,
        "status": status,
        "totalToPay": total_to_pay,
        "payment": 0,
        "occupant": {"_id": f"occ-{rent_id}", "name": name, "contactEmails": list(emails or [])},
    }
    if email_status is not None:
        payload["emailStatus"] = email_status
    return payload


THREE_RENTS = [
    rent_json("r1", "Alice Martin", ["alice@example.com"]),
    rent_json("r2", "Bob Durand", ["bob@example.com", "bob.work@example.com"], status="partiallypaid"),
    rent_json("r3", "Chloe Petit", [], status="paid"),
]


@pytest.fixture
def three_rents_payload() -> dict[str, Any]:
    return {"rents": [dict(r) for r in THREE_RENTS]}


@pytest.fixture
def fake_client(three_rents_payload):
    """AsyncMock standing in for RentApiClient; every call answers 200."""
    client = AsyncMock()
    client.fetch_rents.return_value = ApiResponse(200, three_rents_payload)
    client.send_document.return_value = ApiResponse(200, {})
    return client


@pytest.fixture
def t() -> Translator:
    return Translator()


@pytest.fixture(name="make_rent")
def make_rent_fixture():
    return make_rent


@pytest.fixture(name="rent_json")
def rent_json_fixture():
    return rent_json
