"""Rent filtering and status presentation.

Pure functions: safe to call on every criteria or collection change.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .dto import FilterCriteria, Rent, RentStatus

STATUS_FILTERS: list[tuple[str, str]] = [
    ("", "All"),
    (RentStatus.NOT_PAID.value, "Not paid"),
    (RentStatus.PARTIALLY_PAID.value, "Partially paid"),
    (RentStatus.PAID.value, "Paid"),
]


class RentFilterer:
    """Derives the displayed subset of rents from a status and a search text."""

    @staticmethod
    def matches_status(rent: Rent, status: str) -> bool:
        return not status or rent.status == status

    @staticmethod
    def matches_text(rent: Rent, search_text: str) -> bool:
        if not search_text:
            return True
        return search_text.lower() in rent.occupant.name.lower()

    def filter(self, rents: Iterable[Rent], criteria: FilterCriteria) -> list[Rent]:
        """Keep rents matching both predicates, in input order."""
        return [
            rent
            for rent in rents
            if self.matches_status(rent, criteria.status)
            and self.matches_text(rent, criteria.search_text)
        ]


def filter_rents(rents: Iterable[Rent], criteria: FilterCriteria) -> list[Rent]:
    return RentFilterer().filter(rents, criteria)


@dataclass(frozen=True)
class StatusChip:
    label: str
    color: str


def status_chip(status: str) -> StatusChip:
    """Chip shown in the status column; label is a translation key."""
    if status == RentStatus.PAID.value:
        return StatusChip("Paid", "success")
    if status == RentStatus.PARTIALLY_PAID.value:
        return StatusChip("Partially paid", "warning")
    return StatusChip("Not paid", "error")
