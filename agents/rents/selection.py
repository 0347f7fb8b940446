"""Selection of rents for bulk document sending."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum

from .dto import Rent


class HeaderCheckboxState(Enum):
    CHECKED = "checked"
    INDETERMINATE = "indeterminate"
    UNCHECKED = "unchecked"


def is_selectable(rent: Rent) -> bool:
    """Only rents whose occupant can receive e-mails are selectable."""
    return rent.occupant.has_contact_emails


class SelectionTracker:
    """Set of rent ids chosen for a bulk action.

    Ids that leave the filtered view are kept; pruning is up to the caller.
    """

    def __init__(self) -> None:
        self._selected: set[str] = set()

    @property
    def selected(self) -> frozenset[str]:
        return frozenset(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, rent_id: object) -> bool:
        return rent_id in self._selected

    def ordered_ids(self, rents: Iterable[Rent]) -> list[str]:
        """Selected ids in the order of ``rents``, then any remaining ids sorted."""
        ordered = [rent.id for rent in rents if rent.id in self._selected]
        seen = set(ordered)
        return ordered + sorted(self._selected - seen)

    def select_all(self, filtered_rents: Iterable[Rent]) -> None:
        self._selected = {rent.id for rent in filtered_rents if is_selectable(rent)}

    def clear_all(self) -> None:
        self._selected = set()

    def toggle(self, rent_id: str, checked: bool, filtered_rents: Iterable[Rent]) -> bool:
        """Add or remove one id; answers whether the selection changed."""
        if not checked:
            if rent_id in self._selected:
                self._selected.discard(rent_id)
                return True
            return False

        eligible = any(rent.id == rent_id and is_selectable(rent) for rent in filtered_rents)
        if not eligible or rent_id in self._selected:
            return False
        self._selected.add(rent_id)
        return True

    @staticmethod
    def selectable_count(filtered_rents: Iterable[Rent]) -> int:
        return sum(1 for rent in filtered_rents if is_selectable(rent))

    def header_state(self, filtered_rents: Sequence[Rent]) -> HeaderCheckboxState:
        selectable = self.selectable_count(filtered_rents)
        size = len(self._selected)
        if filtered_rents and size == selectable:
            return HeaderCheckboxState.CHECKED
        if 0 < size < selectable:
            return HeaderCheckboxState.INDETERMINATE
        return HeaderCheckboxState.UNCHECKED
