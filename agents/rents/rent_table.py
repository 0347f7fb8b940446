"""Rent table view model: filter, select and e-mail documents for a period."""

from __future__ import annotations

from dataclasses import dataclass, field

from agents.shared.i18n import Translate, identity_translator
from agents.shared.observable import Observable

from .dispatcher import DispatchResult, NotificationDispatcher, SendState
from .documents import DEFAULT_SENT_DATE_FORMAT, DocumentLink, document_links
from .dto import DocumentKind, FilterCriteria, Rent
from .filters import STATUS_FILTERS, RentFilterer, StatusChip, status_chip
from .period import PeriodStore
from .selection import HeaderCheckboxState, SelectionTracker, is_selectable


@dataclass
class RentRow:
    rent_id: str
    occupant_name: str
    contact_emails: str
    selectable: bool
    selected: bool
    amount: float
    chip: StatusChip
    checkbox_tooltip: str = ""
    links: dict[DocumentKind, DocumentLink | None] = field(default_factory=dict)


@dataclass
class SendButton:
    kind: DocumentKind
    label: str
    state: SendState

    @property
    def disabled(self) -> bool:
        return self.state is not SendState.IDLE

    @property
    def spinning(self) -> bool:
        return self.state is SendState.SENDING


class RentTableView(Observable):
    """Binds the period store, a selection and the dispatcher for one screen.

    The selection is emptied whenever the store loads a new rent collection.
    """

    def __init__(
        self,
        store: PeriodStore,
        t: Translate | None = None,
        selection: SelectionTracker | None = None,
        dispatcher: NotificationDispatcher | None = None,
        date_format: str = DEFAULT_SENT_DATE_FORMAT,
    ):
        super().__init__()
        self.store = store
        self.t = t or identity_translator()
        self.selection = selection or SelectionTracker()
        self.dispatcher = dispatcher or NotificationDispatcher(store.client, store, self.selection, self.t)
        self.date_format = date_format
        self.criteria = FilterCriteria()
        self._filterer = RentFilterer()
        self._revision = store.revision
        self._rents = store.items
        self._filtered = self._filterer.filter(self._rents, self.criteria)
        self._unsubscribers = [
            store.subscribe(self._on_store_change),
            self.dispatcher.subscribe(lambda _dispatcher: self._notify()),
        ]

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_store_change(self, store: PeriodStore) -> None:
        if store.revision == self._revision:
            return
        self._revision = store.revision
        self._rents = store.items
        self.selection.clear_all()
        self._filtered = self._filterer.filter(self._rents, self.criteria)
        self._notify()

    # Filtering

    @property
    def filter_options(self) -> list[tuple[str, str]]:
        return [(status, self.t(label)) for status, label in STATUS_FILTERS]

    def search(self, status: str = "", search_text: str = "") -> None:
        self.criteria = FilterCriteria(status=status or "", search_text=search_text or "")
        self._filtered = self._filterer.filter(self._rents, self.criteria)
        self._notify()

    @property
    def filtered_rents(self) -> list[Rent]:
        return list(self._filtered)

    # Selection

    def select_all(self, checked: bool) -> None:
        if checked:
            self.selection.select_all(self._filtered)
        else:
            self.selection.clear_all()
        self._notify()

    def toggle(self, rent_id: str, checked: bool) -> None:
        if self.selection.toggle(rent_id, checked, self._filtered):
            self._notify()

    @property
    def selectable_count(self) -> int:
        return self.selection.selectable_count(self._filtered)

    @property
    def header_state(self) -> HeaderCheckboxState:
        return self.selection.header_state(self._filtered)

    # Toolbar

    @property
    def title(self) -> str:
        if not len(self.selection):
            return self.t("Rents")
        return self.t("{{count}} selected", {"count": len(self.selection)})

    @property
    def send_buttons(self) -> list[SendButton]:
        return [
            SendButton(kind, self.t(kind.send_label), self.dispatcher.state(kind))
            for kind in DocumentKind
        ]

    @property
    def error(self) -> str:
        return self.dispatcher.error

    async def send(self, document: DocumentKind | str) -> DispatchResult:
        return await self.dispatcher.send(document)

    # Rows

    def rows(self) -> list[RentRow]:
        rows = []
        for rent in self._filtered:
            selectable = is_selectable(rent)
            chip = status_chip(rent.status)
            rows.append(
                RentRow(
                    rent_id=rent.id,
                    occupant_name=rent.occupant.name,
                    contact_emails=", ".join(rent.occupant.contact_emails),
                    selectable=selectable,
                    selected=rent.id in self.selection,
                    amount=rent.displayed_amount,
                    chip=StatusChip(self.t(chip.label), chip.color),
                    checkbox_tooltip="" if selectable else self.t("No emails available for this tenant"),
                    links=document_links(rent, self.t, self.date_format),
                )
            )
        return rows
