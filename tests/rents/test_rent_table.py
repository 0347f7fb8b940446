import pytest

from agents.rents.dispatcher import DispatchOutcome, SendState
from agents.rents.dto import DocumentKind, Period
from agents.rents.period import PeriodStore
from agents.rents.rent_table import RentTableView
from agents.rents.selection import HeaderCheckboxState
from agents.shared.i18n import Translator
from backend.clients.rent_api import ApiResponse


@pytest.fixture
async def view(fake_client, t):
    store = PeriodStore(fake_client, Period(2024, 3))
    await store.fetch()
    table = RentTableView(store, t)
    yield table
    table.close()


@pytest.mark.anyio
async def test_title_follows_selection(view):
    assert view.title == "Rents"

    view.select_all(True)
    assert view.title == "2 selected"
    assert view.header_state is HeaderCheckboxState.CHECKED

    view.toggle("r1", False)
    assert view.header_state is HeaderCheckboxState.INDETERMINATE

    view.select_all(False)
    assert view.title == "Rents"


@pytest.mark.anyio
async def test_rows_mark_rents_without_email(view):
    rows = {row.rent_id: row for row in view.rows()}

    assert rows["r3"].selectable is False
    assert rows["r3"].checkbox_tooltip == "No emails available for this tenant"
    assert rows["r2"].contact_emails == "bob@example.com, bob.work@example.com"
    assert rows["r2"].chip.label == "Partially paid"
    assert rows["r1"].amount == 500.0


@pytest.mark.anyio
async def test_search_narrows_rows_and_selection_scope(view):
    view.search(status="notpaid")
    assert [r.id for r in view.filtered_rents] == ["r1"]
    assert view.selectable_count == 1

    view.select_all(True)
    assert view.selection.selected == {"r1"}


@pytest.mark.anyio
async def test_selection_cleared_when_rents_reload(view):
    view.select_all(True)
    notified = []
    view.subscribe(lambda v: notified.append(len(v.selection)))

    await view.store.fetch()

    assert len(view.selection) == 0
    assert notified == [0]


@pytest.mark.anyio
async def test_period_change_never_sends_previous_rents(view, fake_client):
    view.select_all(True)

    view.store.set_period("2024.04")
    result = await view.send("rentcall")

    assert len(view.selection) == 0
    assert view.rows() == []
    assert result.outcome is DispatchOutcome.REJECTED
    fake_client.send_document.assert_not_awaited()


@pytest.mark.anyio
async def test_send_after_period_change_uses_new_rents(view, fake_client, rent_json):
    view.store.set_period("2024.04")
    fake_client.fetch_rents.return_value = ApiResponse(200, [rent_json("a1", "Dora", ["d@example.com"])])
    await view.store.fetch()
    view.select_all(True)

    await view.send("rentcall")

    request = fake_client.send_document.await_args.args[0]
    assert (request.tenant_ids, request.year, request.month) == (["a1"], 2024, 4)


@pytest.mark.anyio
async def test_send_buttons_and_error(view, fake_client):
    buttons = view.send_buttons
    assert [b.kind for b in buttons] == list(DocumentKind)
    assert buttons[0].label == "Send first notice"
    assert not any(b.disabled for b in buttons)

    view.select_all(True)
    fake_client.send_document.return_value = ApiResponse(500)
    await view.send("rentcall")

    assert view.error == "Email service cannot send emails."
    assert all(b.state is SendState.IDLE for b in view.send_buttons)


@pytest.mark.anyio
async def test_send_success_empties_selection(view):
    view.select_all(True)
    result = await view.send(DocumentKind.INVOICE)
    assert result.success
    assert view.title == "Rents"


@pytest.mark.anyio
async def test_translated_labels(fake_client):
    store = PeriodStore(fake_client, Period(2024, 3))
    await store.fetch()
    table = RentTableView(store, Translator.for_locale("fr"))

    table.select_all(True)

    assert table.title == "2 sélectionné(s)"
    assert dict(table.filter_options)["paid"] == "Payé"
    table.close()
