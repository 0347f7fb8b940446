from datetime import date

import pytest

from agents.rents.dto import Period, RentsOverview
from agents.rents.period import PeriodStore, format_term
from backend.clients.rent_api import ApiResponse


class TestPeriodParsing:
    def test_parse_key(self):
        assert Period.parse("2024.03") == Period(2024, 3)
        assert Period(2024, 3).key == "2024.03"

    @pytest.mark.parametrize("value", ["2024.3", "2024-03", "2024.13", "24.03", "", "2024.03x"])
    def test_parse_is_strict(self, value):
        with pytest.raises(ValueError):
            Period.parse(value)

    def test_month_out_of_range(self):
        with pytest.raises(ValueError):
            Period(2024, 0)


class TestPeriodStore:
    def test_defaults_to_current_month(self, fake_client):
        store = PeriodStore(fake_client)
        today = date.today()
        assert (store.year, store.month) == (today.year, today.month)

    def test_set_period_accepts_strings_and_dates(self, fake_client):
        store = PeriodStore(fake_client, "2024.01")
        assert store.set_period(date(2024, 5, 17)) == Period(2024, 5)
        assert store.period == "2024.05"

    def test_set_period_notifies_only_on_change(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        calls = []
        store.subscribe(lambda s: calls.append(s.period))

        store.set_period("2024.03")
        store.set_period("2024.04")

        assert calls == ["2024.04"]

    @pytest.mark.anyio
    async def test_set_period_drops_loaded_rents(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        await store.fetch()
        store.set_selected(store.items[0])
        assert store.loaded_period == Period(2024, 3)

        store.set_period("2024.04")

        assert store.items == []
        assert store.count_all == 0
        assert store.selected is None
        assert store.loaded_period is None
        assert store.revision == 2

    @pytest.mark.anyio
    async def test_stale_fetch_is_discarded(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        original = fake_client.fetch_rents.return_value

        async def switch_period_then_answer(year, month):
            store.set_period("2024.05")
            return original

        fake_client.fetch_rents.side_effect = switch_period_then_answer

        await store.fetch()

        assert store.items == []
        assert store.loaded_period is None

    def test_set_period_rejects_bad_value(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        with pytest.raises(ValueError):
            store.set_period("March")
        assert store.period == "2024.03"

    @pytest.mark.anyio
    async def test_fetch_replaces_items_and_notifies(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        notified = []
        store.subscribe(lambda s: notified.append(s.revision))

        assert await store.fetch() == 200

        fake_client.fetch_rents.assert_awaited_once_with(2024, 3)
        assert [r.id for r in store.items] == ["r1", "r2", "r3"]
        assert notified == [1]
        assert store.count_all == 3
        assert store.count_paid == 1
        assert store.count_partially_paid == 1
        assert store.count_not_paid == 1

    @pytest.mark.anyio
    async def test_fetch_failure_leaves_items(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        await store.fetch()
        fake_client.fetch_rents.return_value = ApiResponse(404, error="missing")

        assert await store.fetch() == 404
        assert len(store.items) == 3
        assert store.revision == 1

    @pytest.mark.anyio
    async def test_transport_failure_reports_zero(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        fake_client.fetch_rents.return_value = ApiResponse(0, error="timeout")
        assert await store.fetch() == 0
        assert store.items == []

    @pytest.mark.anyio
    async def test_malformed_payload_reports_zero(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        fake_client.fetch_rents.return_value = ApiResponse(200, {"rents": "oops"})
        assert await store.fetch() == 0
        assert store.revision == 0

    @pytest.mark.anyio
    async def test_overview_from_payload(self, fake_client, rent_json):
        payload = {
            "rents": [rent_json("r1", "Alice")],
            "overview": {"countAll": 12, "countPaid": 4, "totalToPay": 6000, "totalPaid": 2000},
        }
        fake_client.fetch_rents.return_value = ApiResponse(200, payload)
        store = PeriodStore(fake_client, Period(2024, 3))

        await store.fetch()

        assert store.overview == RentsOverview(
            count_all=12, count_paid=4, total_to_pay=6000.0, total_paid=2000.0
        )

    @pytest.mark.anyio
    async def test_list_payload(self, fake_client, rent_json):
        fake_client.fetch_rents.return_value = ApiResponse(200, [rent_json("r9", "Zoe")])
        store = PeriodStore(fake_client, Period(2024, 3))
        await store.fetch()
        assert [r.occupant.name for r in store.items] == ["Zoe"]

    @pytest.mark.anyio
    async def test_selected_rent_follows_refetch(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        await store.fetch()
        old = store.items[1]
        store.set_selected(old)

        await store.fetch()

        assert store.selected is not old
        assert store.selected.id == "r2"

    @pytest.mark.anyio
    async def test_filtered_items(self, fake_client):
        store = PeriodStore(fake_client, Period(2024, 3))
        await store.fetch()
        store.set_filters(status="notpaid", search_text="ali")
        assert [r.id for r in store.filtered_items] == ["r1"]

    def test_items_returns_copy(self, fake_client):
        store = PeriodStore(fake_client)
        store.items.append("junk")
        assert store.items == []


class TestFormatTerm:
    def test_years(self, t):
        assert format_term("2024030100", "years", t) == "2024"

    def test_months(self, t):
        assert format_term("2024030100", "months", t) == "March 2024"

    def test_weeks_start_on_sunday(self, t):
        # 2024-03-06 is a Wednesday
        assert format_term("2024030600", "weeks", t) == "Mar 3rd to 9th"

    def test_weeks_ordinals(self, t):
        assert format_term("2024031200", "weeks", t) == "Mar 10th to 16th"
        assert format_term("2024033100", "weeks", t) == "Mar 31st to 6th"

    def test_days(self, t):
        assert format_term("2024030100", "days", t) == "03/01/2024"

    def test_unknown_frequency(self, t):
        assert format_term("2024030100", "hours", t) == ""
