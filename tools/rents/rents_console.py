#!/usr/bin/env python3
"""Rents console.

Console front-end of the rent desk: prints the rents of a period with their
payment status and sent documents, and e-mails a document to every
selectable rent matching the filters.
"""

import argparse
import os
import sys
from datetime import date

import anyio

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from agents.rents.config import RentsConfig
from agents.rents.dashboard import rent_summary_cards
from agents.rents.dispatcher import DispatchOutcome
from agents.rents.dto import DocumentKind, Period
from agents.rents.period import PeriodStore
from agents.rents.rent_table import RentTableView
from agents.shared.i18n import Translator
from backend.clients.rent_api import RentApiClient
from backend.core.logging import get_logger, init_logging

logger = get_logger("tools.rents")


def build_client(config: RentsConfig) -> RentApiClient:
    return RentApiClient(
        base_url=config.api_base_url,
        organization_id=config.organization_id,
        token=config.api_token,
        timeout=config.api_timeout,
        documents_path=config.documents_path,
    )


def print_table(view: RentTableView, store: PeriodStore, t: Translator) -> None:
    print("=" * 80)
    print(f"{t('Rents')} {store.period}")
    print("=" * 80)
    for card in rent_summary_cards(store, t):
        print(f"{card.title:<12} {card.value:>12.2f}  {card.info}")
    print("-" * 80)
    kinds = list(DocumentKind)
    header = f"{t('Tenant'):<30} {t('Rent due'):>10} {t('Status'):<16}"
    header += " ".join(f"{t(kind.column_label)[:10]:<10}" for kind in kinds)
    print(header)
    for row in view.rows():
        marks = " ".join(f"{'x' if row.links.get(kind) else '-':<10}" for kind in kinds)
        mail = "" if row.selectable else " (!)"
        print(f"{(row.occupant_name + mail)[:30]:<30} {row.amount:>10.2f} {row.chip.label:<16}{marks}")
    print("-" * 80)
    print(f"{len(view.filtered_rents)} / {len(store.items)}")


async def run(args: argparse.Namespace) -> int:
    config = RentsConfig.from_organization(args.organization)
    if args.base_url:
        config.api_base_url = args.base_url
    t = Translator.for_locale(args.locale or config.locale, config.locales_dir or None)

    try:
        period = Period.parse(args.period) if args.period else Period.from_date(date.today())
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    async with build_client(config) as client:
        store = PeriodStore(client, period)
        view = RentTableView(store, t, date_format=config.sent_date_format)

        status = await store.fetch()
        if status != 200:
            print(t("Cannot fetch rents from server"), file=sys.stderr)
            return 1

        view.search(args.status or "", args.search or "")

        if args.command == "list":
            print_table(view, store, t)
            return 0

        view.select_all(True)
        count = len(view.selection)
        if count == 0:
            print("Nothing to send: no selectable rent matches the filters.")
            return 0

        kind = DocumentKind(args.document)
        if args.dry_run:
            print(f"DRY RUN: would send {kind.value} to {count} tenant(s) for {store.period}")
            return 0

        result = await view.send(kind)
        if result.outcome is DispatchOutcome.SENT:
            print(f"{t(kind.send_label)}: {count}")
            return 0
        print(result.message or view.error, file=sys.stderr)
        logger.error("Send failed", extra={"document": kind.value, "outcome": result.outcome.value})
        return 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Rents console")
    parser.add_argument("--organization", required=True, help="Organization name")
    parser.add_argument("--period", help="Billing period YYYY.MM (default: current month)")
    parser.add_argument("--base-url", help="Rent API base URL")
    parser.add_argument("--locale", help="Locale of the output (e.g. fr)")
    parser.add_argument(
        "--status",
        choices=["", "notpaid", "partiallypaid", "paid"],
        default="",
        help="Only rents with this status",
    )
    parser.add_argument("--search", default="", help="Tenant name contains")
    parser.add_argument("--log-level", default=None, help="Logging level")
    parser.add_argument("--json-logs", action="store_true", help="JSON log lines")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="Print the rent table")
    send = subparsers.add_parser("send", help="E-mail a document to the matching rents")
    send.add_argument("--document", required=True, choices=[kind.value for kind in DocumentKind])
    send.add_argument("--dry-run", action="store_true", help="Show what would be sent")

    args = parser.parse_args()
    init_logging(args.log_level, args.json_logs or None)
    return anyio.run(run, args)


if __name__ == "__main__":
    sys.exit(main())
