"""QuickBite management CLI.

Database and maintenance commands, run against the database configured by
``QUICKBITE_DATABASE``. Reuses the setup_db/drop_db utilities of the domain.

Usage:
    python src/manage.py setup-db          # Create all tables
    python src/manage.py drop-db           # Drop all tables
    python src/manage.py reset-db          # Drop and recreate all tables
    python src/manage.py relink-payments   # Repair orders missing their payment link
"""

import argparse
import sys

from bootstrap import build_container
from shared.config import load_settings
from shared.db import drop_db, provider_names, setup_db
from shared.domain import init_domain, quickbite
from shared.logging import configure_logging


def _providers() -> str:
    return ", ".join(provider_names(quickbite))


def setup_database(settings) -> None:
    print(f"Creating {_providers()} database schema...")
    setup_db(quickbite)
    print("Done.")


def drop_database(settings) -> None:
    print(f"Dropping {_providers()} database schema...")
    drop_db(quickbite)
    print("Done.")


def reset_database(settings) -> None:
    drop_database(settings)
    setup_database(settings)


def relink_payments(settings) -> None:
    container = build_container(settings)
    with quickbite.domain_context():
        repaired = container.payment_orchestrator.relink_orphaned_payments()
    for order_id in repaired:
        print(f"  relinked order {order_id}")
    print(f"{len(repaired)} order(s) repaired.")


COMMANDS = {
    "setup-db": setup_database,
    "drop-db": drop_database,
    "reset-db": reset_database,
    "relink-payments": relink_payments,
}


def main(argv=None):
    parser = argparse.ArgumentParser(description="QuickBite management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("reset-db", help="Drop and recreate all database tables")
    subparsers.add_parser("relink-payments", help="Link unpaid orders to their latest payment attempt")

    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    settings = load_settings()
    configure_logging(settings)
    print("Initializing quickbite domain...")
    init_domain(settings)
    command(settings)


if __name__ == "__main__":
    main()
