"""
This script loads historical transactions from CSV exports into the finance
database, posting every row through the ledger so account balances end up
exactly as if the transactions had been entered through the API.

Each CSV needs the columns: date, amount (signed), category, account
and optionally notes. See app/services/csv_import.py for the format.

Usage:
    python data-migration/script.py <csv file or folder> <user email>
"""


from __future__ import annotations

import argparse
from pathlib import Path

from app.deps import CurrentUser
from app.logging_utils import configure_root_logger, get_logger
from app.services.csv_import import import_transactions_csv
from config import get_settings
from db import Database
from models import User

logger = get_logger("data-migration")


def import_csvs_to_db(source: Path, email: str, master_account_id: str | None = None) -> int:
    source = Path(source)
    csv_files = sorted(source.glob("*.csv")) if source.is_dir() else [source]
    if not csv_files:
        raise FileNotFoundError(f"No CSV files found in: {source.resolve()}")

    settings = get_settings()
    database = Database(settings.database_url)
    database.create_all()

    session = database.session()
    total_inserted = 0

    try:
        query = session.query(User).filter(User.email == email, User.is_active.is_(True))
        if master_account_id:
            query = query.filter(User.master_account_id == master_account_id)
        user = query.first()
        if user is None:
            raise SystemExit(f"No active user with email {email!r}")

        identity = CurrentUser(
            user_id=user.id,
            master_account_id=user.master_account_id,
            permission=user.permission,
            email=user.email,
        )

        for f in csv_files:
            inserted = import_transactions_csv(session, identity, f)
            total_inserted += inserted
            logger.info("Imported %d rows from %s", inserted, f.name)

        logger.info("DONE. Total inserted: %d", total_inserted)
    finally:
        session.close()
        database.dispose()

    return total_inserted


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import transactions from CSV files")
    parser.add_argument("source", type=Path, help="CSV file or folder of CSV files")
    parser.add_argument("email", help="e-mail of the user the transactions are recorded for")
    parser.add_argument("--master-account-id", default=None)
    args = parser.parse_args()

    configure_root_logger(get_settings().log_level)
    import_csvs_to_db(args.source, args.email, args.master_account_id)
