"""
Seed the database with a demo master account, two users (admin@demo.com /
admin123 with write access, user@demo.com / user123 read-only), four
accounts and the default categories.

Usage:
    python data-migration/seed.py
"""

from app.logging_utils import configure_root_logger, get_logger
from app.services.seed import seed_demo_data
from config import get_settings
from db import Database

logger = get_logger("seed")


def main() -> None:
    settings = get_settings()
    configure_root_logger(settings.log_level)

    database = Database(settings.database_url)
    database.create_all()

    session = database.session()
    try:
        master = seed_demo_data(session, settings.bcrypt_rounds)
        logger.info("Demo master account id: %s", master.id)
    finally:
        session.close()
        database.dispose()


if __name__ == "__main__":
    main()
