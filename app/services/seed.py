# app/services/seed.py
#
# Demo data
# Creates one master account with an admin (write) user, a reader (read)
# user, a handful of accounts and the default categories.

from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.logging_utils import get_logger
from app.security import hash_password
from models import EXPENSE, INCOME, READ, WRITE, Account, Category, MasterAccount, User

logger = get_logger(__name__)

ADMIN_EMAIL = "admin@demo.com"
ADMIN_PASSWORD = "admin123"
READER_EMAIL = "user@demo.com"
READER_PASSWORD = "user123"

# name, balance, type, color, icon
DEMO_ACCOUNTS: List[Tuple[str, Decimal, str, str, str]] = [
    ("Cash", Decimal("5000.00"), "cash", "#10B981", "Wallet"),
    ("Checking", Decimal("15000.00"), "bank", "#3B82F6", "CreditCard"),
    ("Savings", Decimal("50000.00"), "savings", "#8B5CF6", "PiggyBank"),
    ("Credit Card", Decimal("0.00"), "credit", "#EF4444", "CreditCard"),
]

# name, kind, icon, color
DEFAULT_CATEGORIES: List[Tuple[str, str, str, str]] = [
    ("Salary", INCOME, "Briefcase", "green"),
    ("Freelance", INCOME, "Laptop", "emerald"),
    ("Investments", INCOME, "TrendingUp", "teal"),
    ("Other income", INCOME, "Plus", "lime"),
    ("Food", EXPENSE, "UtensilsCrossed", "orange"),
    ("Transport", EXPENSE, "Car", "blue"),
    ("Housing", EXPENSE, "Home", "indigo"),
    ("Utilities", EXPENSE, "Zap", "yellow"),
    ("Health", EXPENSE, "Heart", "red"),
    ("Entertainment", EXPENSE, "Film", "purple"),
    ("Education", EXPENSE, "BookOpen", "cyan"),
    ("Shopping", EXPENSE, "ShoppingBag", "pink"),
    ("Other expenses", EXPENSE, "MoreHorizontal", "gray"),
]


def seed_demo_data(db: Session, bcrypt_rounds: int = 12) -> MasterAccount:
    """
    Insert the demo master account and everything it owns.

    Running it twice is harmless: if the demo admin already exists the
    existing master account is returned untouched.
    """
    existing = db.query(MasterAccount).filter(MasterAccount.admin_email == ADMIN_EMAIL).one_or_none()
    if existing is not None:
        logger.info("Demo data already present (master account %s)", existing.id)
        return existing

    try:
        master = MasterAccount(
            name="Family Finances Demo",
            admin_email=ADMIN_EMAIL,
            settings={"currency": "MXN", "timezone": "America/Mexico_City", "notifications": True},
            is_active=True,
        )
        db.add(master)
        db.flush()

        db.add_all(
            [
                User(
                    master_account_id=master.id,
                    email=ADMIN_EMAIL,
                    password_hash=hash_password(ADMIN_PASSWORD, bcrypt_rounds),
                    full_name="Demo Administrator",
                    permission=WRITE,
                ),
                User(
                    master_account_id=master.id,
                    email=READER_EMAIL,
                    password_hash=hash_password(READER_PASSWORD, bcrypt_rounds),
                    full_name="Demo User",
                    permission=READ,
                ),
            ]
        )

        db.add_all(
            Account(master_account_id=master.id, name=name, balance=balance, type=type_, color=color, icon=icon)
            for name, balance, type_, color, icon in DEMO_ACCOUNTS
        )

        db.add_all(
            Category(master_account_id=master.id, name=name, kind=kind, icon=icon, color=color)
            for name, kind, icon, color in DEFAULT_CATEGORIES
        )

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Seeded master account %s with %d accounts and %d categories",
        master.id, len(DEMO_ACCOUNTS), len(DEFAULT_CATEGORIES),
    )
    return master
