#!/usr/bin/env python3
"""
Development tools for Finance Tracker
Database reset, demo user and sample data creation.
"""

import argparse
import logging
import random
import sys
from datetime import datetime, timedelta
from decimal import Decimal

from finance_tracker.models import engine, Base, SessionLocal, User, Transaction, get_user_by_email
from finance_tracker.auth import get_password_hash

logger = logging.getLogger("dev_tools")

SAMPLE_CATEGORIES = {
    "income": ["Salary", "Freelance", "Gift"],
    "expense": ["Groceries", "Rent", "Transport", "Dining", "Utilities", "Entertainment"],
}


def reset_database():
    """Reset the database by dropping and recreating all tables."""
    print("⚠️  Resetting database...")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("✅ Database reset complete!")


def create_user(name: str, email: str, password: str):
    """Create a user unless the email is already taken."""
    db = SessionLocal()
    try:
        existing_user = get_user_by_email(db, email)
        if existing_user:
            print(f"👤 User {email} already exists (id {existing_user.id})")
            return existing_user.id

        user = User(name=name, email=email, hashed_password=get_password_hash(password))
        db.add(user)
        db.commit()
        db.refresh(user)

        print(f"👤 Created user: {email} / {password}")
        return user.id

    except Exception:
        db.rollback()
        logger.exception("Error creating user")
        raise
    finally:
        db.close()


def create_sample_transactions(email: str, count: int = 50, months: int = 6):
    """Create random transactions spread over the last few months."""
    db = SessionLocal()
    try:
        user = get_user_by_email(db, email)
        if user is None:
            print(f"❌ No user with email {email}; run create-user first")
            return 0

        now = datetime.utcnow()
        for _ in range(count):
            txn_type = "income" if random.random() < 0.2 else "expense"
            created_at = now - timedelta(days=random.randint(0, months * 30), minutes=random.randint(0, 1440))
            high = 3000 if txn_type == "income" else 250
            db.add(Transaction(
                user_id=user.id,
                type=txn_type,
                category=random.choice(SAMPLE_CATEGORIES[txn_type]),
                amount=Decimal(random.randint(100, high * 100)) / 100,
                date=created_at.date(),
                description=f"Sample {txn_type}",
                created_at=created_at,
                updated_at=created_at,
            ))

        db.commit()
        print(f"💰 Created {count} sample transactions for {email}")
        return count

    except Exception:
        db.rollback()
        logger.exception("Error creating sample transactions")
        raise
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Finance Tracker development tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("reset-db", help="Drop and recreate all tables")

    user_parser = subparsers.add_parser("create-user", help="Create a user")
    user_parser.add_argument("--name", default="Demo User")
    user_parser.add_argument("--email", default="demo@mail.com")
    user_parser.add_argument("--password", default="demo123")

    seed_parser = subparsers.add_parser("seed", help="Create sample transactions for a user")
    seed_parser.add_argument("--email", default="demo@mail.com")
    seed_parser.add_argument("--count", type=int, default=50)
    seed_parser.add_argument("--months", type=int, default=6)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    if args.command == "reset-db":
        reset_database()
    elif args.command == "create-user":
        Base.metadata.create_all(bind=engine)
        create_user(args.name, args.email, args.password)
    elif args.command == "seed":
        Base.metadata.create_all(bind=engine)
        create_sample_transactions(args.email, args.count, args.months)

    return 0


if __name__ == "__main__":
    sys.exit(main())
