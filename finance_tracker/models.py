# finance_tracker/models.py
# Database models for users, their API tokens and transactions

from sqlalchemy import (
    create_engine, Column, Integer, String, Date, Numeric, ForeignKey,
    DateTime, Text, Index, CheckConstraint
)
from sqlalchemy.orm import relationship, sessionmaker, declarative_base
from datetime import datetime
from enum import Enum as PyEnum
import logging

from .config import DATABASE_URL

logger = logging.getLogger(__name__)

# Database Setup
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# ===== ENUMS =====

class TransactionType(str, PyEnum):
    INCOME = "income"
    EXPENSE = "expense"

# ===== USERS =====

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    transactions = relationship(
        "Transaction", back_populates="user", cascade="all, delete-orphan"
    )
    api_tokens = relationship(
        "ApiToken", back_populates="user", cascade="all, delete-orphan"
    )

class ApiToken(Base):
    """Issued bearer token. The JWT is only honoured while this row exists."""
    __tablename__ = "api_tokens"

    id = Column(String(64), primary_key=True)  # jti claim
    name = Column(String(100), nullable=False, default="api-token")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_used_at = Column(DateTime, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user = relationship("User", back_populates="api_tokens")

# ===== TRANSACTIONS =====

class Transaction(Base):
    """A single income or expense entry owned by one user."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)

    # Core fields
    type = Column(String(10), nullable=False)
    category = Column(String(100), nullable=False)
    amount = Column(Numeric(precision=12, scale=2), nullable=False)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    user = relationship("User", back_populates="transactions")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        CheckConstraint("type IN ('income', 'expense')", name="ck_transactions_type"),
        Index("idx_transactions_user_created", "user_id", "created_at"),
        Index("idx_transactions_user_type", "user_id", "type"),
        Index("idx_transactions_user_category", "user_id", "category"),
    )

# ===== CREATE TABLES =====

def create_tables(bind=None):
    """Create all database tables."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ready")

# ===== UTILITY FUNCTIONS =====

def get_user_by_email(db, email: str):
    """Get user by email address."""
    return db.query(User).filter(User.email == email).first()
