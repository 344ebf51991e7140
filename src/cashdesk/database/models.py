"""SQLAlchemy models for cashdesk database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Boolean,
    JSON,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class Money(TypeDecorator):
    """Decimal stored as its exact string form.

    SQLite has no decimal type, so ``Numeric`` goes through float. Strings keep
    amounts and commissions exactly as entered or quoted.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class Channel(Base):
    """Transaction channel model (bank, wallet, payment rail)."""

    __tablename__ = "channels"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)
    channel_key = Column(String, nullable=False)
    name = Column(String, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    use_custom_fees = Column(Boolean, default=False, nullable=False)
    fee_schedule = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "channel_key", name="uq_user_channel_key"),)


class FeeSettings(Base):
    """Default fee schedule per user."""

    __tablename__ = "fee_settings"

    user_id = Column(String, primary_key=True)
    fee_schedule = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class CashSession(Base):
    """Cash-register session model."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)
    status = Column(String, nullable=False)
    opening_cash = Column(Money(), nullable=False)
    opened_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    closed_at = Column(DateTime, nullable=True)
    counted_balance = Column(Money(), nullable=True)
    expected_balance = Column(Money(), nullable=True)
    difference = Column(Money(), nullable=True)
    totals = Column(JSON, nullable=True)
    notes = Column(String, nullable=True)

    # Relationships
    opening_balances = relationship(
        "SessionChannelBalance", back_populates="session", cascade="all, delete-orphan"
    )
    channel_counts = relationship(
        "SessionChannelCount", back_populates="session", cascade="all, delete-orphan"
    )
    transactions = relationship("Transaction", back_populates="session", cascade="all, delete-orphan")


class SessionChannelBalance(Base):
    """Channel balance snapshotted at session open."""

    __tablename__ = "session_channel_balances"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=False)
    channel_key = Column(String, nullable=False)
    channel_name = Column(String, nullable=False)
    balance = Column(Money(), nullable=False)

    # Relationships
    session = relationship("CashSession", back_populates="opening_balances")


class SessionChannelCount(Base):
    """Channel balance counted at session close."""

    __tablename__ = "session_channel_counts"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=False)
    channel_name = Column(String, nullable=False)
    expected = Column(Money(), nullable=False)
    counted = Column(Money(), nullable=True)
    difference = Column(Money(), nullable=False)

    # Relationships
    session = relationship("CashSession", back_populates="channel_counts")


class Transaction(Base):
    """Operation model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=False)
    user_id = Column(String, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Money(), nullable=False)
    category = Column(String, nullable=False)
    concept = Column(String, nullable=False)
    channel_name = Column(String, nullable=True)
    reference_number = Column(String, nullable=True)
    commission = Column(Money(), nullable=False)
    voided = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    session = relationship("CashSession", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
