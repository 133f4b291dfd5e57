"""SQLAlchemy models for dayrec database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

SCHEMA_VERSION = 1


class SchemaInfo(Base):
    """Single-row table holding the schema version."""

    __tablename__ = "schema_info"

    id = Column(Integer, primary_key=True)
    version = Column(Integer, nullable=False)


class Deposit(Base):
    """Day-sheet deposit record model."""

    __tablename__ = "deposits"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    total = Column(Numeric(10, 2), nullable=False)
    status = Column(String, nullable=False, default="pending")
    source_image = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Breakdown summary fields
    cash = Column(Numeric(10, 2), nullable=False, default=0)
    checks = Column(Numeric(10, 2), nullable=False, default=0)
    insurance_checks = Column(Numeric(10, 2), nullable=False, default=0)
    credit_cards = Column(Numeric(10, 2), nullable=False, default=0)
    insurance_credit_cards = Column(Numeric(10, 2), nullable=False, default=0)
    care_financing = Column(Numeric(10, 2), nullable=False, default=0)
    installment_financing = Column(Numeric(10, 2), nullable=False, default=0)
    eft = Column(Numeric(10, 2), nullable=False, default=0)
    other = Column(Numeric(10, 2), nullable=False, default=0)

    # Card split; all NULL when the slip has no per-network detail
    card_visa = Column(Numeric(10, 2), nullable=True)
    card_mastercard = Column(Numeric(10, 2), nullable=True)
    card_amex = Column(Numeric(10, 2), nullable=True)
    card_discover = Column(Numeric(10, 2), nullable=True)

    # -1 when the slip has no individual check list, else number of checks
    check_count = Column(Integer, nullable=False, default=-1)

    # Relationships
    checks_detail = relationship(
        "DepositCheck",
        back_populates="deposit",
        cascade="all, delete-orphan",
        order_by="DepositCheck.position",
    )


class DepositCheck(Base):
    """Individual check amount of a deposit."""

    __tablename__ = "deposit_checks"

    id = Column(Integer, primary_key=True)
    deposit_id = Column(Integer, ForeignKey("deposits.id"), nullable=False)
    position = Column(Integer, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)

    # Relationships
    deposit = relationship("Deposit", back_populates="checks_detail")


class BankTransaction(Base):
    """Bank transaction model."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(String, nullable=False, default="")
    amount = Column(Numeric(10, 2), nullable=False)
    signature = Column(String, nullable=False)
    payment_type = Column(String, nullable=True)
    category = Column(String, nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("signature", name="uq_transaction_signature"),)


class ImportLogEntry(Base):
    """Committed import, keyed by content identity."""

    __tablename__ = "import_log"

    key = Column(String, primary_key=True)
    date = Column(Date, nullable=True)
    imported_at = Column(DateTime, nullable=False)
    file_type = Column(String, nullable=False)
    file_name = Column(String, nullable=True)
    source_machine = Column(String, nullable=True)
    record_count = Column(Integer, nullable=False, default=0)
    file_hash = Column(String, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
