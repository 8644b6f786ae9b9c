from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: categories
# ---------------------------


class LedgerCategory(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    # Optional "#rrggbb"; the dashboard falls back to a palette when NULL.
    color: Mapped[str | None] = mapped_column(String(7), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("kind in ('expense','income')", name="ck_categories_kind"),
    )


# ---------------------------
# Core: transactions
# ---------------------------


class LedgerTransaction(Base):
    __tablename__ = "transactions"

    # BIGINT on Postgres; plain INTEGER on SQLite so it aliases the rowid and
    # autoincrements. Monotonic ids double as the insertion-order tie-break.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    # amount/occurred_on stay nullable: legacy rows exist without them and the
    # engine skips such rows instead of failing the whole fetch.
    amount: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    occurred_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    category: Mapped[LedgerCategory | None] = relationship(lazy="joined")

    __table_args__ = (
        CheckConstraint("amount IS NULL OR amount >= 0", name="ck_transactions_amount"),
        Index("ix_transactions_occurred_on", "occurred_on"),
    )


__all__ = [
    "Base",
    "LedgerCategory",
    "LedgerTransaction",
]
