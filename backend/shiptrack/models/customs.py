"""Customs — customs reconciliation for a shipment (one-to-one).

Created once, when the shipment first reaches CUSTOMS_RECEIVED. At that
moment total_pieces_recorded is snapshotted from the items' COU and one
CustomsPerType row is seeded for every item type on the shipment.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger, Date, DateTime, ForeignKey, Numeric, String, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiptrack.database import Base


class Customs(Base):
    __tablename__ = "customs"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    shipment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("shipments.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    bill_date: Mapped[date | None] = mapped_column(Date)

    # ── Piece reconciliation (sums over all items, 64-bit) ───
    total_pieces_recorded: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_pieces_adjusted: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # recorded - adjusted; negative when more pieces arrived than recorded
    loss_or_damage_pieces: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    shipment = relationship("Shipment", back_populates="customs")
    per_type = relationship(
        "CustomsPerType",
        back_populates="customs",
        cascade="all, delete-orphan",
        order_by="CustomsPerType.created_at",
        lazy="selectin",
    )


class CustomsPerType(Base):
    __tablename__ = "customs_per_type"
    __table_args__ = (
        UniqueConstraint("customs_id", "item_type_id", name="uq_customs_per_type_item_type"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    customs_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("customs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_type_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("item_types.id"), nullable=False
    )
    total_pcs_per_type: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_ctn_per_type: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    paid_customs: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0.00")
    )
    takhreg: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0.00")
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    customs = relationship("Customs", back_populates="per_type")
    item_type = relationship("ItemType", lazy="selectin")
