"""ShipmentItem — one line of goods on a shipment.

`cou` (pieces) and `total` are derived from ctn / pcs_per_ctn / pri and are
always recomputed server-side on write.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiptrack.database import Base


class ShipmentItem(Base):
    __tablename__ = "shipment_items"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    shipment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shipments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    supplier_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("suppliers.id"), nullable=False, index=True
    )
    item_type_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("item_types.id"), nullable=False, index=True
    )
    item_photo_url: Mapped[str | None] = mapped_column(Text)

    # ── Quantities & price ───────────────────────────────────
    ctn: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pcs_per_ctn: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cou: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pri: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))
    total: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    shipment = relationship("Shipment", back_populates="items")
    supplier = relationship("Supplier", lazy="selectin")
    item_type = relationship("ItemType", lazy="selectin")
