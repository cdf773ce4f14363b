"""Shipment — one imported consignment and the root of its workflow.

Lifecycle:  CREATED → IMPORTING_DETAILS_DONE → CUSTOMS_IN_PROGRESS → CUSTOMS_RECEIVED

Children (items, importing details, customs) are owned by the shipment and
deleted with it.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shiptrack.database import Base


class ShipmentStatus(str, enum.Enum):
    CREATED = "CREATED"
    IMPORTING_DETAILS_DONE = "IMPORTING_DETAILS_DONE"
    CUSTOMS_IN_PROGRESS = "CUSTOMS_IN_PROGRESS"
    CUSTOMS_RECEIVED = "CUSTOMS_RECEIVED"


class Shipment(Base):
    __tablename__ = "shipments"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    shipment_name: Mapped[str] = mapped_column(String(255), nullable=False)
    shipment_number: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    backend_master_key: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )

    # ── Status ───────────────────────────────────────────────
    status: Mapped[ShipmentStatus] = mapped_column(
        SAEnum(ShipmentStatus, name="shipment_status"),
        default=ShipmentStatus.CREATED,
        nullable=False,
        index=True,
    )

    # ── Audit ────────────────────────────────────────────────
    created_by_id: Mapped[str | None] = mapped_column(String(255), ForeignKey("users.id"))
    updated_by_id: Mapped[str | None] = mapped_column(String(255), ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # ── Relationships ────────────────────────────────────────
    items = relationship(
        "ShipmentItem",
        back_populates="shipment",
        cascade="all, delete-orphan",
        order_by="ShipmentItem.created_at",
        lazy="selectin",
    )
    importing_details = relationship(
        "ImportingDetails",
        back_populates="shipment",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="selectin",
    )
    customs = relationship(
        "Customs",
        back_populates="shipment",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="selectin",
    )
