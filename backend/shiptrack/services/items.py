"""Shipment line items: add, edit, remove, and bulk replace.

Every write goes through `_apply()`, which re-derives cou and total from
ctn, pcs_per_ctn and pri; client-sent derived values never reach the row.

Items are managed through the `shipment.items` collection so the in-memory
shipment stays consistent with what will be flushed (totals and customs
snapshots read from it).
"""

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.middleware.exceptions import InvalidInputError
from shiptrack.models.item_type import ItemType
from shiptrack.models.shipment import Shipment
from shiptrack.models.shipment_item import ShipmentItem
from shiptrack.models.supplier import Supplier
from shiptrack.schemas.shipment_item import BulkItemRow, ShipmentItemIn, ShipmentItemUpdate
from shiptrack.services import calculator
from shiptrack.services.importing import refresh_importing_totals

logger = logging.getLogger(__name__)


async def _load_references(
    db: AsyncSession,
    supplier_ids: Iterable[str],
    item_type_ids: Iterable[str],
) -> tuple[dict[str, Supplier], dict[str, ItemType]]:
    """Fetch referenced suppliers / item types, failing on any unknown id."""
    supplier_ids = set(supplier_ids)
    item_type_ids = set(item_type_ids)

    suppliers: dict[str, Supplier] = {}
    if supplier_ids:
        result = await db.execute(select(Supplier).where(Supplier.id.in_(supplier_ids)))
        suppliers = {s.id: s for s in result.scalars().all()}
    missing = sorted(supplier_ids - suppliers.keys())
    if missing:
        raise InvalidInputError(f"Unknown supplier: {', '.join(missing[:3])}")

    item_types: dict[str, ItemType] = {}
    if item_type_ids:
        result = await db.execute(select(ItemType).where(ItemType.id.in_(item_type_ids)))
        item_types = {t.id: t for t in result.scalars().all()}
    missing = sorted(item_type_ids - item_types.keys())
    if missing:
        raise InvalidInputError(f"Unknown item type: {', '.join(missing[:3])}")

    return suppliers, item_types


def _apply(
    item: ShipmentItem,
    data: dict,
    suppliers: dict[str, Supplier],
    item_types: dict[str, ItemType],
) -> None:
    if "supplier_id" in data:
        item.supplier = suppliers[data["supplier_id"]]
        item.supplier_id = data["supplier_id"]
    if "item_type_id" in data:
        item.item_type = item_types[data["item_type_id"]]
        item.item_type_id = data["item_type_id"]
    if "item_photo_url" in data:
        item.item_photo_url = data["item_photo_url"]
    if "ctn" in data:
        item.ctn = data["ctn"]
    if "pcs_per_ctn" in data:
        item.pcs_per_ctn = data["pcs_per_ctn"]
    if "pri" in data:
        item.pri = calculator.money(data["pri"])

    item.cou = calculator.cou(item.ctn, item.pcs_per_ctn)
    item.total = calculator.line_total(item.ctn, item.pcs_per_ctn, item.pri)


def _refresh_totals(shipment: Shipment) -> None:
    total = calculator.shipment_total_price(shipment.items)
    if total > calculator.MAX_MONEY:
        raise InvalidInputError(
            f"Shipment total {total} exceeds the maximum of {calculator.MAX_MONEY}",
            error_code="TOTAL_TOO_LARGE",
        )
    refresh_importing_totals(shipment)


def _item_fields(body: ShipmentItemIn) -> dict:
    return body.model_dump(include={
        "supplier_id", "item_type_id", "item_photo_url", "ctn", "pcs_per_ctn", "pri",
    })


def find_item(shipment: Shipment, item_id: str) -> ShipmentItem | None:
    return next((i for i in shipment.items if i.id == item_id), None)


async def add_item(db: AsyncSession, shipment: Shipment, body: ShipmentItemIn) -> ShipmentItem:
    suppliers, item_types = await _load_references(db, [body.supplier_id], [body.item_type_id])
    item = ShipmentItem()
    _apply(item, _item_fields(body), suppliers, item_types)
    shipment.items.append(item)
    _refresh_totals(shipment)
    return item


async def update_item(
    db: AsyncSession,
    shipment: Shipment,
    item: ShipmentItem,
    body: ShipmentItemUpdate,
) -> ShipmentItem:
    data = body.model_dump(exclude_unset=True)
    suppliers, item_types = await _load_references(
        db,
        [data["supplier_id"]] if "supplier_id" in data else [],
        [data["item_type_id"]] if "item_type_id" in data else [],
    )
    _apply(item, data, suppliers, item_types)
    _refresh_totals(shipment)
    return item


def remove_item(shipment: Shipment, item: ShipmentItem) -> None:
    # delete-orphan cascade removes the row at flush
    shipment.items.remove(item)
    _refresh_totals(shipment)


async def replace_items(
    db: AsyncSession,
    shipment: Shipment,
    rows: Sequence[BulkItemRow],
) -> list[ShipmentItem]:
    """Make the shipment's items exactly `rows`.

    Diff against the current items: delete the ones not mentioned, update
    the ones whose id matches, insert the rest. All references are checked
    before anything is changed, and the whole diff is flushed in the
    request's transaction, so a failure leaves the old item set intact.
    """
    suppliers, item_types = await _load_references(
        db,
        [r.supplier_id for r in rows],
        [r.item_type_id for r in rows],
    )

    existing = {item.id: item for item in shipment.items}
    incoming_ids = {r.id for r in rows if r.id}

    removed = [item for item_id, item in existing.items() if item_id not in incoming_ids]
    for item in removed:
        shipment.items.remove(item)

    result: list[ShipmentItem] = []
    updated = created = 0
    for row in rows:
        item = existing.get(row.id) if row.id else None
        if item is None:
            item = ShipmentItem()
            shipment.items.append(item)
            created += 1
        else:
            updated += 1
        _apply(item, _item_fields(row), suppliers, item_types)
        result.append(item)

    _refresh_totals(shipment)
    logger.info(
        "Replaced items on shipment %s: %d created, %d updated, %d removed",
        shipment.id, created, updated, len(removed),
    )
    return result
