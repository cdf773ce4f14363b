"""Aggregate model imports for Alembic auto-detection."""

from shiptrack.models.user import User, UserRole  # noqa: F401
from shiptrack.models.supplier import Supplier  # noqa: F401
from shiptrack.models.item_type import ItemType  # noqa: F401
from shiptrack.models.shipment import Shipment, ShipmentStatus  # noqa: F401
from shiptrack.models.shipment_item import ShipmentItem  # noqa: F401
from shiptrack.models.importing_details import ImportingDetails  # noqa: F401
from shiptrack.models.customs import Customs, CustomsPerType  # noqa: F401
from shiptrack.models.activity_log import ActivityLog  # noqa: F401
