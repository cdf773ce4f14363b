"""ShipTrack — imported shipment, costing and customs tracking API."""

__version__ = "0.1.0"
