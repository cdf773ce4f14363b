import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shiptrack import __version__
from shiptrack.config import settings
from shiptrack.middleware.exceptions import register_exception_handlers
from shiptrack.middleware.security import SecurityHeadersMiddleware
from shiptrack.routers import (
    activity,
    auth,
    customs,
    dashboard,
    health,
    importing,
    item_types,
    items,
    shipments,
    suppliers,
    users,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="ShipTrack",
    description="Imported shipment inventory and customs tracking",
    version=__version__,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware (outermost first) ─────────────────────────────
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router, prefix="/api")
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(suppliers.router, prefix="/api/suppliers", tags=["suppliers"])
app.include_router(item_types.router, prefix="/api/item-types", tags=["item-types"])
app.include_router(shipments.router, prefix="/api/shipments", tags=["shipments"])
app.include_router(items.router, prefix="/api/shipments", tags=["items"])
app.include_router(importing.router, prefix="/api/shipments", tags=["importing"])
app.include_router(customs.router, prefix="/api", tags=["customs"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
app.include_router(activity.router, prefix="/api/activity", tags=["activity"])
