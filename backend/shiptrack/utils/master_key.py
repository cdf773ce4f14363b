"""Backend master key generation.

Format:  SHP-<milliseconds since epoch, base36>-<6 random base36 chars>
Example: SHP-LZ3K9Q1A-7XQ2MD

The key is the shipment's stable external cross-reference; it is unique
across all shipments and never derived from user input.
"""

import secrets
import string
import time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shiptrack.models.shipment import Shipment

ALPHABET = string.digits + string.ascii_uppercase
RANDOM_LENGTH = 6
MAX_ATTEMPTS = 5


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(ALPHABET[rem])
    return "".join(reversed(digits))


def generate_master_key(now_ms: int | None = None) -> str:
    stamp = _base36(now_ms if now_ms is not None else int(time.time() * 1000))
    suffix = "".join(secrets.choice(ALPHABET) for _ in range(RANDOM_LENGTH))
    return f"SHP-{stamp}-{suffix}"


async def master_key_in_use(db: AsyncSession, key: str, exclude_id: str | None = None) -> bool:
    query = select(Shipment.id).where(Shipment.backend_master_key == key)
    if exclude_id:
        query = query.where(Shipment.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


async def next_master_key(db: AsyncSession) -> str:
    """Generate a key not yet used by any shipment."""
    for _ in range(MAX_ATTEMPTS):
        key = generate_master_key()
        if not await master_key_in_use(db, key):
            return key
    raise RuntimeError("Could not generate a unique master key")
