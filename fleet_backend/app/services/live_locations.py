"""
Simulated live vehicle positions.

Moves every active vehicle with a known route one waypoint further along
that route, with a little jitter so markers do not stack.
"""

import logging
import math
import random
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.core.dates import as_utc, utcnow
from fleet_backend.app.models.enums import VehicleStatus
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.services.changefeed import ChangeType, change_feed

logger = logging.getLogger(__name__)

Waypoint = Tuple[float, float]

JITTER_DEGREES = 0.01

ROUTE_WAYPOINTS: Dict[str, List[Waypoint]] = {
    "Nairobi-Mombasa": [
        (-1.2921, 36.8219),   # Nairobi
        (-1.5167, 37.2667),   # Athi River
        (-2.0833, 37.6500),   # Mtito Andei
        (-2.7833, 38.2333),   # Voi
        (-3.9833, 39.6667),   # Mariakani
        (-4.0435, 39.6682),   # Mombasa
    ],
    "Nairobi-Nakuru": [
        (-1.2921, 36.8219),   # Nairobi
        (-1.1027, 36.9667),   # Limuru
        (-0.7167, 36.4333),   # Naivasha
        (-0.3031, 36.0800),   # Nakuru
    ],
    "Thika Highway": [
        (-1.2921, 36.8219),   # Nairobi
        (-1.1694, 36.9667),   # Ruiru
        (-1.0395, 37.0694),   # Juja
        (-1.0333, 37.0833),   # Thika
    ],
    "Nairobi-Kisumu": [
        (-1.2921, 36.8219),   # Nairobi
        (-1.1027, 36.9667),   # Limuru
        (-0.3031, 36.0800),   # Nakuru
        (-0.0917, 34.7680),   # Kisumu
    ],
}


def closest_waypoint(points: List[Waypoint], lat: Optional[float], lng: Optional[float]) -> int:
    """Index of the waypoint nearest to (lat, lng); 0 when the position is unknown."""
    if lat is None or lng is None:
        return 0
    return min(range(len(points)), key=lambda i: math.hypot(points[i][0] - lat, points[i][1] - lng))


def next_position(points: List[Waypoint], lat: Optional[float], lng: Optional[float], rng=random) -> Waypoint:
    next_index = (closest_waypoint(points, lat, lng) + 1) % len(points)
    next_lat, next_lng = points[next_index]
    return (
        next_lat + (rng.random() - 0.5) * JITTER_DEGREES,
        next_lng + (rng.random() - 0.5) * JITTER_DEGREES,
    )


async def generate_live_locations(db: AsyncSession, now: Optional[datetime] = None, rng=random) -> int:
    """Advance active vehicles along their routes. Returns how many moved."""
    now = as_utc(now) if now else utcnow()
    vehicles = (await db.execute(
        select(Vehicle).where(Vehicle.status == VehicleStatus.ACTIVE)
    )).scalars().all()

    moved = []
    for vehicle in vehicles:
        points = ROUTE_WAYPOINTS.get(vehicle.route_assigned or "")
        if not points:
            continue
        vehicle.current_latitude, vehicle.current_longitude = next_position(
            points, vehicle.current_latitude, vehicle.current_longitude, rng=rng
        )
        vehicle.last_location_update = now
        moved.append(vehicle.id)

    if moved:
        await db.commit()
        for vehicle_id in moved:
            change_feed.notify("vehicles", ChangeType.UPDATE, vehicle_id)

    logger.info("Updated %d vehicle locations", len(moved))
    return len(moved)
