"""
Trip-related enumerations.
"""

import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    SCHEDULED = "scheduled"  # Created, not yet started
    IN_PROGRESS = "in_progress"  # Vehicle is on the road
    COMPLETED = "completed"  # Arrived
    CANCELLED = "cancelled"  # Trip cancelled
