"""Utility modules for cross-cutting concerns."""

from utils.ids import generate_id
from utils.timezone import (
    now_utc,
    to_utc,
    to_local,
    local_today,
    next_anniversary,
    falls_within,
)
