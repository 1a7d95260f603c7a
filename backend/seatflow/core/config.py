"""
SeatFlow - Runtime configuration
.env + environment variables, read once at import time.
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(value)


# Per-segment selection cap; unset means "one seat per traveler"
MAX_SELECTIONS = _optional_int(os.getenv("SEATMAP_MAX_SELECTIONS"))

# Columns with fewer seats than this share of rows are drawn as aisles
AISLE_OCCUPANCY_THRESHOLD = float(os.getenv("SEATMAP_AISLE_OCCUPANCY_THRESHOLD", "0.10"))

DEFAULT_CURRENCY = os.getenv("SEATMAP_DEFAULT_CURRENCY", "EUR")

SESSION_TTL_MINUTES = int(os.getenv("SEATMAP_SESSION_TTL_MINUTES", "20"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
