"""Human-facing booking codes, e.g. ``HS123456AB3K``."""

import random
import string
import time
from typing import Optional

BOOKING_CODE_PREFIX = "HS"
_BASE36 = string.digits + string.ascii_uppercase


def generate_booking_code(now_ms: Optional[int] = None) -> str:
    """
    Build a booking code: prefix + last 6 digits of epoch millis + 4 base36 chars.

    Practically unique, not guaranteed: the bookings table has a unique
    index on the column and a clash surfaces as a failed insert.

    Args:
        now_ms: Epoch milliseconds override (tests)

    Returns:
        str: 12-character booking code
    """
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=4))
    return f"{BOOKING_CODE_PREFIX}{str(millis)[-6:].zfill(6)}{suffix}"
