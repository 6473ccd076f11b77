"""Night counting and price composition for new bookings."""

from __future__ import annotations

import math
from datetime import datetime
from typing import NamedTuple, Optional

SERVICE_FEE_RATE = 0.14
TAX_RATE = 0.05  # VAT

SECONDS_PER_NIGHT = 24 * 60 * 60


class PriceBreakdown(NamedTuple):
    nightly_rate: float
    nights: int
    subtotal: float
    cleaning_fee: float
    service_fee: float
    taxes: float
    total_price: float


def count_nights(check_in: datetime, check_out: datetime) -> int:
    """
    Number of nights between two instants, rounding partial days up.

    Args:
        check_in: Arrival (timezone-aware)
        check_out: Departure (timezone-aware)

    Returns:
        int: ceil(hours / 24)
    """
    return math.ceil((check_out - check_in).total_seconds() / SECONDS_PER_NIGHT)


def calculate_price(
    nightly_rate: float, nights: int, cleaning_fee: Optional[float] = None
) -> PriceBreakdown:
    """
    Compose the price of a stay. Plain float arithmetic, no rounding.

    Args:
        nightly_rate: Listing price per night
        nights: Length of stay
        cleaning_fee: One-off cleaning fee (None counts as 0)

    Returns:
        PriceBreakdown with subtotal, fees, taxes and total

    Example:
        >>> calculate_price(100, 5, 50).total_price
        645.0
    """
    subtotal = nightly_rate * nights
    cleaning = cleaning_fee or 0
    service_fee = subtotal * SERVICE_FEE_RATE
    taxes = subtotal * TAX_RATE
    total_price = subtotal + cleaning + service_fee + taxes

    return PriceBreakdown(
        nightly_rate=nightly_rate,
        nights=nights,
        subtotal=subtotal,
        cleaning_fee=cleaning,
        service_fee=service_fee,
        taxes=taxes,
        total_price=total_price,
    )
