"""Cancellation refund policy.

Policy tiers, by hours between the cancellation and check-in:
- FULL (100%): more than 48 hours
- PARTIAL (50%): more than 24 hours
- NONE (0%): 24 hours or less, including after check-in

This only decides the fraction. Moving money is the payment
collaborator's job.
"""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple, Optional

from homestay.utils.datetime import as_utc, utc_now


class RefundTier(NamedTuple):
    min_hours_exclusive: float
    fraction: float
    name: str


# Checked top to bottom; first tier whose threshold is exceeded wins
REFUND_TIERS: tuple[RefundTier, ...] = (
    RefundTier(48, 1.0, "full"),
    RefundTier(24, 0.5, "partial"),
)

NO_REFUND = RefundTier(float("-inf"), 0.0, "none")


def hours_until(check_in: datetime, now: Optional[datetime] = None) -> float:
    now = as_utc(now) if now is not None else utc_now()
    return (as_utc(check_in) - now).total_seconds() / 3600


def refund_tier(
    check_in: datetime,
    now: Optional[datetime] = None,
    tiers: tuple[RefundTier, ...] = REFUND_TIERS,
) -> RefundTier:
    """
    Pick the refund tier for a cancellation made at ``now``.

    Args:
        check_in: Booking check-in
        now: Cancellation time (defaults to current UTC time)
        tiers: Policy table, highest threshold first

    Returns:
        RefundTier: Matching tier, or NO_REFUND
    """
    hours = hours_until(check_in, now)
    for tier in tiers:
        if hours > tier.min_hours_exclusive:
            return tier
    return NO_REFUND


def refund_fraction(check_in: datetime, now: Optional[datetime] = None) -> float:
    """
    Fraction of the total price returned to the guest.

    Example:
        >>> from datetime import timedelta
        >>> now = utc_now()
        >>> refund_fraction(now + timedelta(hours=30), now)
        0.5
    """
    return refund_tier(check_in, now).fraction
