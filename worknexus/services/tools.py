"""
Worker-side calculators and schedule helpers.
"""

from typing import Dict, List

from worknexus.core.config import settings
from worknexus.models.worker import WorkerAvailability
from worknexus.schemas.payment import EarningsEstimate
from worknexus.schemas.worker import AvailabilitySlot

DEFAULT_START = "09:00"
DEFAULT_END = "18:00"


def estimate_earnings(
    hourly_rate: float,
    hours_per_day: int,
    days_per_week: int,
    weeks_per_month: int,
) -> EarningsEstimate:
    """Project gross earnings and the monthly amount after the platform fee."""
    daily = hourly_rate * hours_per_day
    weekly = daily * days_per_week
    monthly = weekly * weeks_per_month
    fee_rate = settings.PLATFORM_FEE_RATE
    return EarningsEstimate(
        hourly_rate=hourly_rate,
        hours_per_day=hours_per_day,
        days_per_week=days_per_week,
        weeks_per_month=weeks_per_month,
        daily=round(daily, 2),
        weekly=round(weekly, 2),
        monthly=round(monthly, 2),
        yearly=round(monthly * 12, 2),
        platform_fee_rate=fee_rate,
        net_monthly=round(monthly * (1 - fee_rate), 2),
    )


def default_slot(day_of_week: int) -> AvailabilitySlot:
    # Sunday (0) off, Monday-Saturday 09:00-18:00
    return AvailabilitySlot(
        day_of_week=day_of_week,
        is_available=day_of_week != 0,
        start_time=DEFAULT_START,
        end_time=DEFAULT_END,
    )


def full_week(rows: List[WorkerAvailability]) -> List[AvailabilitySlot]:
    """Seven slots, Sunday first, filling unsaved days with defaults."""
    stored: Dict[int, WorkerAvailability] = {row.day_of_week: row for row in rows}
    week = []
    for day in range(7):
        row = stored.get(day)
        week.append(AvailabilitySlot.model_validate(row) if row else default_slot(day))
    return week
