from fastapi import APIRouter, Query

from worknexus.schemas.payment import EarningsEstimate
from worknexus.services.tools import estimate_earnings

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.get("/earnings", response_model=EarningsEstimate)
def earnings_calculator(
    hourly_rate: float = Query(200, ge=50, le=1000),
    hours_per_day: int = Query(8, ge=1, le=12),
    days_per_week: int = Query(5, ge=1, le=7),
    weeks_per_month: int = Query(4, ge=1, le=4),
):
    """Projected earnings for a given rate and schedule."""
    return estimate_earnings(hourly_rate, hours_per_day, days_per_week, weeks_per_month)
