from pydantic import BaseModel, Field, UUID4
from typing import Optional
from datetime import datetime

from worknexus.models.payment import PaymentStatus


class PaymentCreateRequest(BaseModel):
    job_id: UUID4
    worker_id: UUID4
    amount: float = Field(..., gt=0)
    payment_method: Optional[str] = Field(None, max_length=50)


class PaymentCompleteRequest(BaseModel):
    transaction_id: Optional[str] = Field(None, max_length=120)


class PaymentResponse(BaseModel):
    id: UUID4
    job_id: UUID4
    organizer_id: UUID4
    worker_id: UUID4
    amount: float
    platform_fee: float
    worker_payout: float
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    status: PaymentStatus
    created_at: datetime
    paid_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RatingCreateRequest(BaseModel):
    rated_id: UUID4
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = Field(None, max_length=2000)


class RatingResponse(BaseModel):
    id: UUID4
    job_id: UUID4
    rater_id: UUID4
    rated_id: UUID4
    rating: int
    review: Optional[str] = None
    is_organizer_rating: bool
    created_at: datetime

    class Config:
        from_attributes = True


class EarningsEstimate(BaseModel):
    hourly_rate: float
    hours_per_day: int
    days_per_week: int
    weeks_per_month: int
    daily: float
    weekly: float
    monthly: float
    yearly: float
    platform_fee_rate: float
    net_monthly: float
