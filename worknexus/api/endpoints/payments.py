"""
Payments to workers and ratings exchanged after a job.
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user, get_organizer_user
from worknexus.crud import payment as payment_crud
from worknexus.models.user import User
from worknexus.schemas.payment import (
    PaymentCompleteRequest,
    PaymentCreateRequest,
    PaymentResponse,
    RatingCreateRequest,
    RatingResponse,
)
from worknexus.services import payments as payment_service

router = APIRouter(tags=["Payments"])


@router.post("/payments", status_code=201, response_model=PaymentResponse)
def create_payment(
    request: PaymentCreateRequest,
    current_user: User = Depends(get_organizer_user),
    db: Session = Depends(get_db)
):
    """
    Record a payout owed to a hired worker.

    The platform fee is deducted from the amount; the rest is the worker's
    payout.
    """
    return payment_service.create_payment(db, current_user, request)


@router.post("/payments/{payment_id}/complete", response_model=PaymentResponse)
def complete_payment(
    payment_id: UUID,
    request: PaymentCompleteRequest,
    current_user: User = Depends(get_organizer_user),
    db: Session = Depends(get_db)
):
    return payment_service.complete_payment(db, payment_id, current_user, request.transaction_id)


@router.get("/payments/me", response_model=List[PaymentResponse])
def list_my_payments(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Payments the caller made or received, newest first."""
    return payment_crud.get_for_user(db, current_user.id)


@router.post("/jobs/{job_id}/ratings", status_code=201, response_model=RatingResponse)
def rate_user(
    job_id: UUID,
    request: RatingCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Rate the other side of a job: organizers rate hired workers, hired
    workers rate the organizer.
    """
    return payment_service.rate(db, job_id, current_user, request)
