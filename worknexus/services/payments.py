"""
Worker payouts and post-job ratings.

No payment gateway is involved: a payment row records what the organizer
owes, and completing it stamps the transaction reference.
"""

import logging
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from worknexus.core.config import settings
from worknexus.core.timeutils import utcnow
from worknexus.crud import application as application_crud
from worknexus.crud import job as job_crud
from worknexus.crud import payment as payment_crud
from worknexus.crud import profile as profile_crud
from worknexus.models.job import Job
from worknexus.models.notification import NotificationType
from worknexus.models.payment import Payment, PaymentStatus, Rating
from worknexus.models.user import User
from worknexus.schemas.payment import PaymentCreateRequest, RatingCreateRequest
from worknexus.services.notifications import publish_notifications, queue_notification

logger = logging.getLogger(__name__)


def split_amount(amount: float, fee_rate: float = None):
    """
    Split a gross amount into (platform_fee, worker_payout), rounded to paise.
    """
    rate = settings.PLATFORM_FEE_RATE if fee_rate is None else fee_rate
    fee = round(amount * rate, 2)
    return fee, round(amount - fee, 2)


def _get_owned_job(db: Session, job_id: UUID, user: User) -> Job:
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if job.organizer_id != user.id and not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the job organizer can do this")
    return job


def create_payment(db: Session, organizer: User, data: PaymentCreateRequest) -> Payment:
    job = _get_owned_job(db, data.job_id, organizer)
    if not application_crud.is_accepted(db, job.id, data.worker_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Worker was not hired for this job")

    fee, payout = split_amount(data.amount)
    payment = Payment(
        job_id=job.id,
        organizer_id=job.organizer_id,
        worker_id=data.worker_id,
        amount=data.amount,
        platform_fee=fee,
        worker_payout=payout,
        payment_method=data.payment_method,
        status=PaymentStatus.PENDING,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)

    logger.info(f"Payment {payment.id} of {payment.amount} created for job {job.id}")
    return payment


def complete_payment(db: Session, payment_id: UUID, organizer: User, transaction_id: str = None) -> Payment:
    """
    Mark a payment as paid and credit the worker with a completed job.

    Raises:
        HTTPException 400: Payment is not pending
        HTTPException 403: Caller is not the paying organizer
        HTTPException 404: Payment not found
    """
    payment = payment_crud.get_by_id(db, payment_id)
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    if payment.organizer_id != organizer.id and not organizer.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your payment")
    if payment.status not in (PaymentStatus.PENDING, PaymentStatus.PROCESSING):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Payment is already {payment.status.value}"
        )

    payment.status = PaymentStatus.COMPLETED
    payment.paid_at = utcnow()
    payment.transaction_id = transaction_id or f"TXN-{payment.id.hex[:12].upper()}"

    profile = profile_crud.get_by_id(db, payment.worker_id)
    if profile:
        profile.total_jobs_completed = (profile.total_jobs_completed or 0) + 1

    notification = queue_notification(
        db,
        payment.worker_id,
        "Payment received",
        f"You were paid {payment.worker_payout:.2f}",
        type=NotificationType.PAYMENT,
        related_id=payment.id,
    )
    db.commit()
    db.refresh(payment)

    logger.info(f"Payment {payment.id} completed ({payment.transaction_id})")
    publish_notifications([notification])
    return payment


def rate(db: Session, job_id: UUID, rater: User, data: RatingCreateRequest) -> Rating:
    """
    Leave a rating between a job's organizer and one of its hired workers.

    Raises:
        HTTPException 400: Rating yourself, or the pair did not work together
        HTTPException 404: Job not found
        HTTPException 409: Already rated this person for this job
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if data.rated_id == rater.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot rate yourself")

    if rater.id == job.organizer_id:
        worker_id, is_organizer_rating = data.rated_id, True
    elif data.rated_id == job.organizer_id:
        worker_id, is_organizer_rating = rater.id, False
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Ratings are between the organizer and hired workers")

    if not application_crud.is_accepted(db, job.id, worker_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Ratings are between the organizer and hired workers")
    if payment_crud.get_rating(db, job.id, rater.id, data.rated_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already rated this user for this job")

    rating = Rating(
        job_id=job.id,
        rater_id=rater.id,
        rated_id=data.rated_id,
        rating=data.rating,
        review=data.review.strip() if data.review else None,
        is_organizer_rating=is_organizer_rating,
    )
    db.add(rating)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already rated this user for this job")

    profile = profile_crud.get_by_id(db, data.rated_id)
    if profile:
        profile.rating = payment_crud.average_rating(db, data.rated_id)
    db.commit()
    db.refresh(rating)

    logger.info(f"User {rater.id} rated {data.rated_id} {data.rating}/5 for job {job.id}")
    return rating
