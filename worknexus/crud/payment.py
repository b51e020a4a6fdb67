"""
CRUD operations for payments and ratings.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from worknexus.models.payment import Payment, Rating


def get_by_id(db: Session, payment_id: UUID) -> Optional[Payment]:
    return db.query(Payment).filter(Payment.id == payment_id).first()


def get_for_user(db: Session, user_id: UUID) -> List[Payment]:
    """Payments where the user is either the paying organizer or the paid worker."""
    return (
        db.query(Payment)
        .filter(or_(Payment.worker_id == user_id, Payment.organizer_id == user_id))
        .order_by(Payment.created_at.desc())
        .all()
    )


def total_revenue(db: Session) -> float:
    """Sum of all payment amounts."""
    return float(db.query(func.coalesce(func.sum(Payment.amount), 0.0)).scalar() or 0.0)


def get_rating(db: Session, job_id: UUID, rater_id: UUID, rated_id: UUID) -> Optional[Rating]:
    return (
        db.query(Rating)
        .filter(Rating.job_id == job_id, Rating.rater_id == rater_id, Rating.rated_id == rated_id)
        .first()
    )


def get_ratings_for(db: Session, rated_id: UUID) -> List[Rating]:
    return (
        db.query(Rating)
        .filter(Rating.rated_id == rated_id)
        .order_by(Rating.created_at.desc())
        .all()
    )


def average_rating(db: Session, rated_id: UUID) -> float:
    value = db.query(func.avg(Rating.rating)).filter(Rating.rated_id == rated_id).scalar()
    return round(float(value), 2) if value is not None else 0.0
