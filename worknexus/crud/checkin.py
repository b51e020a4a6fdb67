"""
CRUD operations for QR check-ins, safety check-ins and emergency contacts.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from worknexus.models.checkin import CheckinType, EmergencyContact, QRCheckin, SafetyCheckin


def get_qr_checkin(db: Session, job_id: UUID, worker_id: UUID) -> Optional[QRCheckin]:
    return (
        db.query(QRCheckin)
        .filter(QRCheckin.job_id == job_id, QRCheckin.worker_id == worker_id)
        .first()
    )


def build_safety_checkin(
    user_id: UUID,
    job_id: Optional[UUID],
    latitude: float,
    longitude: float,
    checkin_type: CheckinType,
    notes: Optional[str] = None,
) -> SafetyCheckin:
    return SafetyCheckin(
        user_id=user_id,
        job_id=job_id,
        latitude=latitude,
        longitude=longitude,
        checkin_type=checkin_type,
        notes=notes,
    )


# Emergency contacts

def get_contacts(db: Session, user_id: UUID) -> List[EmergencyContact]:
    """A user's contacts, primary first."""
    return (
        db.query(EmergencyContact)
        .filter(EmergencyContact.user_id == user_id)
        .order_by(EmergencyContact.is_primary.desc(), EmergencyContact.created_at.asc())
        .all()
    )


def get_contact(db: Session, contact_id: UUID) -> Optional[EmergencyContact]:
    return db.query(EmergencyContact).filter(EmergencyContact.id == contact_id).first()


def get_primary_contact(db: Session, user_id: UUID) -> Optional[EmergencyContact]:
    return (
        db.query(EmergencyContact)
        .filter(EmergencyContact.user_id == user_id, EmergencyContact.is_primary.is_(True))
        .first()
    )


def create_contact(db: Session, user_id: UUID, name: str, phone: str, relationship: str) -> EmergencyContact:
    """
    Add an emergency contact. The user's first contact becomes primary.
    """
    is_first = db.query(EmergencyContact).filter(EmergencyContact.user_id == user_id).count() == 0
    contact = EmergencyContact(
        user_id=user_id,
        name=name,
        phone=phone,
        relationship=relationship,
        is_primary=is_first,
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def delete_contact(db: Session, contact: EmergencyContact) -> None:
    db.delete(contact)
    db.commit()


def set_primary_contact(db: Session, contact: EmergencyContact) -> EmergencyContact:
    """Make contact the user's only primary contact."""
    db.query(EmergencyContact).filter(
        EmergencyContact.user_id == contact.user_id,
        EmergencyContact.id != contact.id,
    ).update({"is_primary": False}, synchronize_session=False)
    contact.is_primary = True
    db.commit()
    db.refresh(contact)
    return contact
