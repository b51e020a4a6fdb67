import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from worknexus.core.database import get_db
from worknexus.core.deps import get_current_user
from worknexus.crud import checkin as checkin_crud
from worknexus.models.checkin import EmergencyContact
from worknexus.models.user import User
from worknexus.schemas.safety import EmergencyContactCreateRequest, EmergencyContactResponse

router = APIRouter(prefix="/emergency-contacts", tags=["Safety"])
logger = logging.getLogger(__name__)


def _get_own_contact(db: Session, contact_id: UUID, user: User) -> EmergencyContact:
    contact = checkin_crud.get_contact(db, contact_id)
    if not contact or contact.user_id != user.id:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.get("", response_model=List[EmergencyContactResponse])
def list_contacts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return checkin_crud.get_contacts(db, current_user.id)


@router.post("", status_code=201, response_model=EmergencyContactResponse)
def add_contact(
    request: EmergencyContactCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add an emergency contact. The first one added becomes primary."""
    name, phone, relationship = request.name.strip(), request.phone.strip(), request.relationship.strip()
    if not (name and phone and relationship):
        raise HTTPException(status_code=400, detail="Name, phone and relationship are required")

    contact = checkin_crud.create_contact(db, current_user.id, name, phone, relationship)
    logger.info(f"Emergency contact added for user {current_user.id}")
    return contact


@router.delete("/{contact_id}", status_code=204)
def delete_contact(
    contact_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    contact = _get_own_contact(db, contact_id, current_user)
    checkin_crud.delete_contact(db, contact)
    return None


@router.post("/{contact_id}/primary", response_model=EmergencyContactResponse)
def make_primary(
    contact_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    contact = _get_own_contact(db, contact_id, current_user)
    return checkin_crud.set_primary_contact(db, contact)
