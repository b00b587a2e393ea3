"""
Contact API routes; every route requires a resolved identity
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import Identity, get_current_identity
from app.core.database import get_db
from app.services.contact_service import (ContactFields, ContactPatch,
                                          ContactService)

router = APIRouter(
    prefix="/contact",
    tags=["contacts"],
    dependencies=[Depends(get_current_identity)],
)


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(db)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: ContactFields,
    identity: Identity = Depends(get_current_identity),
    contact_service: ContactService = Depends(get_contact_service),
):
    """Create a contact owned by the caller"""
    contact = contact_service.create_contact(identity.user_id, body)
    return {"message": "Contact added successfully", "contact": contact}


@router.get("")
async def list_contacts(
    identity: Identity = Depends(get_current_identity),
    contact_service: ContactService = Depends(get_contact_service),
):
    """List the caller's contacts"""
    result = contact_service.list_contacts(identity.user_id)
    return {"message": "Contacts retrieved successfully", **result}


@router.get("/{contact_id}")
async def get_contact(
    contact_id: str,
    identity: Identity = Depends(get_current_identity),
    contact_service: ContactService = Depends(get_contact_service),
):
    contact = contact_service.get_contact(identity.user_id, contact_id)
    return {"message": "Contact retrieved successfully", "contact": contact}


@router.patch("/{contact_id}")
async def update_contact(
    contact_id: str,
    body: Optional[ContactPatch] = None,
    identity: Identity = Depends(get_current_identity),
    contact_service: ContactService = Depends(get_contact_service),
):
    """Partially update one of the caller's contacts; a missing body changes nothing"""
    if body is None:
        body = ContactPatch()
    contact = contact_service.update_contact(identity.user_id, contact_id, body)
    return {"message": "Contact updated successfully", "contact": contact}


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: str,
    identity: Identity = Depends(get_current_identity),
    contact_service: ContactService = Depends(get_contact_service),
):
    deleted = contact_service.delete_contact(identity.user_id, contact_id)
    return {"message": "Contact deleted successfully", "deletedContact": deleted}
