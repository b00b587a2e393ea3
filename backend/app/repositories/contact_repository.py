"""
Contact store: every query is filtered by the owning user
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.contact import Contact


class ContactRepository:
    """Owner-scoped access to the contacts table.

    No method accepts a contact id without the owner id; a contact owned by
    someone else behaves exactly like one that does not exist.
    """

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, owner_id: UUID):
        return self.db.query(Contact).filter(Contact.user_id == owner_id)

    def list_for_owner(self, owner_id: UUID) -> List[Contact]:
        return self._owned(owner_id).order_by(Contact.created_at, Contact.id).all()

    def get(self, owner_id: UUID, contact_id: UUID) -> Optional[Contact]:
        return self._owned(owner_id).filter(Contact.id == contact_id).first()

    def find_by_phone(
        self,
        owner_id: UUID,
        phone: str,
        exclude_id: Optional[UUID] = None
    ) -> Optional[Contact]:
        """Find the owner's contact using ``phone``, optionally skipping one contact"""
        query = self._owned(owner_id).filter(Contact.phone == phone)
        if exclude_id is not None:
            query = query.filter(Contact.id != exclude_id)
        return query.first()

    def add(self, owner_id: UUID, fields: Dict[str, Any]) -> Contact:
        """Insert an owner-stamped contact and commit"""
        contact = Contact(user_id=owner_id, **fields)
        self.db.add(contact)
        self.db.commit()
        self.db.refresh(contact)
        return contact

    def update(self, contact: Contact, changes: Dict[str, Any]) -> Contact:
        """Apply changes to a contact previously loaded through this repository"""
        for field, value in changes.items():
            setattr(contact, field, value)
        self.db.commit()
        self.db.refresh(contact)
        return contact

    def delete(self, owner_id: UUID, contact_id: UUID) -> Optional[Contact]:
        """Delete the owner's contact in one statement; None if nothing matched"""
        contact = self.get(owner_id, contact_id)
        if contact is None:
            return None
        # Keep the loaded row readable after the DELETE commits
        self.db.expunge(contact)
        deleted = self._owned(owner_id).filter(Contact.id == contact_id).delete(
            synchronize_session=False
        )
        self.db.commit()
        return contact if deleted else None
