"""
Contact service: owner scoping and duplicate-phone policy around the contact store
"""
from contextlib import contextmanager
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import (ContactBookError, DuplicatePhone, InternalError,
                             NotFound, ValidationError)
from app.core.logging_config import LoggingConfig
from app.core.metrics import contact_operations_total
from app.models.contact import REQUIRED_FIELDS, Contact
from app.repositories.contact_repository import ContactRepository

logger = LoggingConfig.get_logger(__name__)

CONTACT_NOT_FOUND = "Contact not found"


class ContactFields(BaseModel):
    """Fields submitted when creating a contact"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    phone: Optional[str] = None


class ContactPatch(BaseModel):
    """Partial update; only fields declared here can ever change"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    phone: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually supplied, nulls treated as absent"""
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


def project_contact(contact: Contact) -> Dict[str, Any]:
    """Public projection used by reads and updates"""
    return {
        "id": str(contact.id),
        "email": contact.email,
        "firstName": contact.first_name,
        "lastName": contact.last_name,
        "phone": contact.phone,
    }


def project_created_contact(contact: Contact) -> Dict[str, Any]:
    """Create response; the only projection that echoes the owner"""
    projection = project_contact(contact)
    projection["user_id"] = str(contact.user_id)
    return projection


def _parse_contact_id(contact_id) -> UUID:
    if isinstance(contact_id, UUID):
        return contact_id
    try:
        return UUID(str(contact_id))
    except ValueError:
        # An id that cannot exist is reported like any other missing contact
        raise NotFound(CONTACT_NOT_FOUND)


class ContactService:
    """Contact operations on behalf of one identified owner.

    Every store call goes through ContactRepository, which always filters by
    the owner id passed in here.
    """

    def __init__(self, db: Session):
        self.db = db
        self.contacts = ContactRepository(db)

    def create_contact(self, owner_id: UUID, fields: ContactFields) -> Dict[str, Any]:
        """
        Create a contact for an owner

        Raises:
            ValidationError: a required field is missing or malformed
            DuplicatePhone: the owner already has a contact with this phone
        """
        data = fields.model_dump()
        missing = [REQUIRED_FIELDS[name] for name, value in data.items()
                   if value is None or not str(value).strip()]
        if missing:
            self._record("create", "invalid")
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        with self._store_call("create"):
            if self.contacts.find_by_phone(owner_id, data["phone"]):
                raise DuplicatePhone()
            contact = self.contacts.add(owner_id, data)

        logger.info(
            "Contact created",
            extra={"user_id": str(owner_id), "contact_id": str(contact.id)}
        )
        self._record("create", "success")
        return project_created_contact(contact)

    def list_contacts(self, owner_id: UUID) -> Dict[str, Any]:
        """All of an owner's contacts with their count"""
        with self._store_call("list"):
            contacts: List[Contact] = self.contacts.list_for_owner(owner_id)
        projected = [project_contact(contact) for contact in contacts]
        self._record("list", "success")
        return {"contacts": projected, "count": len(projected)}

    def get_contact(self, owner_id: UUID, contact_id) -> Dict[str, Any]:
        """Raises NotFound for unknown ids and for other owners' contacts"""
        contact_uuid = self._parse_id("get", contact_id)
        with self._store_call("get"):
            contact = self.contacts.get(owner_id, contact_uuid)
        if contact is None:
            self._record("get", "not_found")
            raise NotFound(CONTACT_NOT_FOUND)
        self._record("get", "success")
        return project_contact(contact)

    def update_contact(self, owner_id: UUID, contact_id, patch: ContactPatch) -> Dict[str, Any]:
        """
        Apply a partial update

        Changing the phone to one used by another of the owner's contacts
        raises DuplicatePhone; keeping the current phone is always allowed.
        """
        contact_uuid = self._parse_id("update", contact_id)
        changes = patch.changes()

        with self._store_call("update"):
            contact = self.contacts.get(owner_id, contact_uuid)
            if contact is None:
                raise NotFound(CONTACT_NOT_FOUND)

            new_phone = changes.get("phone")
            if new_phone is not None and new_phone != contact.phone:
                if self.contacts.find_by_phone(owner_id, new_phone, exclude_id=contact_uuid):
                    raise DuplicatePhone()

            contact = self.contacts.update(contact, changes)

        logger.info(
            "Contact updated",
            extra={
                "user_id": str(owner_id),
                "contact_id": str(contact_uuid),
                "fields": sorted(changes),
            }
        )
        self._record("update", "success")
        return project_contact(contact)

    def delete_contact(self, owner_id: UUID, contact_id) -> Dict[str, Any]:
        """Delete an owner's contact and echo its id and name"""
        contact_uuid = self._parse_id("delete", contact_id)
        with self._store_call("delete"):
            contact = self.contacts.delete(owner_id, contact_uuid)
        if contact is None:
            self._record("delete", "not_found")
            raise NotFound(CONTACT_NOT_FOUND)

        logger.info(
            "Contact deleted",
            extra={"user_id": str(owner_id), "contact_id": str(contact_uuid)}
        )
        self._record("delete", "success")
        return {
            "id": str(contact.id),
            "firstName": contact.first_name,
            "lastName": contact.last_name,
        }

    def _parse_id(self, operation: str, contact_id) -> UUID:
        try:
            return _parse_contact_id(contact_id)
        except NotFound:
            self._record(operation, "not_found")
            raise

    def _record(self, operation: str, status: str):
        contact_operations_total.labels(operation=operation, status=status).inc()


    @contextmanager
    def _store_call(self, operation: str):
        """Roll back on failure and translate store errors into service errors"""
        try:
            yield
        except ContactBookError as e:
            self.db.rollback()
            status = {
                DuplicatePhone: "duplicate",
                NotFound: "not_found",
                ValidationError: "invalid",
            }.get(type(e), "error")
            self._record(operation, status)
            raise
        except IntegrityError as e:
            # Lost a race against the (user_id, phone) unique constraint
            self.db.rollback()
            self._record(operation, "duplicate")
            raise DuplicatePhone() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Store error during contact {operation}: {e}", exc_info=True)
            self._record(operation, "error")
            raise InternalError() from e
