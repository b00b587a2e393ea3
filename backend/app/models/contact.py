"""
Contact model, scoped by owning user
"""
import re
from uuid import uuid4

from sqlalchemy import (Column, DateTime, ForeignKey, String, UniqueConstraint,
                        Uuid)
from sqlalchemy.orm import validates

from app.core.database import Base
from app.core.errors import ValidationError
from app.models.user import utcnow

PHONE_PATTERN = re.compile(r"^\+?[0-9]{10,15}$")

# Field name -> name used in API payloads and error messages
REQUIRED_FIELDS = {
    "email": "email",
    "first_name": "firstName",
    "last_name": "lastName",
    "phone": "phone",
}


class Contact(Base):
    """Contact owned by exactly one user.

    ``user_id`` is a plain back-reference used for filtering; there is no
    relationship or cascade to the owner.
    """
    __tablename__ = "contacts"
    __table_args__ = (
        UniqueConstraint("user_id", "phone", name="uq_contacts_user_phone"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    phone = Column(String(16), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    @validates("email", "first_name", "last_name")
    def validate_required_text(self, key, value):
        if value is None or not str(value).strip():
            raise ValidationError(f"{REQUIRED_FIELDS[key]} is required")
        return value

    @validates("phone")
    def validate_phone(self, key, value):
        if value is None or value == "":
            raise ValidationError("phone is required")
        if not isinstance(value, str) or not PHONE_PATTERN.match(value):
            raise ValidationError(
                "phone must be 10 to 15 digits with an optional leading '+'"
            )
        return value

    def __repr__(self):
        return f"<Contact(id={self.id}, user_id={self.user_id}, phone={self.phone})>"
