"""
Credential store: persisted user records
"""
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.user import User


class UserRepository:
    """Read/write access to the users table"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        """Exact, case-sensitive lookup"""
        return self.db.query(User).filter(User.email == email).first()

    def add(self, email: str, password_hash: str) -> User:
        """Insert a user and commit; IntegrityError propagates on a duplicate email"""
        user = User(email=email, password_hash=password_hash)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
