"""
Persistence access for users and contacts
"""
from app.repositories.contact_repository import ContactRepository  # noqa: F401
from app.repositories.user_repository import UserRepository  # noqa: F401
