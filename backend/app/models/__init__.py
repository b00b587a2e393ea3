"""
SQLAlchemy models
"""
from app.core.database import Base  # noqa: F401
from app.models.contact import Contact  # noqa: F401
from app.models.user import User  # noqa: F401
