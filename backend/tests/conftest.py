"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path

# Settings are read on first import of the app; configure the test
# environment before anything from app/ is imported.
os.environ.setdefault("JWT_SECRET", "test-signing-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DATABASE_AUTO_CREATE", "false")

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

import app.models  # noqa: E402,F401 - register models with Base.metadata
from app.core.database import Base, get_db, get_engine, get_session_local  # noqa: E402
from app.core.security import hash_password  # noqa: E402
from app.models.user import User  # noqa: E402

DEFAULT_PASSWORD = "testpassword123"


@pytest.fixture(scope="function")
def db() -> Session:
    """Database session on a freshly created schema"""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def app_instance():
    from main import app
    return app


@pytest.fixture(scope="function")
def token_service(app_instance):
    return app_instance.state.token_service


@pytest.fixture(scope="function")
def client(db: Session, app_instance):
    """Create test client with database dependency override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app_instance.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app_instance)
    yield test_client
    app_instance.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_user(db: Session):
    """Factory inserting a user directly into the credential store"""
    def _make_user(email: str = None, password: str = DEFAULT_PASSWORD) -> User:
        user = User(
            email=email or f"user-{uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture(scope="function")
def auth_headers(token_service):
    """Build an Authorization header for a user"""
    def _auth_headers(user: User) -> dict:
        token = token_service.issue(user.id, user.email)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture(scope="function")
def valid_contact():
    return {
        "email": "contact@example.com",
        "firstName": "John",
        "lastName": "Doe",
        "phone": "1234567890",
    }
