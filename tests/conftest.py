"""Pytest configuration and fixtures."""

import os

# must be set before enquiry_svc.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import enquiry_svc.utils.security as security
from enquiry_svc.app import app
from enquiry_svc.models import Base, Enquiry, EnquiryStatus, User, UserRole, get_db


@pytest.fixture(autouse=True)
def use_test_security(monkeypatch):
    # pure-python hashing scheme and fixed signing key for deterministic tests
    monkeypatch.setattr(security, "pwd_context", CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto"))
    monkeypatch.setattr(security.config, "SECRET_KEY", "test-secret")
    monkeypatch.setattr(security.config, "ALGORITHM", "HS256")
    yield


@pytest.fixture(scope="function")
def db_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    # let unhandled errors surface as 500 responses
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def create_user(
    db_session: Session,
    email: str,
    password: str = "pw123456",
    role: UserRole = UserRole.Staff,
    name: str = "Tester",
) -> User:
    user = User(
        email=email,
        name=name,
        role=role,
        hashed_password=security.get_password_hash(password),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def create_enquiry(db_session: Session, **overrides) -> Enquiry:
    values = {
        "customer_name": "John Doe",
        "email": "john@example.com",
        "phone": "1234567890",
        "message": "Test",
        "status": EnquiryStatus.New,
    }
    values.update(overrides)
    enquiry = Enquiry(**values)
    db_session.add(enquiry)
    db_session.commit()
    db_session.refresh(enquiry)
    return enquiry


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {security.create_user_token(user)}"}


@pytest.fixture
def admin(db_session) -> User:
    return create_user(db_session, "admin@example.com", role=UserRole.Admin, name="Admin")


@pytest.fixture
def staff(db_session) -> User:
    return create_user(db_session, "staff@example.com", role=UserRole.Staff, name="Staff One")


@pytest.fixture
def other_staff(db_session) -> User:
    return create_user(db_session, "staff2@example.com", role=UserRole.Staff, name="Staff Two")


@pytest.fixture
def regular_user(db_session) -> User:
    return create_user(db_session, "user@example.com", role=UserRole.User, name="Regular")
