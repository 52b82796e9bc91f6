"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.config import Settings
from app.database import Base, get_db
from app.models.role import RoleName
from app.services.auth import AuthService
from app.services.jwt import JWTService, get_jwt_service
from app.services.mail import MailDeliveryError, get_mail_sender
from app.services.password import PasswordHasher, get_password_hasher
from app.services.user_store import UserStore


class RecordingMailSender:
    """Mail sender double that records messages instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail = False

    def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise MailDeliveryError()
        self.sent.append({"to": to, "subject": subject, "html": html})

    def send_reset_password_email(self, to: str, reset_url: str, name: str | None = None) -> None:
        if self.fail:
            raise MailDeliveryError()
        self.sent.append({"to": to, "reset_url": reset_url, "name": name})

    def last_reset_token(self) -> str:
        return self.sent[-1]["reset_url"].rsplit("/", 1)[1]


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    """Settings with fixed secrets and no SMTP."""
    settings = Settings()
    settings.JWT_SECRET_ACCESS_TOKEN = "test-access-secret"
    settings.JWT_SECRET_REFRESH_TOKEN = "test-refresh-secret"
    settings.JWT_RESET_PASSWORD_SECRET = "test-reset-secret"
    settings.JWT_ACCESS_EXPIRE_MINUTES = 15
    settings.JWT_REFRESH_EXPIRE_MINUTES = 60
    settings.FRONTEND_URL = "http://frontend.test"
    settings.MAIL_HOST = ""
    return settings


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="hasher")
def hasher_fixture() -> PasswordHasher:
    """Argon2id with minimal cost so tests stay fast."""
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture(name="jwt_service")
def jwt_service_fixture(settings: Settings) -> JWTService:
    return JWTService(settings)


@pytest.fixture(name="mailer")
def mailer_fixture() -> RecordingMailSender:
    return RecordingMailSender()


@pytest.fixture(name="store")
def store_fixture(db_session: Session) -> UserStore:
    return UserStore(db_session)


@pytest.fixture(name="roles")
def roles_fixture(store: UserStore) -> dict:
    """Seed the three roles and return them by name."""
    return {name: store.get_or_create_role(name.value) for name in RoleName}


@pytest.fixture(name="auth_service")
def auth_service_fixture(
    store: UserStore,
    hasher: PasswordHasher,
    jwt_service: JWTService,
    mailer: RecordingMailSender,
    settings: Settings,
) -> AuthService:
    return AuthService(store=store, hasher=hasher, tokens=jwt_service, mailer=mailer, settings=settings)


@pytest.fixture(name="client")
def client_fixture(
    db_session: Session,
    hasher: PasswordHasher,
    jwt_service: JWTService,
    mailer: RecordingMailSender,
):
    """Create a test client wired to the test DB, fast hasher, fixed secrets and recording mailer."""
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_jwt_service] = lambda: jwt_service
    app.dependency_overrides[get_mail_sender] = lambda: mailer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(auth_service: AuthService, roles: dict):
    """Create a test user and return its id, credentials and token pair."""
    result = auth_service.signup("test@example.com", "password123")
    return {
        "user_id": result.user_id,
        "email": "test@example.com",
        "password": "password123",
        "access_token": result.access_token,
        "refresh_token": result.refresh_token,
    }


@pytest.fixture(name="admin_user")
def admin_user_fixture(auth_service: AuthService, store: UserStore, roles: dict):
    """Create a user holding the admin role and return its id and access token."""
    result = auth_service.signup("admin@example.com", "adminpass123")
    store.update(result.user_id, role_id=roles[RoleName.ADMIN].id)
    return {"user_id": result.user_id, "access_token": result.access_token}
