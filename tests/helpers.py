"""Shared builders for tests: isolated SQLite sessions, services and an HTTP client."""

from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookcircle.core.security import PasswordHasher, TokenIssuer
from bookcircle.models import Base
from bookcircle.repositories import SqlAccountRepository, SqlRevocationStore
from bookcircle.services.auth import AuthService

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"


def make_sessionmaker() -> sessionmaker:
    """Fresh in-memory database shared by every session from the returned factory."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_service(
    session: Session,
    live_role: bool = True,
    revocation: bool = True,
    rotate_refresh_tokens: bool = False,
    access_ttl: timedelta = timedelta(minutes=15),
    refresh_ttl: timedelta = timedelta(days=7),
) -> AuthService:
    return AuthService(
        accounts=SqlAccountRepository(session),
        hasher=PasswordHasher(rounds=4),
        access_tokens=TokenIssuer(ACCESS_SECRET, access_ttl, "access"),
        refresh_tokens=TokenIssuer(REFRESH_SECRET, refresh_ttl, "refresh"),
        revocations=SqlRevocationStore(session) if revocation else None,
        live_role=live_role,
        rotate_refresh_tokens=rotate_refresh_tokens,
    )


class ApiClient:
    """TestClient bound to a private database through a get_db override."""

    def __init__(self) -> None:
        from bookcircle.core.database import get_db
        from bookcircle.main import app

        self.app = app
        self.Session = make_sessionmaker()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def close(self) -> None:
        self.app.dependency_overrides.clear()
        self.client.close()

    def register(self, username: str, password: str = "hunter22", **extra: object):
        body = {"username": username, "password": password, "name": username.title()}
        body.update(extra)
        return self.client.post("/api/auth/register", json=body)

    def login(self, identifier: str, password: str = "hunter22"):
        return self.client.post(
            "/api/auth/login", json={"identifier": identifier, "password": password}
        )

    def set_role(self, username: str, role: str) -> None:
        """Promote directly in the store (admins are never self-registered)."""
        from bookcircle.models import Account

        with self.Session() as db:
            account = db.query(Account).filter(Account.username == username).one()
            account.role = role
            db.commit()

    def token_for(self, username: str, role: str | None = None) -> str:
        self.register(username)
        if role:
            self.set_role(username, role)
        return self.login(username).json()["access_token"]

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
