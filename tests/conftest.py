from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sab_api.core import security as security_module
from sab_api.core.config import get_settings
from sab_api.core.security import issue_access_token
from sab_api.db.base import create_schema
from sab_api.db.session import enable_sqlite_foreign_keys, get_db
from sab_api.dependencies import RequestContext
from sab_api.main import app
from sab_api.models import Activity, Tenant, User
from sab_api.services.local_auth import hash_password

TEST_PASSWORD = "StrongPassw0rd!"


def _reset_runtime_auth_state() -> None:
    security_module._redis_client = None
    security_module._LOCAL_BLACKLIST.clear()


@pytest.fixture(autouse=True)
def test_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("SAB_AUTH_JWT_SECRET", "sab-test-secret-key-at-least-32-bytes")
    monkeypatch.setenv("SAB_AUTH_JWT_ALGORITHMS", "HS256")
    monkeypatch.setenv("SAB_AUTH_PASSWORD_HASH_ITERATIONS", "1000")
    monkeypatch.setenv("SAB_DB_AUTO_CREATE", "false")
    monkeypatch.delenv("SAB_REDIS_URL", raising=False)
    monkeypatch.delenv("SAB_ACTIVITY_POLICY", raising=False)
    get_settings.cache_clear()
    _reset_runtime_auth_state()
    yield
    _reset_runtime_auth_state()
    get_settings.cache_clear()


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    enable_sqlite_foreign_keys(engine)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker:
    return sessionmaker(bind=db_engine, autoflush=False, autocommit=False, class_=Session)


@pytest.fixture
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def api_client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def seed_user(
    db: Session,
    username: str,
    *,
    role: str = "user",
    status: str = "active",
    tenant_id: int | None = None,
) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
        status=status,
        tenant_id=tenant_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def seed_tenant(db: Session, name: str, *, domain: str | None = None, status: str = "active") -> Tenant:
    tenant = Tenant(name=name, domain=domain, status=status)
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


def auth_headers(user: User) -> dict[str, str]:
    issued = issue_access_token(user_id=user.id, username=user.username, role=user.role)
    return {"Authorization": f"Bearer {issued.access_token}"}


def context_for(user: User) -> RequestContext:
    issued = issue_access_token(user_id=user.id, username=user.username, role=user.role)
    claims = security_module.parse_authorization_header(f"Bearer {issued.access_token}")
    return RequestContext(
        user_id=user.id,
        username=user.username,
        role=user.role,
        tenant_id=user.tenant_id,
        claims=claims,
    )


def activity_actions(db: Session) -> list[str]:
    db.expire_all()
    return list(db.execute(select(Activity.action).order_by(Activity.id)).scalars().all())


def row_count(db: Session, model) -> int:
    db.expire_all()
    return int(db.execute(select(func.count()).select_from(model)).scalar_one())


@pytest.fixture
def admin(db_session: Session) -> User:
    return seed_user(db_session, "root", role="admin")


@pytest.fixture
def member(db_session: Session) -> User:
    return seed_user(db_session, "alice")


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def member_headers(member: User) -> dict[str, str]:
    return auth_headers(member)
