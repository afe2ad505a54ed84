import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

from collections.abc import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import StaticPool, create_engine, select  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from reelroom.bootstrap.seed import seed_reference_data  # noqa: E402
from reelroom.core.database import (  # noqa: E402
    Base,
    enable_sqlite_foreign_keys,
    get_db,
)
from reelroom.core.security import HashMode, TokenService, hash_password  # noqa: E402
from reelroom.main import app  # noqa: E402
from reelroom.models.users import AccessCode, Role, User  # noqa: E402

ADMIN_PASSWORD = "admin123"
USER_PASSWORD = "correct horse battery"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session]:
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, future=True)
    session = TestingSessionLocal()
    seed_reference_data(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session) -> Generator[TestClient]:
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def tokens(client) -> TokenService:
    return client.app.state.token_service


def get_role(db: Session, name: str) -> Role:
    return db.execute(select(Role).where(Role.name == name)).scalar_one()


def create_user(
    db: Session,
    username: str,
    *,
    role: str = "user",
    password: str = USER_PASSWORD,
    mode: HashMode = HashMode.random,
    team: str | None = None,
) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password, mode),
        role_id=get_role(db, role).id,
        team=team,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_code(db: Session, code: str, creator: User) -> AccessCode:
    access_code = AccessCode(code=code, created_by=creator.id)
    db.add(access_code)
    db.commit()
    db.refresh(access_code)
    return access_code


@pytest.fixture
def admin_user(db_session) -> User:
    return create_user(
        db_session, "admin", role="admin", password=ADMIN_PASSWORD, mode=HashMode.demo
    )


@pytest.fixture
def regular_user(db_session) -> User:
    return create_user(db_session, "bob", team="Blue")


@pytest.fixture
def admin_client(client, tokens, admin_user) -> tuple[TestClient, User]:
    client.cookies.set("auth-token", tokens.issue(admin_user), path="/")
    return client, admin_user


@pytest.fixture
def user_client(client, tokens, regular_user) -> tuple[TestClient, User]:
    client.cookies.set("auth-token", tokens.issue(regular_user), path="/")
    return client, regular_user
