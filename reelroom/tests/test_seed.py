from sqlalchemy import func, select

from reelroom.bootstrap.seed import (
    PERMISSIONS,
    seed_demo_accounts,
    seed_reference_data,
)
from reelroom.models.users import Permission, Role, User
from reelroom.services import auth_service


def test_reference_data_is_idempotent(db_session):
    seed_reference_data(db_session)
    seed_reference_data(db_session)

    assert db_session.scalar(select(func.count(Role.id))) == 2
    assert db_session.scalar(select(func.count(Permission.id))) == len(PERMISSIONS)

    admin = db_session.execute(select(Role).where(Role.name == "admin")).scalar_one()
    assert sorted(auth_service.load_permissions(db_session, admin.id)) == sorted(
        PERMISSIONS
    )


def test_demo_accounts_log_in_with_seeded_passwords(db_session, tokens):
    assert seed_demo_accounts(db_session) == 2
    assert seed_demo_accounts(db_session) == 0

    admin = auth_service.authenticate(db_session, tokens, "admin", "admin123")
    user = auth_service.authenticate(db_session, tokens, "user@example.com", "user123")

    assert admin is not None and admin.user.role.name == "admin"
    assert user is not None and user.user.role.name == "user"
    assert auth_service.authenticate(db_session, tokens, "admin", "user123") is None

    stored = db_session.execute(select(User).where(User.username == "admin")).scalar_one()
    assert stored.password_hash.startswith("demo-salt:")
