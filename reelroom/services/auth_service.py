import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from reelroom.core.security import TokenService, verify_password
from reelroom.models.users import Permission, User, role_permissions

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user: User
    permissions: list[str]
    token: str


def find_by_identifier(db: Session, identifier: str) -> User | None:
    identifier = identifier.strip()
    if not identifier:
        return None
    matches = (
        db.execute(
            select(User).where(
                or_(User.username == identifier, User.email == identifier.lower())
            )
        )
        .unique()
        .scalars()
        .all()
    )
    if len(matches) > 1:
        logger.warning("Login identifier matched %s accounts", len(matches))
        return None
    return matches[0] if matches else None


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def load_permissions(db: Session, role_id: int) -> list[str]:
    stmt = (
        select(Permission.name)
        .join(role_permissions, role_permissions.c.permission_id == Permission.id)
        .where(role_permissions.c.role_id == role_id)
        .order_by(Permission.name)
    )
    return list(db.execute(stmt).scalars())


def authenticate(
    db: Session,
    tokens: TokenService,
    identifier: str,
    password: str,
) -> AuthResult | None:
    """
    Check credentials and mint a session token.

    Unknown identifiers and wrong passwords both return ``None`` so callers
    cannot tell them apart.
    """
    user = find_by_identifier(db, identifier)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        return None

    permissions = load_permissions(db, user.role_id)
    user.last_login = datetime.now(UTC)
    db.commit()
    db.refresh(user)

    token = tokens.issue(user)
    logger.info("User %s logged in", user.id)
    return AuthResult(user=user, permissions=permissions, token=token)
