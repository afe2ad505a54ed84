import logging

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from reelroom.core.errors import (
    ConflictError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)
from reelroom.core.security import HashMode, hash_password
from reelroom.models.users import AccessCode, Role, User
from reelroom.schemas.users import AdminUserCreate, AdminUserOut, UserProfileOut

logger = logging.getLogger(__name__)


def to_admin_out(user: User) -> AdminUserOut:
    return AdminUserOut(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role.name,
        team=user.team,
        created_at=user.created_at,
        last_login=user.last_login,
    )


def to_profile_out(user: User) -> UserProfileOut:
    return UserProfileOut(
        id=user.id,
        username=user.username,
        role=user.role.name,
        team=user.team,
        created_at=user.created_at,
    )


def _select_hash_mode(payload: AdminUserCreate) -> HashMode:
    if payload.use_demo_salt:
        return HashMode.demo
    if payload.custom_salt is not None:
        return HashMode.custom
    return HashMode.random


def create_user_as_admin(db: Session, payload: AdminUserCreate) -> User:
    username = payload.username
    email = payload.email.lower()

    existing = db.execute(
        select(User.id).where(or_(User.username == username, User.email == email))
    ).first()
    if existing:
        raise ConflictError("Username or email already exists")

    role = db.execute(
        select(Role).where(Role.name == payload.role)
    ).scalar_one_or_none()
    if role is None:
        raise ValidationError(f"Unknown role: {payload.role}")

    try:
        password_hash = hash_password(
            payload.password, _select_hash_mode(payload), payload.custom_salt
        )
    except ValueError as exc:
        raise ValidationError("customSalt must be non-empty and contain no ':'") from exc

    user = User(
        username=username,
        email=email,
        password_hash=password_hash,
        role_id=role.id,
        team=payload.team,
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Username or email already exists") from exc

    db.refresh(user)
    logger.info("Admin created user %s with role %s", user.id, role.name)
    return user


def list_users(db: Session) -> list[User]:
    stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
    return list(db.execute(stmt).unique().scalars())


def delete_user(db: Session, actor: User, user_id: int) -> None:
    """Remove a user, the codes they consumed and their authorship of issued codes."""
    if user_id == actor.id:
        raise ValidationError("Cannot delete your own account")

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found or already deleted")

    try:
        db.execute(delete(AccessCode).where(AccessCode.used_by == user_id))
        db.execute(
            update(AccessCode)
            .where(AccessCode.created_by == user_id)
            .values(created_by=None)
        )
        db.delete(user)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete user %s", user_id)
        raise TransientStoreError("An error occurred while deleting the user") from exc

    logger.info("User %s deleted by admin %s", user_id, actor.id)


def get_by_username(db: Session, username: str) -> User:
    user = db.execute(
        select(User).where(User.username == username)
    ).scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_team(db: Session, user: User, team: str) -> User:
    user.team = team
    db.commit()
    db.refresh(user)
    return user
