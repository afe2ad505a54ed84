import logging
from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from reelroom.core.errors import (
    ConflictError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)
from reelroom.core.security import generate_access_code, hash_password
from reelroom.models.users import AccessCode, Role, User
from reelroom.schemas.access_codes import AccessCodeOut
from reelroom.schemas.auth import RegisterIn

logger = logging.getLogger(__name__)

INVALID_CODE_MESSAGE = "Invalid or used access code"
REGISTRATION_ROLE = "user"


def to_out(code: AccessCode) -> AccessCodeOut:
    return AccessCodeOut(
        id=code.id,
        code=code.code,
        is_used=code.is_used,
        created_at=code.created_at,
        used_at=code.used_at,
        created_by=code.creator.username if code.creator else None,
        used_by=code.consumer.username if code.consumer else None,
    )


def verify_code(db: Session, raw_code: str) -> AccessCode:
    """Return the unused code matching ``raw_code``; never marks anything used."""
    code = db.execute(
        select(AccessCode).where(
            AccessCode.code == raw_code.strip(),
            AccessCode.is_used.is_(False),
        )
    ).scalar_one_or_none()
    if code is None:
        raise ValidationError(INVALID_CODE_MESSAGE)
    return code


def generate_code(db: Session, admin: User) -> AccessCode:
    code = AccessCode(code=generate_access_code(), created_by=admin.id)
    db.add(code)
    db.commit()
    db.refresh(code)
    logger.info("Access code %s generated by user %s", code.id, admin.id)
    return code


def list_codes(db: Session) -> list[AccessCode]:
    stmt = select(AccessCode).order_by(
        AccessCode.created_at.desc(), AccessCode.id.desc()
    )
    return list(db.execute(stmt).unique().scalars())


def delete_code(db: Session, code_id: int) -> None:
    code = db.get(AccessCode, code_id)
    if code is None:
        raise NotFoundError("Access code not found")
    db.delete(code)
    db.commit()
    logger.info("Access code %s deleted", code_id)


def _colliding_field(exc: IntegrityError) -> str:
    """Name the unique column behind ``exc`` from its constraint, never its values."""
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return "username" if "username" in constraint else "email"
    return "username" if "users.username" in str(exc.orig) else "email"


def _taken_field(db: Session, username: str, email: str) -> str | None:
    if db.execute(select(User.id).where(User.username == username)).first():
        return "username"
    if db.execute(select(User.id).where(User.email == email)).first():
        return "email"
    return None


def register_with_code(db: Session, payload: RegisterIn) -> User:
    """
    Create a ``user`` account and consume ``payload.access_code`` in one transaction.

    The code is claimed with a conditional update so that two registrations
    racing on the same code cannot both commit.
    """
    raw_code = payload.access_code
    email = payload.email.lower()
    verify_code(db, raw_code)

    taken = _taken_field(db, payload.username, email)
    if taken:
        raise ConflictError(f"This {taken} is already taken")

    role = db.execute(
        select(Role).where(Role.name == REGISTRATION_ROLE)
    ).scalar_one_or_none()
    if role is None:
        logger.error("Role %r is missing; cannot register users", REGISTRATION_ROLE)
        raise TransientStoreError("User role not found")

    user = User(
        username=payload.username,
        email=email,
        password_hash=hash_password(payload.password),
        role_id=role.id,
        team=payload.team,
    )

    try:
        db.add(user)
        db.flush()

        claimed = db.execute(
            update(AccessCode)
            .where(AccessCode.code == raw_code, AccessCode.is_used.is_(False))
            .values(is_used=True, used_by=user.id, used_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount != 1:
            db.rollback()
            raise ValidationError(INVALID_CODE_MESSAGE)

        db.commit()
    except IntegrityError as exc:
        db.rollback()
        field = _colliding_field(exc)
        raise ConflictError(f"This {field} is already taken") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Registration failed")
        raise TransientStoreError("Registration failed") from exc

    db.refresh(user)
    logger.info("User %s registered with access code", user.id)
    return user
