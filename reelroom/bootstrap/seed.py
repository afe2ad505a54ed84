"""
Seed roles, permissions and (optionally) the demo accounts. Run from project root:
  python -m reelroom.bootstrap.seed [--demo]
"""
import argparse
import logging
import sys

from sqlalchemy import select
from sqlalchemy.orm import Session

from reelroom.core.database import Base, SessionLocal, engine
from reelroom.core.security import HashMode, hash_password
from reelroom.models.users import Permission, Role, User

logger = logging.getLogger(__name__)

PERMISSIONS: dict[str, str] = {
    "create_video": "Add videos to the library",
    "edit_video": "Edit video metadata",
    "delete_video": "Remove videos from the library",
    "manage_users": "Create and delete user accounts",
    "manage_codes": "Issue and revoke access codes",
    "comment": "Comment on videos",
    "like": "Like videos",
    "create_recommendation": "Submit feature requests",
}

ROLE_PERMISSIONS: dict[str, set[str]] = {
    "admin": set(PERMISSIONS),
    "user": {"comment", "like", "create_recommendation"},
}

DEMO_ACCOUNTS = (
    ("admin", "admin@example.com", "admin123", "admin"),
    ("user", "user@example.com", "user123", "user"),
)


def seed_reference_data(db: Session) -> dict[str, Role]:
    permissions = {p.name: p for p in db.execute(select(Permission)).scalars()}
    for name, description in PERMISSIONS.items():
        if name not in permissions:
            permissions[name] = Permission(name=name, description=description)
            db.add(permissions[name])

    roles = {r.name: r for r in db.execute(select(Role)).scalars()}
    for role_name, granted in ROLE_PERMISSIONS.items():
        role = roles.get(role_name)
        if role is None:
            role = Role(name=role_name)
            db.add(role)
            roles[role_name] = role
        current = {p.name for p in role.permissions}
        for name in sorted(granted - current):
            role.permissions.append(permissions[name])

    db.commit()
    return roles


def seed_demo_accounts(db: Session) -> int:
    roles = {r.name: r for r in db.execute(select(Role)).scalars()}
    created = 0
    for username, email, password, role_name in DEMO_ACCOUNTS:
        exists = db.execute(
            select(User.id).where(User.username == username)
        ).first()
        if exists:
            continue
        db.add(
            User(
                username=username,
                email=email,
                password_hash=hash_password(password, HashMode.demo),
                role_id=roles[role_name].id,
            )
        )
        created += 1
    db.commit()
    return created


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed reelroom reference data.")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Also create the admin/admin123 and user/user123 demo accounts",
    )
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        roles = seed_reference_data(db)
        print(f"Roles ready: {', '.join(sorted(roles))}")
        if args.demo:
            created = seed_demo_accounts(db)
            print(f"Demo accounts created: {created}")
        return 0
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
