"""
Print a legacy ``salt:digest`` credential for manual inserts. Run from project root:
  python -m reelroom.scripts.generate_user_hash PASSWORD [SALT]
If SALT is omitted, the demo salt is used.
"""
import argparse
import sys

from reelroom.core.security import DEMO_SALT, HashMode, hash_password


def build_insert_sql(credential: str, role: str = "user") -> str:
    return (
        "INSERT INTO users (username, email, password_hash, role_id)\n"
        "VALUES (\n"
        "  'new_username',\n"
        "  'user@example.com',\n"
        f"  '{credential}',\n"
        f"  (SELECT id FROM roles WHERE name = '{role}')\n"
        ");"
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a legacy password credential.")
    parser.add_argument("password", help="Plain-text password")
    parser.add_argument("salt", nargs="?", default=None, help=f"Salt (default {DEMO_SALT})")
    parser.add_argument("--role", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    try:
        if args.salt:
            credential = hash_password(args.password, HashMode.custom, args.salt)
        else:
            credential = hash_password(args.password, HashMode.demo)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    print(f"Salt: {args.salt or DEMO_SALT} ({'custom' if args.salt else 'default'})")
    print(f"Hash: {credential}")
    print()
    print(build_insert_sql(credential, args.role))
    return 0


if __name__ == "__main__":
    sys.exit(main())
