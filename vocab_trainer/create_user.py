"""Provision a teacher or student account.

Usage:
    python -m vocab_trainer.create_user --username Vladislav --name "Vladislav" --role teacher

The password is prompted for and never echoed or logged.
"""
import argparse
import getpass
import sys

from vocab_trainer.core import config
from vocab_trainer.database import create_db_engine, create_session_factory, ensure_schema
from vocab_trainer.errors import StorageError, StorageErrorKind
from vocab_trainer.models.user import ROLES
from vocab_trainer.stores.users import UserStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--username", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--role", required=True, choices=ROLES)
    parser.add_argument("--email", default=None)
    parser.add_argument("--database-url", default=config.DATABASE_URL)
    return parser


def main(argv: list[str] | None = None, read_password=getpass.getpass) -> int:
    args = build_parser().parse_args(argv)
    password = read_password("Password: ")
    if password != read_password("Repeat password: "):
        print("Passwords do not match.", file=sys.stderr)
        return 1

    engine = create_db_engine(args.database_url)
    try:
        ensure_schema(engine)
        store = UserStore(create_session_factory(engine))
        identity = store.create(
            username=args.username,
            password=password,
            name=args.name,
            role=args.role,
            email=args.email,
        )
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except StorageError as exc:
        if exc.kind is StorageErrorKind.CONSTRAINT_VIOLATION:
            print(f"Username {args.username!r} is already taken.", file=sys.stderr)
        else:
            print("Could not reach the database.", file=sys.stderr)
        return 1
    finally:
        engine.dispose()

    print(f"Created {identity.role} {identity.username} ({identity.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
