#!/usr/bin/env python3
"""
RizzMaster -- account and session service for the RizzMaster chat app.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8000
  python main.py create-user a@x.com --first-name Ada --last-name Lovelace
  python main.py purge-sessions

Environment variables (see core/config.py for the full list):
  SECRET_KEY    Required unless DEBUG=true. At least 32 characters.
  DATABASE_URL  SQLAlchemy URL of the user/session database.
"""

import argparse
import getpass
import sys

from sqlalchemy.exc import IntegrityError

from core.config import get_settings


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def _create_user(args: argparse.Namespace) -> int:
    from auth.models import User
    from auth.passwords import hash_password
    from auth.store import UserStore

    # Same normalization as the HTTP login body, so the account can sign in.
    email = args.email.strip()
    if not email:
        print("  [!] Email must not be empty.")
        return 1
    password = getpass.getpass("Password: ")
    if not password:
        print("  [!] Password must not be empty.")
        return 1
    if password != getpass.getpass("Repeat password: "):
        print("  [!] Passwords do not match.")
        return 1

    store = UserStore(get_settings().database_url)
    try:
        user_id = store.create_user(
            User(
                email=email,
                password_hash=hash_password(password),
                first_name=args.first_name,
                last_name=args.last_name,
            )
        )
    except IntegrityError:
        print(f"  [!] A user with email '{email}' already exists.")
        return 1
    finally:
        store.close()

    print(f"  Created user {email} (id={user_id}).")
    return 0


def _purge_sessions(args: argparse.Namespace) -> int:
    from auth.store import UserStore

    store = UserStore(get_settings().database_url)
    try:
        removed = store.purge_expired_sessions()
    finally:
        store.close()
    print(f"  Removed {removed} expired session(s).")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="rizzmaster",
        description="Account registration and session authentication service.",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve = sub.add_parser("serve", help="Run the HTTP API under uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Reload on source changes (development)")
    serve.set_defaults(func=_serve)

    create = sub.add_parser("create-user", help="Create an account; the password is prompted for")
    create.add_argument("email", help="Login email, unique across users")
    create.add_argument("--first-name", default=None)
    create.add_argument("--last-name", default=None)
    create.set_defaults(func=_create_user)

    purge = sub.add_parser("purge-sessions", help="Delete expired sessions")
    purge.set_defaults(func=_purge_sessions)

    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
