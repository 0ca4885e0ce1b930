"""
Registry database management.

Creates the tables, loads the default catalogs (and optionally the demo
correspondence) and provisions operators.

Usage:
    python -m scripts.manage_db init
    python -m scripts.manage_db seed [--demo]
    python -m scripts.manage_db create-user <username> [--name NAME] [--role Admin] [--password PWD]
    python -m scripts.manage_db set-password <username> [--password PWD]
    python -m scripts.manage_db list-users
"""
import argparse
import getpass
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from cndes.config.settings import get_settings
from cndes.core.entities.user import User
from cndes.core.exceptions import DuplicateEntryError
from cndes.infrastructure.db.database import configure_database, describe_database, init_db
from cndes.infrastructure.db.models import DepartmentRecord, ExternalEntityRecord
from cndes.infrastructure.db.repository import CatalogRepository, DocumentRepository, UserRepository
from cndes.infrastructure.db.seed import DEPARTMENTS, EXTERNAL_ENTITIES, load_demo_documents, seed_catalog
from cndes.infrastructure.security.passwords import BcryptPasswordHasher


def _read_password(args) -> str:
    if args.password:
        return args.password
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        sys.exit("Passwords do not match")
    return password


def _check_length(password: str) -> None:
    min_length = get_settings().min_password_length
    if len(password) < min_length:
        sys.exit(f"Password must be at least {min_length} characters long")


def cmd_init(args):
    init_db()
    print(f"Tables created ({describe_database()})")


def cmd_seed(args):
    init_db()
    added = seed_catalog(CatalogRepository(DepartmentRecord, "Department"), DEPARTMENTS)
    added += seed_catalog(CatalogRepository(ExternalEntityRecord, "External entity"), EXTERNAL_ENTITIES)
    print(f"Catalog entries added: {added}")
    if args.demo:
        loaded = load_demo_documents(DocumentRepository())
        print(f"Demo documents loaded: {loaded}")


def cmd_create_user(args):
    init_db()
    password = _read_password(args)
    _check_length(password)
    hasher = BcryptPasswordHasher(rounds=get_settings().bcrypt_rounds)
    user = User(
        username=args.username,
        name=args.name or args.username,
        role=args.role,
        password_hash=hasher.hash(password),
    )
    try:
        UserRepository().add(user)
    except DuplicateEntryError as e:
        sys.exit(str(e))
    print(f"Created {user.username} [{user.role}]")


def cmd_set_password(args):
    password = _read_password(args)
    _check_length(password)
    hasher = BcryptPasswordHasher(rounds=get_settings().bcrypt_rounds)
    changes = UserRepository().set_password_hash(args.username, hasher.hash(password))
    if not changes:
        sys.exit(f"No user named {args.username!r}")
    print(f"Password updated for {args.username}, open sessions revoked")


def cmd_list_users(args):
    users = UserRepository().list_users()
    print(f"{'USERNAME':<20} {'ROLE':<10} NAME")
    for user in users:
        print(f"{user.username:<20} {user.role:<10} {user.name}")
    print(f"\n{len(users)} user(s)")


def main():
    parser = argparse.ArgumentParser(description="CNDES registry database management")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create tables").set_defaults(func=cmd_init)

    seed = sub.add_parser("seed", help="Load default catalogs")
    seed.add_argument("--demo", action="store_true", help="Also load demo documents into an empty registry")
    seed.set_defaults(func=cmd_seed)

    create = sub.add_parser("create-user", help="Provision an operator")
    create.add_argument("username")
    create.add_argument("--name", default="", help="Display name")
    create.add_argument("--role", default="Usuario", help="Admin or Usuario")
    create.add_argument("--password", default=None, help="Prompted when omitted")
    create.set_defaults(func=cmd_create_user)

    set_pwd = sub.add_parser("set-password", help="Reset an operator's password")
    set_pwd.add_argument("username")
    set_pwd.add_argument("--password", default=None, help="Prompted when omitted")
    set_pwd.set_defaults(func=cmd_set_password)

    sub.add_parser("list-users", help="List operators").set_defaults(func=cmd_list_users)

    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    configure_database(args.database_url or get_settings().database_url)
    args.func(args)


if __name__ == "__main__":
    main()
