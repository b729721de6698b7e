#!/usr/bin/env python3
"""
Assign a role to an account by email.

The API only lets admins change roles, so the first admin has to be granted
from here:

    python scripts/grant_role.py alice@example.edu admin
    python scripts/grant_role.py bob@example.edu --remove
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory so the src package imports when run from anywhere
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.auth import Role
from src.core.logging import setup_logging
from src.domain.services.auth_service import AccountNotFoundError, AuthService
from src.domain.services.roles import RoleMutationError, RoleMutationService
from src.infrastructure.db.session import dispose_engine, get_session_factory
from src.infrastructure.repositories.row_store import RowStore

SCRIPT_ACTOR = "grant-role-script"


async def run(email: str, role: Role | None) -> int:
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            account_id = await AuthService(session).find_account_id_by_email(email)

        service = RoleMutationService(RowStore(session_factory))
        if role is None:
            await service.remove_role(target_account=account_id, actor=SCRIPT_ACTOR)
            print(f"Removed role from {email}; account is back to '{Role.USER.value}'")
        else:
            await service.assign_role(target_account=account_id, role=role, actor=SCRIPT_ACTOR)
            print(f"{email} is now '{role.value}'")
    except AccountNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except RoleMutationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    finally:
        await dispose_engine()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("email", help="Email of the target account")
    parser.add_argument("role", nargs="?", choices=[role.value for role in Role])
    parser.add_argument("--remove", action="store_true", help="Delete the role assignment")
    args = parser.parse_args()

    if args.remove == bool(args.role):
        parser.error("give either a role or --remove")

    setup_logging()
    role = None if args.remove else Role(args.role)
    sys.exit(asyncio.run(run(args.email, role)))


if __name__ == "__main__":
    main()
