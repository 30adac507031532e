#!/usr/bin/env python3
"""Grant or revoke admin rights for a user.

This is the only way to change the admin flag; the HTTP API never
accepts it. The user must have saved parent settings at least once.

Usage:
    python scripts/grant_admin.py <user-id>
    python scripts/grant_admin.py <user-id> --revoke
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


async def grant_admin(user_id: str, is_admin: bool) -> int:
    """Set the admin flag for ``user_id`` and report the result."""
    from bedtime.core.config import get_settings
    from bedtime.models.database import close_db, init_db, session_scope
    from bedtime.services.admin import AdminFlagError, set_admin_flag

    settings = get_settings()
    init_db(settings.async_database_url)
    try:
        async with session_scope() as session:
            await set_admin_flag(session, user_id, is_admin)
    except AdminFlagError as e:
        print(f"✗ {e}")
        return 1
    finally:
        await close_db()

    action = "granted to" if is_admin else "revoked from"
    print(f"✓ Admin rights {action} {user_id}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("user_id", help="Caller id (token subject) of the user")
    parser.add_argument("--revoke", action="store_true", help="Remove admin rights instead")
    args = parser.parse_args()
    sys.exit(asyncio.run(grant_admin(args.user_id, not args.revoke)))


if __name__ == "__main__":
    main()
