# scripts/create_user.py
"""
Create (or update the role of) a user and print a bearer token for it.

Usage:
    python scripts/create_user.py admin@example.com --name "Ada" --role super_admin
"""
import argparse
import asyncio
import sys

from specflow.core.auth import create_access_token
from specflow.db import connect_db, disconnect_db, get_connection_error, is_connected
from specflow.models import User, USER_ROLES
from specflow.models.project import utcnow


async def create_user(email: str, name: str, role: str, ttl_minutes: int) -> int:
    await connect_db()
    if not is_connected():
        print(f"❌ Database unavailable: {get_connection_error()}")
        return 1

    try:
        user = await User.find_one(User.email == email)
        if user is None:
            user = User(email=email, name=name or None, role=role)
            await user.insert()
            print(f"✅ Created user {email} ({role})")
        elif user.role != role:
            await user.set({"role": role, "updated_at": utcnow()})
            print(f"✅ Updated {email} to role {role}")
        else:
            print(f"ℹ️  {email} already exists with role {role}")

        print("════════════════════════════════════════════════════════")
        print(f"User ID: {user.id}")
        print(f"Token:   {create_access_token(str(user.id), ttl_minutes)}")
        print("════════════════════════════════════════════════════════")
        return 0
    finally:
        await disconnect_db()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("email")
    parser.add_argument("--name", default="")
    parser.add_argument("--role", choices=USER_ROLES, default="user")
    parser.add_argument("--ttl-minutes", type=int, default=60 * 24 * 30)
    args = parser.parse_args()
    return asyncio.run(create_user(args.email, args.name, args.role, args.ttl_minutes))


if __name__ == "__main__":
    sys.exit(main())
