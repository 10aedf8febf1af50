"""
Create an admin user for the operator dashboard, or promote an existing user.

Onboarding only ever creates client users, so admins are provisioned here.

Usage:
    python scripts/create_admin.py ops@example.com --password 'long-secret'
    python scripts/create_admin.py ops@example.com --promote
"""
import argparse
import asyncio
import getpass
import logging
import sys

from clientdesk.database import async_session_factory, dispose_engine
from clientdesk.models.user import User, ROLE_ADMIN
from clientdesk.services.clients import get_user_by_email
from clientdesk.utils.auth import hash_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def create_admin(email: str, password: str | None, promote: bool) -> int:
    email = email.strip().lower()
    async with async_session_factory() as db:
        user = await get_user_by_email(db, email)
        if user:
            if not promote:
                logger.error("User %s already exists (use --promote to make it an admin)", email)
                return 1
            user.role = ROLE_ADMIN
            if password:
                user.password_hash = hash_password(password)
            await db.commit()
            logger.info("Promoted %s to admin", email)
            return 0

        if not password:
            logger.error("A password is required to create a new user")
            return 1
        if len(password) < 8:
            logger.error("Password must be at least 8 characters")
            return 1

        db.add(User(email=email, password_hash=hash_password(password), role=ROLE_ADMIN))
        await db.commit()
        logger.info("Created admin %s", email)
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description="Create or promote a ClientDesk admin user")
    parser.add_argument("email")
    parser.add_argument("--password", help="Prompted for when omitted and the user is new")
    parser.add_argument("--promote", action="store_true", help="Promote an existing user")
    args = parser.parse_args()

    password = args.password
    if password is None and not args.promote:
        password = getpass.getpass("Password: ")

    try:
        return await create_admin(args.email, password, args.promote)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
