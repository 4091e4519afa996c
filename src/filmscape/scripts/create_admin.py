"""Create the administrator account used to manage the movie catalogue."""

import argparse
import asyncio
import getpass
import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from filmscape.database import Base, async_session, engine
from filmscape.models.user import User
from filmscape.utils.security import hash_password

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Create a Filmscape administrator account.")
    p.add_argument("--username", default="admin", help="Administrator username.")
    p.add_argument("--email", default="admin@filmscape.com", help="Administrator email.")
    p.add_argument("--password", help="Password (prompted for when omitted).")
    p.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (SQLite development databases).",
    )
    return p


async def create_admin(
    db: AsyncSession, username: str, email: str, password: str
) -> tuple[User, bool]:
    """Return the admin user and whether it was created by this call.

    An existing account with the same username or email is left as is.
    """
    username = username.lower()
    email = email.lower()
    result = await db.execute(
        select(User).where(or_(User.username == username, User.email == email))
    )
    existing = result.scalar_one_or_none()
    if existing is not None:
        return existing, False

    admin = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
        bio="System Administrator",
        is_admin=True,
        is_active=True,
        is_verified=True,
    )
    db.add(admin)
    await db.flush()
    return admin, True


async def _run(username: str, email: str, password: str, create_tables: bool) -> int:
    if len(password) < 8:
        logger.error("Password must be at least 8 characters")
        return 2

    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    try:
        async with async_session() as db:
            admin, created = await create_admin(db, username, email, password)
            await db.commit()
    finally:
        await engine.dispose()

    if created:
        logger.info("Admin user created: %s <%s>", admin.username, admin.email)
    else:
        logger.info(
            "User %s <%s> already exists (admin: %s)", admin.username, admin.email, admin.is_admin
        )
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    args = _build_parser().parse_args()
    password = args.password or getpass.getpass("Admin password: ")
    raise SystemExit(asyncio.run(_run(args.username, args.email, password, args.create_tables)))


if __name__ == "__main__":
    main()
