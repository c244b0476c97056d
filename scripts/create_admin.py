#!/usr/bin/env python3
"""Create the first admin account.

Usage: python scripts/create_admin.py admin@university.edu 'password' First Last
"""
import asyncio
import sys

from campus.core.database import AsyncSessionLocal, close_db_connections
from campus.core.exceptions import ConflictError
from campus.models.user import UserRole
from campus.schemas.academic_schemas import AccountCreate
from campus.services.user_service import UserService


async def create_admin(email: str, password: str, first_name: str, last_name: str):
    async with AsyncSessionLocal() as session:
        service = UserService(session)
        account = AccountCreate(
            email=email, password=password, first_name=first_name, last_name=last_name
        )
        try:
            user = await service.build_account(account, UserRole.ADMIN)
        except ConflictError:
            print(f"User {email} already exists")
            return
        await service.commit()
        print(f"✅ Admin {user.email} created")
    await close_db_connections()


if __name__ == "__main__":
    if len(sys.argv) != 5:
        print(__doc__)
        sys.exit(1)
    asyncio.run(create_admin(*sys.argv[1:]))
