#!/usr/bin/env python3
"""
Create Admin
Provision the first admin account out of band. Does nothing if an admin exists.
"""

import argparse
import asyncio
import getpass
import logging

from ebookstore.application.config import settings
from ebookstore.application.controller import build_controller

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def create_admin(name: str, email: str, password: str) -> int:
    controller = build_controller(settings)
    await controller.startup()
    try:
        admin = await controller.accounts.provision_admin(name, email, password)
    finally:
        await controller.shutdown()

    if admin is None:
        print("Admin already exists")
    else:
        print(f"✅ Admin created: {admin.email} ({admin.id})")
    return 0


def main():
    parser = argparse.ArgumentParser(description='Create the bookstore admin account')
    parser.add_argument('--name', default='Admin User', help='Display name')
    parser.add_argument('--email', default='admin@example.com', help='Login email')
    parser.add_argument('--password', help='Password (prompted if omitted)')

    args = parser.parse_args()
    password = args.password or getpass.getpass("Admin password: ")

    if settings.storage_backend == "local":
        logger.warning("STORAGE_BACKEND is 'local'; the admin only lives for this process")

    raise SystemExit(asyncio.run(create_admin(args.name, args.email, password)))


if __name__ == "__main__":
    main()
