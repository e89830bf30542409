#!/usr/bin/env python3
"""
Provision the EcoLearn admin account

Creates the admin only when no account with role=admin exists, so it can
be run on every deploy. Credentials come from the command line or from
ADMIN_NAME / ADMIN_EMAIL / ADMIN_PASSWORD.

Usage: python scripts/create_admin.py [--email EMAIL] [--password PASSWORD] [--name NAME]
"""
import argparse
import asyncio
import logging
import os
import sys

# Add repository root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ecolearn.config import get_settings
from ecolearn.services.auth_service import auth_service

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create the EcoLearn admin account if none exists")
    parser.add_argument('--name', default=settings.ADMIN_NAME)
    parser.add_argument('--email', default=settings.ADMIN_EMAIL)
    parser.add_argument('--password', default=settings.ADMIN_PASSWORD)
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    if not args.password or len(args.password) < 6:
        logger.error("An admin password of at least 6 characters is required (--password or ADMIN_PASSWORD)")
        return 1

    result = await auth_service.provision_admin(args.name, args.email, args.password)
    admin = result['user']
    if result['created']:
        print(f"✓ Created admin {admin['email']} ({admin['userId']})")
    else:
        print(f"✓ Admin already exists: {admin['email']} ({admin['userId']}), nothing to do")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
