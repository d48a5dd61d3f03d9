#!/usr/bin/env python3
"""
Provision an administrator. Run on the server.

Administrators cannot sign up through the API; an operator creates them
with this script and hands out the printed id.

Usage:
    python demo/create_admin.py --name "Ops" --password 'AdminDemoPass123!'
"""

import argparse
import asyncio
import sys

import dispobank.models  # noqa: F401
from dispobank.database import AsyncSessionLocal, Base, engine
from dispobank.logging_config import setup_logging
from dispobank.results import Failure
from dispobank.services import auth_service


async def create(name: str, password: str, administrator_id: str | None) -> int:
    setup_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        result = await auth_service.create_administrator(
            session, name, password, administrator_id=administrator_id
        )
    await engine.dispose()

    if isinstance(result, Failure):
        print(f"Could not create administrator: {result.error_message}", file=sys.stderr)
        return 1
    print(f"Administrator id: {result.value}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a dispobank administrator")
    parser.add_argument("--name", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--id", dest="administrator_id", default=None,
                        help="Explicit administrator id (UUID); generated when omitted")
    args = parser.parse_args()
    sys.exit(asyncio.run(create(args.name, args.password, args.administrator_id)))


if __name__ == "__main__":
    main()
