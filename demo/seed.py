#!/usr/bin/env python3
"""
Demo seed script — populates a running API with sample users, accounts and
transfers.

!! NOT FOR PRODUCTION !!
This script creates users with known passwords. It is intended ONLY for
local demos and frontend development.

Usage:
    # With the API server running on localhost:8000:
    python demo/seed.py

    # Custom server URL:
    python demo/seed.py --base-url http://localhost:9000

New accounts start with a zero balance, so every demo account gets a dispo
(overdraft) to transfer against. The generated user ids are printed at the
end; log in with POST /auth/login using an id and the password below.
"""

import argparse
import asyncio
import random
import sys

import httpx

BASE_URL = "http://localhost:8000"

# ---------------------------------------------------------------------------
# Demo users
# ---------------------------------------------------------------------------

USERS = [
    {
        "first_name": "Alice",
        "last_name": "Chen",
        "birthdate": "14.03.1988",
        "password": "AliceDemoPass123!",
        "accounts": [
            {"name": "Checking", "dispo_cents": 1_000_00, "limit_cents": 500_00},
            {"name": "Savings", "dispo_cents": 0, "limit_cents": 2_000_00},
        ],
    },
    {
        "first_name": "Bob",
        "last_name": "Martinez",
        "birthdate": "02.11.1979",
        "password": "BobDemoPassword12!",
        "accounts": [
            {"name": "Checking", "dispo_cents": 500_00, "limit_cents": 250_00},
        ],
    },
    {
        "first_name": "Carol",
        "last_name": "Nguyen",
        "birthdate": "21.07.1995",
        "password": "CarolDemoPass123!",
        "accounts": [
            {"name": "Checking", "dispo_cents": 2_000_00, "limit_cents": 1_000_00},
        ],
    },
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def log(msg: str) -> None:
    print(f"  {msg}")


def cents_to_euros(cents: int) -> str:
    return f"{cents / 100:,.2f} EUR"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(client: httpx.AsyncClient, user: dict) -> tuple[str, str]:
    """Register a user and log in. Returns (user_id, token)."""
    resp = await client.post(f"{BASE_URL}/users", json={
        "first_name": user["first_name"],
        "last_name": user["last_name"],
        "birthdate": user["birthdate"],
        "password": user["password"],
    })
    resp.raise_for_status()
    user_id = resp.json()["value"]

    resp = await client.post(f"{BASE_URL}/auth/login", json={
        "user_id": user_id,
        "password": user["password"],
    })
    resp.raise_for_status()
    return user_id, resp.json()["token"]


async def create_account(client: httpx.AsyncClient, token: str, account: dict) -> str:
    resp = await client.post(
        f"{BASE_URL}/accounts",
        json=account,
        headers=auth_header(token),
    )
    resp.raise_for_status()
    return resp.json()["value"]


async def transfer(client: httpx.AsyncClient, token: str,
                   origin_id: str, target_id: str, amount_cents: int) -> httpx.Response:
    return await client.post(
        f"{BASE_URL}/transactions",
        json={"origin_id": origin_id, "target_id": target_id, "amount_cents": amount_cents},
        headers=auth_header(token),
    )


# ---------------------------------------------------------------------------
# Seed logic
# ---------------------------------------------------------------------------

async def seed(base_url: str, transfers: int) -> None:
    global BASE_URL
    BASE_URL = base_url

    print("\n========================================")
    print("  DEMO SEED — NOT FOR PRODUCTION")
    print("========================================\n")

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            health = await client.get(f"{BASE_URL}/health")
            health.raise_for_status()
        except (httpx.ConnectError, httpx.HTTPStatusError):
            print(f"  ERROR: Cannot connect to {BASE_URL}")
            print("  Start the server first: uvicorn dispobank.main:app --reload\n")
            sys.exit(1)

        # (token, account_id) of every account created
        all_accounts: list[tuple[str, str]] = []
        credentials: list[tuple[str, str, str]] = []

        for user in USERS:
            name = f"{user['first_name']} {user['last_name']}"
            print(f"Creating {name}...")
            user_id, token = await register(client, user)
            credentials.append((name, user_id, user["password"]))

            for account in user["accounts"]:
                account_id = await create_account(client, token, account)
                all_accounts.append((token, account_id))
                log(
                    f"{account['name']}: dispo {cents_to_euros(account['dispo_cents'])}, "
                    f"limit {cents_to_euros(account['limit_cents'])}"
                )

        print(f"\nCreating {transfers} random transfers...")
        created = declined = 0
        for _ in range(transfers):
            (token, origin_id), (_, target_id) = random.sample(all_accounts, 2)
            resp = await transfer(client, token, origin_id, target_id,
                                  random.randint(5_00, 300_00))
            if resp.status_code == 201:
                created += 1
            else:
                declined += 1
        log(f"{created} created, {declined} declined")

    print("\nLogin credentials:")
    for name, user_id, password in credentials:
        log(f"{name:<16} {user_id}  {password}")
    print()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the dispobank demo")
    parser.add_argument("--base-url", default=BASE_URL)
    parser.add_argument("--transfers", type=int, default=20)
    args = parser.parse_args()
    asyncio.run(seed(args.base_url, args.transfers))


if __name__ == "__main__":
    main()
