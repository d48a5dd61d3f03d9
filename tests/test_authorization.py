"""
Tests for authorization boundaries — cross-user isolation and role enforcement.

These tests verify two security properties:

1. **Cross-user isolation**: A logged-in user cannot read, modify or
   transfer from another user's accounts, and cannot read transfers they
   are not a party to.

2. **Role enforcement**: Users cannot reach /admin/* endpoints and
   administrators cannot act as customers.
"""


async def _create_account(client, auth, name="Checking", dispo_cents=0):
    response = await client.post(
        "/accounts",
        json={"name": name, "dispo_cents": dispo_cents, "limit_cents": 10_000},
        headers=auth.headers,
    )
    return response.json()["value"]


class TestCrossUserAccountAccess:
    """A logged-in user cannot see or modify another user's accounts."""

    async def test_cannot_view_other_users_account(self, client, user_auth, second_user_auth):
        account_id = await _create_account(client, user_auth)

        response = await client.get(f"/accounts/{account_id}", headers=second_user_auth.headers)
        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_ALLOWED"

    async def test_cannot_update_other_users_account(self, client, user_auth, second_user_auth):
        account_id = await _create_account(client, user_auth)

        response = await client.put(
            f"/accounts/{account_id}",
            json={"name": "Stolen", "dispo_cents": 1_000_000, "limit_cents": 1_000_000},
            headers=second_user_auth.headers,
        )
        assert response.status_code == 403

    async def test_cannot_delete_other_users_account(self, client, user_auth, second_user_auth):
        account_id = await _create_account(client, user_auth)

        response = await client.delete(f"/accounts/{account_id}", headers=second_user_auth.headers)
        assert response.status_code == 403

        still_there = await client.get(f"/accounts/{account_id}", headers=user_auth.headers)
        assert still_there.status_code == 200

    async def test_account_lists_are_disjoint(self, client, user_auth, second_user_auth):
        await _create_account(client, user_auth)
        await _create_account(client, second_user_auth)

        a_ids = {a["account_id"] for a in (await client.get("/accounts", headers=user_auth.headers)).json()["value"]}
        b_ids = {a["account_id"] for a in (await client.get("/accounts", headers=second_user_auth.headers)).json()["value"]}
        assert a_ids.isdisjoint(b_ids)


class TestCrossUserTransfers:

    async def test_cannot_transfer_from_other_users_account(
        self, client, user_auth, second_user_auth
    ):
        victim = await _create_account(client, user_auth, dispo_cents=10_000)
        thief = await _create_account(client, second_user_auth)

        response = await client.post(
            "/transactions",
            json={"origin_id": victim, "target_id": thief, "amount_cents": 100},
            headers=second_user_auth.headers,
        )
        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_ALLOWED"

    async def test_uninvolved_user_cannot_read_transfer(
        self, client, user_auth, second_user_auth
    ):
        origin = await _create_account(client, user_auth, "Checking", dispo_cents=10_000)
        target = await _create_account(client, user_auth, "Savings")
        transaction_id = (await client.post(
            "/transactions",
            json={"origin_id": origin, "target_id": target, "amount_cents": 100},
            headers=user_auth.headers,
        )).json()["value"]

        response = await client.get(
            f"/transactions/{transaction_id}", headers=second_user_auth.headers
        )
        assert response.status_code == 403

    async def test_target_owner_can_read_transfer(self, client, user_auth, second_user_auth):
        origin = await _create_account(client, user_auth, dispo_cents=10_000)
        target = await _create_account(client, second_user_auth)
        transaction_id = (await client.post(
            "/transactions",
            json={"origin_id": origin, "target_id": target, "amount_cents": 100},
            headers=user_auth.headers,
        )).json()["value"]

        response = await client.get(
            f"/transactions/{transaction_id}", headers=second_user_auth.headers
        )
        assert response.status_code == 200


class TestRoleEnforcement:

    async def test_user_cannot_list_all_transactions(self, client, user_auth):
        response = await client.get("/admin/transactions", headers=user_auth.headers)
        assert response.status_code == 403

    async def test_user_cannot_list_users(self, client, user_auth):
        response = await client.get("/admin/users", headers=user_auth.headers)
        assert response.status_code == 403

    async def test_user_cannot_delete_transactions(self, client, user_auth):
        response = await client.delete(
            "/admin/transactions/00000000-0000-0000-0000-000000000000",
            headers=user_auth.headers,
        )
        assert response.status_code == 403

    async def test_user_cannot_reset_passwords(self, client, user_auth, second_user_auth):
        response = await client.put(
            f"/admin/users/{second_user_auth.id}/password", headers=user_auth.headers
        )
        assert response.status_code == 403

    async def test_admin_cannot_create_accounts(self, client, admin_auth):
        response = await client.post(
            "/accounts",
            json={"name": "Admin account", "limit_cents": 1_000},
            headers=admin_auth.headers,
        )
        assert response.status_code == 403

    async def test_admin_cannot_transfer(self, client, admin_auth):
        response = await client.post(
            "/transactions",
            json={
                "origin_id": "00000000-0000-0000-0000-000000000001",
                "target_id": "00000000-0000-0000-0000-000000000002",
                "amount_cents": 100,
            },
            headers=admin_auth.headers,
        )
        assert response.status_code == 403

    async def test_unauthenticated_admin_access(self, client):
        response = await client.get("/admin/users")
        assert response.status_code == 401
