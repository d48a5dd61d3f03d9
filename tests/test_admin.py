"""
Tests for the administrative endpoints (/admin/*).
"""

from dispobank.security import validate_password


async def _account_with_transfer(client, user_auth, second_user_auth):
    origin = (await client.post(
        "/accounts",
        json={"name": "Checking", "dispo_cents": 1_000, "limit_cents": 1_000},
        headers=user_auth.headers,
    )).json()["value"]
    target = (await client.post(
        "/accounts",
        json={"name": "Checking", "limit_cents": 1_000},
        headers=second_user_auth.headers,
    )).json()["value"]
    response = await client.post(
        "/transactions",
        json={"origin_id": origin, "target_id": target, "amount_cents": 500},
        headers=user_auth.headers,
    )
    return response.json()["value"]


class TestAdminTransactions:

    async def test_list_all_transactions(self, client, user_auth, second_user_auth, admin_auth):
        transaction_id = await _account_with_transfer(client, user_auth, second_user_auth)

        response = await client.get("/admin/transactions", headers=admin_auth.headers)
        assert response.status_code == 200
        assert [t["transaction_id"] for t in response.json()["value"]] == [transaction_id]

    async def test_delete_unknown_transaction(self, client, admin_auth):
        response = await client.delete(
            "/admin/transactions/00000000-0000-0000-0000-000000000000",
            headers=admin_auth.headers,
        )
        assert response.status_code == 404


class TestAdminUsers:

    async def test_list_users(self, client, user_auth, second_user_auth, admin_auth):
        response = await client.get("/admin/users", headers=admin_auth.headers)
        assert response.status_code == 200
        ids = {u["user_id"] for u in response.json()["value"]}
        assert ids == {user_auth.id, second_user_auth.id}

    async def test_reset_password(self, client, user_auth, admin_auth):
        response = await client.put(
            f"/admin/users/{user_auth.id}/password", headers=admin_auth.headers
        )
        assert response.status_code == 200
        new_password = response.json()["value"]
        assert validate_password(new_password) == (True, "")

        login = await client.post(
            "/auth/login", json={"user_id": user_auth.id, "password": new_password}
        )
        assert login.status_code == 200

    async def test_reset_password_unknown_user(self, client, admin_auth):
        response = await client.put(
            "/admin/users/00000000-0000-0000-0000-000000000000/password",
            headers=admin_auth.headers,
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "USER_NOT_FOUND"
