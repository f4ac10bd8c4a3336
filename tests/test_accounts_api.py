"""CRUD for /accounts and /categories, including tenant scoping and delete conflicts."""

import pytest


# -------------------------------------------------------------------
# Accounts
# -------------------------------------------------------------------

def test_create_account_with_defaults(client, writer_headers):
    response = client.post("/accounts", headers=writer_headers, json={"name": "Wallet", "balance": 250.5})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Account created"
    account = body["data"]
    assert account["balance"] == 250.5
    assert account["type"] == "cash"
    assert account["color"] == "#3B82F6"
    assert account["icon"] == "Wallet"
    assert account["is_active"] is True


@pytest.mark.parametrize("balance", [-1, 10.123])
def test_create_account_rejects_bad_balance(client, writer_headers, balance):
    response = client.post("/accounts", headers=writer_headers, json={"name": "Bad", "balance": balance})

    assert response.status_code == 400
    assert response.json()["error"]["context"][0]["field"] == "balance"


def test_account_names_are_unique_per_master_account(client, writer_headers, other_tenant, make_account):
    make_account("Savings", "0.00", master_id=other_tenant.master_id)

    assert client.post("/accounts", headers=writer_headers, json={"name": "Savings"}).status_code == 200
    response = client.post("/accounts", headers=writer_headers, json={"name": "Savings"})
    assert response.status_code == 409
    assert response.json()["error"]["message"] == "An account with this name already exists"


def test_list_and_get_are_tenant_scoped(client, reader_headers, other_tenant, make_account):
    mine = make_account("Cash", "10.00")
    theirs = make_account("Cash", "99.00", master_id=other_tenant.master_id)

    listed = client.get("/accounts", headers=reader_headers).json()["data"]
    assert [a["id"] for a in listed] == [mine]

    assert client.get(f"/accounts/{mine}", headers=reader_headers).json()["data"]["balance"] == 10.0
    missing = client.get(f"/accounts/{theirs}", headers=reader_headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == {"code": "ERR_NOT_FOUND", "message": "Account not found"}


def test_update_account_balance_directly(client, writer_headers, make_account):
    account = make_account("Cash", "10.00")

    response = client.patch(
        f"/accounts/{account}",
        headers=writer_headers,
        json={"balance": 42, "color": "#000000", "name": None},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["balance"] == 42.0
    assert data["color"] == "#000000"
    assert data["name"] == "Cash"


def test_update_account_name_conflict(client, writer_headers, make_account):
    make_account("Cash")
    bank = make_account("Bank")

    response = client.patch(f"/accounts/{bank}", headers=writer_headers, json={"name": "Cash"})
    assert response.status_code == 409


def test_delete_account(client, writer_headers, make_account):
    account = make_account("Old")

    assert client.delete(f"/accounts/{account}", headers=writer_headers).json() == {
        "success": True,
        "message": "Account deleted",
        "data": None,
    }
    assert client.get(f"/accounts/{account}", headers=writer_headers).status_code == 404


def test_delete_account_with_transactions_conflicts(client, writer_headers, make_account, make_category):
    account = make_account("Cash", "100.00")
    food = make_category("Food", "expense")
    client.post(
        "/transactions",
        headers=writer_headers,
        json={"kind": "expense", "amount": 5, "category_id": food, "account_id": account, "date": "2024-01-10"},
    )

    response = client.delete(f"/accounts/{account}", headers=writer_headers)
    assert response.status_code == 409
    assert client.get(f"/accounts/{account}", headers=writer_headers).status_code == 200


# -------------------------------------------------------------------
# Categories
# -------------------------------------------------------------------

def test_create_and_filter_categories(client, writer_headers):
    client.post("/categories", headers=writer_headers, json={"name": "Salary", "kind": "income"})
    created = client.post("/categories", headers=writer_headers, json={"name": "Food", "kind": "expense"})

    assert created.status_code == 200
    assert created.json()["data"]["icon"] == "Tag"
    assert created.json()["data"]["color"] == "blue"

    expenses = client.get("/categories", headers=writer_headers, params={"kind": "expense"}).json()["data"]
    assert [c["name"] for c in expenses] == ["Food"]
    assert len(client.get("/categories", headers=writer_headers).json()["data"]) == 2


def test_category_kind_is_validated(client, writer_headers):
    response = client.post("/categories", headers=writer_headers, json={"name": "Gift", "kind": "transfer"})
    assert response.status_code == 400

    listed = client.get("/categories", headers=writer_headers, params={"kind": "transfer"})
    assert listed.status_code == 400


def test_same_name_allowed_for_different_kinds(client, writer_headers):
    first = client.post("/categories", headers=writer_headers, json={"name": "Other", "kind": "income"})
    second = client.post("/categories", headers=writer_headers, json={"name": "Other", "kind": "expense"})
    third = client.post("/categories", headers=writer_headers, json={"name": "Other", "kind": "expense"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert third.status_code == 409


def test_category_kind_change(client, writer_headers, make_account, make_category):
    unused = make_category("Bonus", "expense")
    used = make_category("Food", "expense")
    account = make_account("Cash", "100.00")
    client.post(
        "/transactions",
        headers=writer_headers,
        json={"kind": "expense", "amount": 5, "category_id": used, "account_id": account, "date": "2024-01-10"},
    )

    changed = client.patch(f"/categories/{unused}", headers=writer_headers, json={"kind": "income"})
    assert changed.status_code == 200
    assert changed.json()["data"]["kind"] == "income"

    blocked = client.patch(f"/categories/{used}", headers=writer_headers, json={"kind": "income"})
    assert blocked.status_code == 409
    assert blocked.json()["error"]["message"] == "Cannot change the kind of a category that has transactions"


def test_deactivate_and_delete_category(client, writer_headers, make_category):
    category = make_category("Hobbies", "expense")

    patched = client.patch(f"/categories/{category}", headers=writer_headers, json={"is_active": False})
    assert patched.json()["data"]["is_active"] is False

    assert client.delete(f"/categories/{category}", headers=writer_headers).status_code == 200
    assert client.get(f"/categories/{category}", headers=writer_headers).status_code == 404
