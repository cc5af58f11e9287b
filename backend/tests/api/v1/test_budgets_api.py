from datetime import date
from decimal import Decimal
from uuid import uuid4

from fastapi import status


def _create_budget(client, user_id, categories, month=5, year=2024):
    return client.post("/api/v1/budgets/", json={
        "user_id": user_id,
        "month": month,
        "year": year,
        "categories": categories
    })


def test_save_and_fetch_budget(client, test_user):
    response = _create_budget(client, test_user.id, [
        {"category": "rent", "allocated": "1000"},
        {"category": "groceries", "allocated": "400.25"},
    ])

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["user_id"] == test_user.id
    assert [c["category"] for c in data["categories"]] == ["rent", "groceries"]
    assert Decimal(data["total_budget"]) == Decimal("1400.25")
    assert Decimal(data["total_remaining"]) == Decimal("1400.25")

    response = client.get(f"/api/v1/budgets/{data['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == data["id"]

    response = client.get(f"/api/v1/budgets/user/{test_user.id}/2024/5")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == data["id"]


def test_duplicate_category_is_rejected(client, test_user):
    response = _create_budget(client, test_user.id, [
        {"category": "groceries", "allocated": "400"},
        {"category": "groceries", "allocated": "300"},
    ])

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "groceries" in response.json()["detail"]


def test_invalid_input_is_rejected_at_the_boundary(client, test_user):
    response = _create_budget(client, test_user.id, [{"category": "rent", "allocated": "0"}])
    assert response.status_code == 422

    response = _create_budget(client, test_user.id, [], month=13)
    assert response.status_code == 422

    response = client.put(
        f"/api/v1/budgets/user/{test_user.id}/2024/5/category",
        json={"category": "rent", "allocated": "-5"}
    )
    assert response.status_code == 422


def test_unknown_budget_and_user(client):
    response = client.get(f"/api/v1/budgets/{uuid4()}")
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.put(
        f"/api/v1/budgets/user/{uuid4()}/2024/5/category",
        json={"category": "rent", "allocated": "1000"}
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "not found" in response.json()["detail"]


def test_category_endpoints_and_expense_flow(client, test_user):
    base = f"/api/v1/budgets/user/{test_user.id}/2024/5/category"

    response = client.put(base, json={"category": "rent", "allocated": "1000"})
    assert response.status_code == status.HTTP_200_OK
    budget_id = response.json()["id"]

    response = client.post(base, json={"category": "rent", "allocated": "1200"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.post(base, json={"category": "groceries", "allocated": "300"})
    assert response.status_code == status.HTTP_200_OK
    assert Decimal(response.json()["total_budget"]) == Decimal("1300")

    response = client.post("/api/v1/expenses/", json={
        "user_id": test_user.id,
        "category": "rent",
        "amount": "300",
        "expense_date": date(2024, 5, 3).isoformat()
    })
    assert response.status_code == status.HTTP_200_OK
    expense_id = response.json()["id"]

    budget = client.get(f"/api/v1/budgets/{budget_id}").json()
    rent = next(c for c in budget["categories"] if c["category"] == "rent")
    assert Decimal(rent["remaining"]) == Decimal("700")
    assert Decimal(budget["total_remaining"]) == Decimal("1000")

    response = client.delete(f"{base}?category=groceries")
    assert response.status_code == status.HTTP_200_OK
    assert [c["category"] for c in response.json()["categories"]] == ["rent"]

    response = client.delete(f"/api/v1/expenses/{expense_id}")
    assert response.json() == {"success": True}

    budget = client.post(f"/api/v1/budgets/{budget_id}/sync").json()
    assert Decimal(budget["total_remaining"]) == Decimal("1000")


def test_summaries(client, test_user):
    base = f"/api/v1/budgets/user/{test_user.id}"
    client.put(f"{base}/2024/1/category", json={"category": "rent", "allocated": "1000"})
    client.put(f"{base}/2024/3/category", json={"category": "rent", "allocated": "800"})

    periods = client.get(f"{base}/periods").json()
    assert sorted((p["year"], p["month"]) for p in periods) == [(2024, 1), (2024, 3)]

    annual = client.get(f"{base}/annual/2024").json()
    assert Decimal(annual["total"]) == Decimal("1800")

    aggregate = client.get(f"{base}/aggregate/2024").json()
    assert {int(k): Decimal(v) for k, v in aggregate.items()} == {1: Decimal("1000"), 3: Decimal("800")}

    listed = client.get(base).json()
    assert [(b["year"], b["month"]) for b in listed] == [(2024, 3), (2024, 1)]


def test_delete_budget(client, test_user):
    budget_id = _create_budget(client, test_user.id, [{"category": "rent", "allocated": "1000"}]).json()["id"]

    response = client.delete(f"/api/v1/budgets/{budget_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}

    response = client.delete(f"/api/v1/budgets/{budget_id}")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_year_out_of_range_is_rejected(client, test_user):
    base = f"/api/v1/budgets/user/{test_user.id}"

    response = client.put(f"{base}/0/5/category", json={"category": "rent", "allocated": "10"})
    assert response.status_code == 422

    assert client.get(f"{base}/1999/5").status_code == 422
    assert client.get(f"{base}/annual/0").status_code == 422
    assert client.get(f"{base}/aggregate/0").status_code == 422


def test_list_budgets_pagination(client, test_user):
    base = f"/api/v1/budgets/user/{test_user.id}"
    for month in (1, 2, 3):
        client.put(f"{base}/2024/{month}/category", json={"category": "rent", "allocated": "500"})

    page = client.get(f"{base}?limit=2&offset=1").json()
    assert [(b["year"], b["month"]) for b in page] == [(2024, 2), (2024, 1)]

    assert client.get(f"{base}?limit=0").status_code == 422
