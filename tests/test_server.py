from database import Base

GROCERIES = {"description": "Groceries", "amount": 40, "type": "expense", "category": "groceries"}
SALARY = {"description": "Salary", "amount": 100, "type": "income", "category": "salary"}


def test_create_returns_201_with_generated_fields(client):
    resp = client.post("/api/transactions", json=GROCERIES)

    assert resp.status_code == 201
    body = resp.json()
    assert isinstance(body["id"], int)
    assert body["date"]
    assert {k: body[k] for k in GROCERIES} == {**GROCERIES, "amount": 40.0}


def test_create_accepts_explicit_date(client):
    resp = client.post("/api/transactions", json={**GROCERIES, "date": "2024-05-03T18:20:00"})
    assert resp.status_code == 201
    assert resp.json()["date"] == "2024-05-03 18:20:00"


def test_create_missing_field_is_400_and_writes_nothing(client):
    payload = {k: v for k, v in GROCERIES.items() if k != "category"}

    resp = client.post("/api/transactions", json=payload)

    assert resp.status_code == 400
    assert "category" in resp.json()["error"]
    assert client.get("/api/transactions").json() == []


def test_create_blank_description_is_400(client):
    resp = client.post("/api/transactions", json={**GROCERIES, "description": "   "})
    assert resp.status_code == 400
    assert client.get("/api/transactions").json() == []


def test_create_rejects_unknown_type(client):
    resp = client.post("/api/transactions", json={**GROCERIES, "type": "transfer"})
    assert resp.status_code == 400


def test_create_rejects_bad_date(client):
    resp = client.post("/api/transactions", json={**GROCERIES, "date": "yesterday"})
    assert resp.status_code == 400
    assert "date" in resp.json()["error"]


def test_list_is_newest_first(client):
    client.post("/api/transactions", json={**GROCERIES, "description": "A", "date": "2024-01-01"})
    client.post("/api/transactions", json={**GROCERIES, "description": "B", "date": "2024-02-01"})

    rows = client.get("/api/transactions").json()
    assert [r["description"] for r in rows] == ["B", "A"]


def test_update_replaces_fields(client):
    created = client.post("/api/transactions", json=GROCERIES).json()

    resp = client.put(f"/api/transactions/{created['id']}", json={**GROCERIES, "amount": 55.5, "category": "dining"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == created["id"]
    assert body["amount"] == 55.5
    assert body["category"] == "dining"
    assert body["date"] == created["date"]


def test_update_unknown_id_is_404_and_creates_nothing(client):
    resp = client.put("/api/transactions/12345", json=GROCERIES)

    assert resp.status_code == 404
    assert resp.json() == {"error": "Transaction 12345 not found"}
    assert client.get("/api/transactions").json() == []


def test_update_missing_field_is_400_and_row_unchanged(client):
    created = client.post("/api/transactions", json=GROCERIES).json()

    resp = client.put(f"/api/transactions/{created['id']}", json={**GROCERIES, "description": ""})

    assert resp.status_code == 400
    assert client.get("/api/transactions").json()[0]["description"] == "Groceries"


def test_delete_reports_count(client):
    created = client.post("/api/transactions", json=GROCERIES).json()

    assert client.delete("/api/transactions/999").json() == {"deleted": 0}
    assert client.delete(f"/api/transactions/{created['id']}").json() == {"deleted": 1}
    assert client.get("/api/transactions").json() == []


def test_summary_empty_is_zero(client):
    resp = client.get("/api/summary")
    assert resp.status_code == 200
    assert resp.json() == {"totalIncome": 0, "totalExpenses": 0, "balance": 0}


def test_summary_after_income_and_expense(client):
    client.post("/api/transactions", json=SALARY)
    client.post("/api/transactions", json=GROCERIES)

    assert client.get("/api/summary").json() == {"totalIncome": 100, "totalExpenses": 40, "balance": 60}


def test_store_failure_is_500_with_message(client, engine):
    Base.metadata.drop_all(bind=engine)

    resp = client.get("/api/transactions")

    assert resp.status_code == 500
    assert "no such table" in resp.json()["error"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_database_routes_run_in_threadpool():
    import inspect

    import server

    for handler in (
        server.read_transactions,
        server.add_transaction,
        server.edit_transaction,
        server.remove_transaction,
        server.read_summary,
    ):
        assert not inspect.iscoroutinefunction(handler), handler.__name__


def test_offset_dates_keep_list_chronological(client):
    client.post("/api/transactions", json={**GROCERIES, "description": "A", "date": "2024-05-01T10:00:00+09:00"})
    client.post("/api/transactions", json={**GROCERIES, "description": "B", "date": "2024-05-01T05:00:00+00:00"})

    assert [r["description"] for r in client.get("/api/transactions").json()] == ["B", "A"]
