from datetime import datetime

from fleetledger import models
from fleetledger.reporting.calculator import CATEGORY_SENTINEL


def _create_category(client, name: str) -> dict:
    resp = client.post("/api/categories", json={"name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_categories_crud(client):
    wash = _create_category(client, "Yıkama")
    assert wash["is_active"] is True

    r = client.post("/api/categories", json={"name": "Yıkama"})
    assert r.status_code == 409

    other = _create_category(client, "Bakım")
    r = client.patch(f"/api/categories/{other['id']}", json={"name": "Yıkama"})
    assert r.status_code == 409

    r = client.patch(f"/api/categories/{other['id']}", json={"description": "Periyodik", "is_active": False})
    assert r.status_code == 200
    assert r.json()["description"] == "Periyodik"

    names = [c["name"] for c in client.get("/api/categories").json()]
    assert names == ["Yıkama"]
    names = [c["name"] for c in client.get("/api/categories", params={"include_inactive": True}).json()]
    assert sorted(names) == ["Bakım", "Yıkama"]

    r = client.delete(f"/api/categories/{wash['id']}")
    assert r.status_code == 204
    assert client.delete(f"/api/categories/{wash['id']}").status_code == 404
    assert client.patch("/api/categories/9999", json={"name": "X"}).status_code == 404


def test_deleted_category_moves_transactions_to_sentinel(client):
    category = _create_category(client, "Lastik")
    r = client.post("/api/transactions", json={
        "amount": 100,
        "expense": 10,
        "transaction_date": "2024-07-20T09:00:00",
        "category_id": category["id"],
    })
    assert r.status_code == 201, r.text
    assert client.delete(f"/api/categories/{category['id']}").status_code == 204

    txn = client.get(f"/api/transactions/{r.json()['id']}").json()
    assert txn["category_id"] is None
    report = client.get("/api/profit/daily", params={"date": "2024-07-20"}).json()
    assert report["data"]["breakdowns"]["categories"][0]["key"] == "Kategori Belirtilmemiş"


def test_vehicle_plate_is_normalized(client):
    r = client.post("/api/vehicles", json={"plate": "34 abc 123", "brand": "Ford", "model": "Transit"})
    assert r.status_code == 201, r.text
    vehicle = r.json()
    assert vehicle["plate"] == "34ABC123"

    assert client.post("/api/vehicles", json={"plate": "34ABC123"}).status_code == 409

    r = client.get("/api/vehicles/34abc123")
    assert r.status_code == 200
    assert r.json()["id"] == vehicle["id"]
    assert client.get("/api/vehicles/06XYZ99").status_code == 404

    r = client.patch(f"/api/vehicles/{vehicle['id']}", json={"customer_name": "Ayşe Kaya"})
    assert r.status_code == 200
    assert r.json()["customer_name"] == "Ayşe Kaya"
    assert r.json()["plate"] == "34ABC123"


def test_personnel_crud(client):
    r = client.post("/api/personnel", json={"full_name": "Ali Veli", "username": "Ali"})
    assert r.status_code == 201, r.text
    person = r.json()
    assert person["username"] == "ali"
    assert person["role"] == "employee"

    r = client.post("/api/personnel", json={"full_name": "Başka Ali", "username": "ali"})
    assert r.status_code == 409

    r = client.post("/api/personnel", json={"full_name": "Veli", "username": "veli", "email": "not-an-email"})
    assert r.status_code == 422

    r = client.patch(f"/api/personnel/{person['id']}", json={"role": "admin", "full_name": None})
    assert r.status_code == 200
    assert r.json()["role"] == "admin"
    assert r.json()["full_name"] == "Ali Veli"

    assert client.patch("/api/personnel/9999", json={"role": "admin"}).status_code == 404
    assert len(client.get("/api/personnel").json()) == 1


def test_transactions_crud_and_cancel(client):
    category = _create_category(client, "Yıkama")
    payload = {
        "amount": 250,
        "expense": 50,
        "transaction_date": "2024-07-20T12:00:00+03:00",
        "category_id": category["id"],
        "payment_method": "cash",
    }
    r = client.post("/api/transactions", json=payload)
    assert r.status_code == 201, r.text
    txn = r.json()
    # Stored as naive UTC
    assert txn["transaction_date"] == "2024-07-20T09:00:00"
    assert txn["status"] == "completed"

    report = client.get("/api/profit/daily", params={"date": "2024-07-20"}).json()
    assert report["data"]["summary"]["total_revenue"] == 250

    r = client.patch(f"/api/transactions/{txn['id']}", json={"amount": 300, "description": "İç dış yıkama"})
    assert r.status_code == 200
    assert r.json()["amount"] == 300

    r = client.post(f"/api/transactions/{txn['id']}/cancel")
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"
    assert client.post(f"/api/transactions/{txn['id']}/cancel").status_code == 409

    report = client.get("/api/profit/daily", params={"date": "2024-07-20"}).json()
    assert report["data"]["summary"]["transaction_count"] == 0

    r = client.get("/api/transactions", params={"status": "cancelled"})
    assert r.status_code == 200
    assert r.headers["X-Total-Count"] == "1"

    assert client.delete(f"/api/transactions/{txn['id']}").status_code == 204
    assert client.get(f"/api/transactions/{txn['id']}").status_code == 404


def test_transaction_with_unknown_reference(client):
    r = client.post("/api/transactions", json={"amount": 10, "vehicle_id": 4242})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid vehicle for transaction"


def test_list_transactions_filters(client):
    cat = _create_category(client, "Yakıt")
    for day, amount in (("2024-07-01", 10), ("2024-07-02", 20), ("2024-07-03", 30)):
        r = client.post("/api/transactions", json={
            "amount": amount,
            "transaction_date": f"{day}T10:00:00",
            "category_id": cat["id"] if amount > 10 else None,
        })
        assert r.status_code == 201, r.text

    r = client.get("/api/transactions", params={"start": "2024-07-02", "end": "2024-07-03"})
    assert [t["amount"] for t in r.json()] == [30, 20]
    assert r.headers["X-Total-Count"] == "2"

    r = client.get("/api/transactions", params={"category_id": cat["id"], "page_size": 1})
    assert len(r.json()) == 1
    assert r.headers["X-Total-Count"] == "2"


def test_personnel_lookup_and_stats(client):
    ids = []
    for name, username in (("Ali Veli", "ali"), ("Ayşe Kaya", "ayse")):
        r = client.post("/api/personnel", json={"full_name": name, "username": username})
        assert r.status_code == 201, r.text
        ids.append(r.json()["id"])
    client.patch(f"/api/personnel/{ids[1]}", json={"is_active": False})

    r = client.get(f"/api/personnel/{ids[0]}")
    assert r.status_code == 200
    assert r.json()["username"] == "ali"
    assert client.get("/api/personnel/9999").status_code == 404

    r = client.get("/api/personnel/stats/overview")
    assert r.status_code == 200
    assert r.json() == {"total_personnel": 2, "active_personnel": 1, "inactive_personnel": 1}


def test_transaction_stats_overview(client, refs, add_txn):
    add_txn(datetime(2024, 7, 1, 9), 100, 20, vehicle=refs["vehicle"], person=refs["person"])
    add_txn(datetime(2024, 7, 2, 9), 50, None, vehicle=refs["vehicle"])
    add_txn(datetime(2024, 7, 3, 9), 30, 5)
    add_txn(datetime(2024, 7, 3, 10), 999, 0, status=models.TransactionStatus.CANCELLED)

    r = client.get("/api/transactions/stats/overview")
    assert r.status_code == 200, r.text
    assert r.json() == {
        "transaction_count": 3,
        "total_amount": 180,
        "total_expense": 25,
        "average_amount": 60,
        "unique_vehicles": 1,
        "unique_personnel": 1,
    }

    stats = client.get("/api/transactions/stats/overview", params={"start": "2024-07-02"}).json()
    assert stats["transaction_count"] == 2
    assert stats["average_amount"] == 40
    assert stats["unique_personnel"] == 0


def test_transaction_stats_by_category(client, refs, add_txn):
    add_txn(datetime(2024, 7, 1, 9), 100, 20, category=refs["wash"])
    add_txn(datetime(2024, 7, 2, 9), 50, None, category=refs["repair"])
    add_txn(datetime(2024, 7, 3, 9), 30, 5)
    add_txn(datetime(2024, 7, 3, 10), 999, 0, category=refs["wash"], status=models.TransactionStatus.CANCELLED)

    rows = client.get("/api/transactions/stats/by-category").json()
    assert [(row["category_name"], row["total_amount"]) for row in rows] == [
        ("Yıkama", 100),
        ("Bakım", 50),
        (CATEGORY_SENTINEL, 30),
    ]
    assert rows[0]["transaction_count"] == 1
    assert rows[0]["total_expense"] == 20
    assert rows[2]["category_id"] is None

    rows = client.get("/api/transactions/stats/by-category", params={"start": "2024-07-03"}).json()
    assert rows[0]["category_name"] == CATEGORY_SENTINEL
    assert {row["category_name"]: row["transaction_count"] for row in rows[1:]} == {"Yıkama": 0, "Bakım": 0}
    assert all(row["average_amount"] == 0 for row in rows[1:])


def test_customers_group_vehicles_by_owner(client):
    owners = {
        "34ABC123": ("Ayşe Kaya", "5551112233"),
        "06XYZ99": ("Ayşe Kaya", "5551112233"),
        "35DEF45": ("Mehmet Demir", None),
        "01AAA01": (None, None),
    }
    vehicle_ids = {}
    for plate, (name, phone) in owners.items():
        r = client.post("/api/vehicles", json={"plate": plate, "customer_name": name, "customer_phone": phone})
        assert r.status_code == 201, r.text
        vehicle_ids[plate] = r.json()["id"]

    def post(plate, amount, day, **extra):
        r = client.post("/api/transactions", json={
            "amount": amount,
            "transaction_date": f"2024-07-{day:02d}T10:00:00",
            "vehicle_id": vehicle_ids[plate],
            **extra,
        })
        assert r.status_code == 201, r.text
        return r.json()

    post("34ABC123", 100, 1)
    latest = post("06XYZ99", 50, 5)
    post("06XYZ99", 1000, 9, status="cancelled")
    post("35DEF45", 500, 2)
    post("01AAA01", 70, 3)

    r = client.get("/api/vehicles/customers")
    assert r.status_code == 200, r.text
    assert r.headers["X-Total-Count"] == "2"
    mehmet, ayse = r.json()
    assert mehmet["customer_name"] == "Mehmet Demir"
    assert mehmet["total_revenue"] == 500
    assert ayse["vehicle_count"] == 2
    assert ayse["vehicle_plates"] == ["06XYZ99", "34ABC123"]
    assert ayse["transaction_count"] == 2
    assert ayse["total_revenue"] == 150
    assert ayse["last_transaction_date"] == latest["transaction_date"]

    r = client.get("/api/vehicles/customers", params={"search": "06 xyz"})
    assert [(c["customer_name"], c["vehicle_count"]) for c in r.json()] == [("Ayşe Kaya", 1)]
