def add_product(test_client, headers, **overrides):
    payload = {"name": "School uniforms", "quantity": 50, "client": "Green Valley School",
               "start_date": "2024-01-10", "revenue": 2500}
    payload.update(overrides)
    return test_client.post("/api/products/", json=payload, headers=headers)


def test_create_product(client, owner_headers):
    response = add_product(client, owner_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["client"] == "Green Valley School"
    assert data["end_date"] is None


def test_end_date_before_start_date(client, owner_headers):
    response = add_product(client, owner_headers, end_date="2024-01-01")
    assert response.status_code == 422


def test_update_end_date_before_start_date(client, owner_headers):
    product = add_product(client, owner_headers).json()
    response = client.put(f"/api/products/{product['id']}", json={"end_date": "2023-12-31"}, headers=owner_headers)
    assert response.status_code == 422


def test_products_are_owner_only(client, worker_headers):
    assert client.get("/api/products/", headers=worker_headers).status_code == 403
    assert add_product(client, worker_headers).status_code == 403


def test_status_and_client_filters(client, owner_headers):
    add_product(client, owner_headers, name="Open order")
    add_product(client, owner_headers, name="Done order", end_date="2024-02-01")
    add_product(client, owner_headers, name="Other client", client="Hotel Sunrise")

    in_progress = client.get("/api/products/?status=in_progress", headers=owner_headers).json()
    assert {p["name"] for p in in_progress} == {"Open order", "Other client"}

    completed = client.get("/api/products/?status=completed", headers=owner_headers).json()
    assert [p["name"] for p in completed] == ["Done order"]

    hotel = client.get("/api/products/?client=sunrise", headers=owner_headers).json()
    assert [p["name"] for p in hotel] == ["Other client"]

    assert client.get("/api/products/?status=unknown", headers=owner_headers).status_code == 422


def test_complete_product(client, owner_headers):
    product = add_product(client, owner_headers).json()
    response = client.put(
        f"/api/products/{product['id']}",
        json={"end_date": "2024-03-01", "revenue": 2600},
        headers=owner_headers
    )
    assert response.status_code == 200
    assert response.json()["end_date"].startswith("2024-03-01")
    assert response.json()["revenue"] == 2600


def test_delete_product(client, owner_headers):
    product = add_product(client, owner_headers).json()
    assert client.delete(f"/api/products/{product['id']}", headers=owner_headers).status_code == 200
    assert client.get(f"/api/products/{product['id']}", headers=owner_headers).status_code == 404


def test_statistics(client, owner_headers):
    add_product(client, owner_headers, quantity=10, revenue=1000)
    add_product(client, owner_headers, quantity=5, revenue=500, end_date="2024-02-01")
    add_product(client, owner_headers, quantity=3, revenue=None, client="Hotel Sunrise")

    data = client.get("/api/products/statistics", headers=owner_headers).json()
    assert data["summary"] == {
        "total_products": 3,
        "total_quantity": 18,
        "total_revenue": 1500.0,
        "in_progress": 2,
        "completed": 1,
    }
    assert data["by_client"][0] == {
        "client": "Green Valley School", "total_revenue": 1500.0, "total_quantity": 15, "count": 2
    }
    assert data["by_client"][1]["total_revenue"] == 0.0
