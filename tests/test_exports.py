def add_export(client, headers, **overrides):
    payload = {"date": "2024-05-02", "company_name": "Nordic Apparel", "quantity": 100,
               "price_per_unit": 4.5, "description": "Shirt collars"}
    payload.update(overrides)
    return client.post("/api/exports/", json=payload, headers=headers)


def test_create_export(client, owner_headers):
    response = add_export(client, owner_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["total_amount"] == 450.0
    assert data["company"]["name"] == "Nordic Apparel"
    assert data["description"]["text"] == "Shirt collars"
    assert data["description"]["price_per_unit"] is None


def test_exports_are_owner_only(client, worker_headers):
    assert add_export(client, worker_headers).status_code == 403
    assert client.get("/api/exports/", headers=worker_headers).status_code == 403


def test_companies_are_reused(client, owner_headers):
    first = add_export(client, owner_headers).json()
    second = add_export(client, owner_headers, date="2024-05-03").json()
    add_export(client, owner_headers, company_name="Atlas Wear")

    assert first["company_id"] == second["company_id"]

    companies = client.get("/api/exports/companies", headers=owner_headers).json()
    assert companies == [
        {"id": companies[0]["id"], "name": "Atlas Wear", "export_count": 1},
        {"id": first["company_id"], "name": "Nordic Apparel", "export_count": 2},
    ]


def test_update_description_price(client, owner_headers):
    add_export(client, owner_headers, update_description_price=True, price_per_unit=5.25)

    descriptions = client.get("/api/exports/descriptions", headers=owner_headers).json()
    assert descriptions[0]["text"] == "Shirt collars"
    assert descriptions[0]["price_per_unit"] == 5.25
    assert descriptions[0]["export_count"] == 1


def test_descriptions_shared_with_work(client, owner_headers, worker_headers):
    client.post(
        "/api/work/",
        json={"date": "2024-05-01", "quantity": 2, "price_per_unit": 1, "description": "Shirt collars"},
        headers=worker_headers
    )
    export = add_export(client, owner_headers).json()
    work_descriptions = client.get("/api/work/descriptions", headers=worker_headers).json()

    assert len(work_descriptions) == 1
    assert work_descriptions[0]["id"] == export["description_id"]
    assert work_descriptions[0]["work_count"] == 1
    assert work_descriptions[0]["export_count"] == 1


def test_validation(client, owner_headers):
    assert add_export(client, owner_headers, quantity=0).status_code == 422
    assert add_export(client, owner_headers, price_per_unit=0).status_code == 422
    assert add_export(client, owner_headers, company_name="").status_code == 422


def test_list_filters_and_order(client, owner_headers):
    add_export(client, owner_headers, date="2024-05-01")
    add_export(client, owner_headers, date="2024-05-20", company_name="Atlas Wear", description="Cuffs")
    add_export(client, owner_headers, date="2024-06-01")

    exports = client.get("/api/exports/", headers=owner_headers).json()
    assert [e["date"] for e in exports] == ["2024-06-01", "2024-05-20", "2024-05-01"]

    nordic = client.get("/api/exports/?company_name=nordic", headers=owner_headers).json()
    assert len(nordic) == 2

    cuffs = client.get("/api/exports/?description=cuff", headers=owner_headers).json()
    assert [e["company"]["name"] for e in cuffs] == ["Atlas Wear"]

    may = client.get("/api/exports/?start_date=2024-05-01&end_date=2024-05-31", headers=owner_headers).json()
    assert len(may) == 2


def test_statistics(client, owner_headers):
    add_export(client, owner_headers, quantity=100, price_per_unit=2)
    add_export(client, owner_headers, quantity=50, price_per_unit=4, company_name="Atlas Wear", description="Cuffs")
    add_export(client, owner_headers, quantity=10, price_per_unit=3)

    data = client.get("/api/exports/statistics", headers=owner_headers).json()
    assert data["summary"]["total_revenue"] == 430.0
    assert data["summary"]["total_quantity"] == 160
    assert data["summary"]["total_exports"] == 3
    assert data["summary"]["average_price"] == 3.0
    assert data["by_company"][0] == {
        "company": "Nordic Apparel", "total_revenue": 230.0, "total_quantity": 110, "count": 2
    }
    assert data["by_description"][1]["description"] == "Cuffs"

    filtered = client.get("/api/exports/statistics?company_name=atlas", headers=owner_headers).json()
    assert filtered["summary"]["total_revenue"] == 200.0
    assert [c["company"] for c in filtered["by_company"]] == ["Atlas Wear"]


def test_update_recomputes_total(client, owner_headers):
    export = add_export(client, owner_headers).json()

    response = client.put(
        f"/api/exports/{export['id']}",
        json={"quantity": 10, "company_name": "Atlas Wear", "date": "2024-05-09"},
        headers=owner_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total_amount"] == 45.0
    assert data["company"]["name"] == "Atlas Wear"
    assert data["date"] == "2024-05-09"


def test_get_and_delete(client, owner_headers):
    export = add_export(client, owner_headers).json()
    assert client.get(f"/api/exports/{export['id']}", headers=owner_headers).status_code == 200
    assert client.delete(f"/api/exports/{export['id']}", headers=owner_headers).status_code == 200
    assert client.get(f"/api/exports/{export['id']}", headers=owner_headers).status_code == 404
