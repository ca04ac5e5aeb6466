def add_material(client, headers, **overrides):
    payload = {"name": "Cotton thread", "supplier": "Threads Ltd", "quantity": 20, "cost": 40.0,
               "date_received": "2024-03-01"}
    payload.update(overrides)
    return client.post("/api/materials/", json=payload, headers=headers)


def test_create_material(client, owner_headers):
    response = add_material(client, owner_headers, name="  Denim  ")
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Denim"
    assert data["date_received"].startswith("2024-03-01")


def test_create_material_defaults_date(client, owner_headers):
    response = add_material(client, owner_headers, date_received=None)
    assert response.status_code == 201
    assert response.json()["date_received"]


def test_create_material_validation(client, owner_headers):
    assert add_material(client, owner_headers, quantity=-1).status_code == 422
    assert add_material(client, owner_headers, name="").status_code == 422


def test_worker_can_read_but_not_write(client, owner_headers, worker_headers):
    material = add_material(client, owner_headers).json()

    assert client.get("/api/materials/", headers=worker_headers).status_code == 200
    assert client.get(f"/api/materials/{material['id']}", headers=worker_headers).status_code == 200
    assert add_material(client, worker_headers).status_code == 403
    assert client.delete(f"/api/materials/{material['id']}", headers=worker_headers).status_code == 403
    assert client.get("/api/materials/statistics", headers=worker_headers).status_code == 403


def test_list_filters(client, owner_headers):
    add_material(client, owner_headers, supplier="Threads Ltd", date_received="2024-03-01")
    add_material(client, owner_headers, supplier="Fabric World", date_received="2024-03-15T16:45:00")
    add_material(client, owner_headers, supplier="Fabric World", date_received="2024-04-02")

    by_supplier = client.get("/api/materials/?supplier=fabric", headers=owner_headers).json()
    assert len(by_supplier) == 2

    # end date includes the whole day
    in_march = client.get("/api/materials/?start_date=2024-03-01&end_date=2024-03-15", headers=owner_headers).json()
    assert len(in_march) == 2


def test_update_and_delete(client, owner_headers):
    material = add_material(client, owner_headers).json()

    response = client.put(f"/api/materials/{material['id']}", json={"quantity": 5}, headers=owner_headers)
    assert response.status_code == 200
    assert response.json()["quantity"] == 5
    assert response.json()["supplier"] == "Threads Ltd"

    assert client.delete(f"/api/materials/{material['id']}", headers=owner_headers).status_code == 200
    assert client.get(f"/api/materials/{material['id']}", headers=owner_headers).status_code == 404
    assert client.put(f"/api/materials/{material['id']}", json={"quantity": 5},
                      headers=owner_headers).status_code == 404


def test_statistics(client, owner_headers):
    add_material(client, owner_headers, supplier="Threads Ltd", quantity=10, cost=20)
    add_material(client, owner_headers, supplier="Fabric World", quantity=5, cost=100)
    add_material(client, owner_headers, supplier="Fabric World", quantity=1, cost=50)

    data = client.get("/api/materials/statistics", headers=owner_headers).json()
    assert data["summary"] == {"total_cost": 170.0, "total_quantity": 16, "total_records": 3}
    assert data["by_supplier"] == [
        {"supplier": "Fabric World", "total_cost": 150.0, "total_quantity": 6, "count": 2},
        {"supplier": "Threads Ltd", "total_cost": 20.0, "total_quantity": 10, "count": 1},
    ]
