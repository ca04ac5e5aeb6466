import pytest
from fastapi.testclient import TestClient

from conftest import TestingSessionLocal
from main import app
from stitchhub.models.work import Work, WorkDescription
from stitchhub.services.attendance_service import attendance_service


def log_work(client, headers, **overrides):
    payload = {"date": "2024-04-02", "quantity": 4, "price_per_unit": 12.5, "description": "Collar stitching"}
    payload.update(overrides)
    return client.post("/api/work/", json=payload, headers=headers)


def test_worker_logs_work_and_is_marked_present(client, worker, worker_headers):
    response = log_work(client, worker_headers)
    assert response.status_code == 201
    work = response.json()
    assert work["total_amount"] == 50.0
    assert work["user_id"] == worker.id
    assert work["description"]["text"] == "Collar stitching"

    response = client.get("/api/attendance/2024-04-02", headers=worker_headers)
    assert response.status_code == 200
    attendance = response.json()
    assert attendance["status"] == "PRESENT"
    assert attendance["work_id"] == work["id"]
    assert attendance["work"]["total_amount"] == 50.0


def test_worker_cannot_log_for_someone_else(client, worker, other_worker, worker_headers):
    response = log_work(client, worker_headers, user_id=other_worker.id)
    assert response.status_code == 201
    assert response.json()["user_id"] == worker.id


def test_owner_logs_for_worker(client, owner_headers, worker):
    response = log_work(client, owner_headers, user_id=worker.id)
    assert response.status_code == 201
    assert response.json()["user_id"] == worker.id


def test_owner_logs_for_unknown_user(client, owner_headers):
    response = log_work(client, owner_headers, user_id=9999)
    assert response.status_code == 404


def test_description_is_trimmed_and_reused(client, worker_headers):
    first = log_work(client, worker_headers, description="  Pocket sewing  ").json()
    second = log_work(client, worker_headers, date="2024-04-03", description="Pocket sewing").json()
    assert first["description"]["text"] == "Pocket sewing"
    assert first["description_id"] == second["description_id"]


def test_work_by_description_id(client, owner_headers, worker_headers):
    description = client.post(
        "/api/work/descriptions",
        json={"text": "Zip fitting", "price_per_unit": 3},
        headers=owner_headers
    ).json()

    response = log_work(client, worker_headers, description=None, description_id=description["id"])
    assert response.status_code == 201
    assert response.json()["description"]["text"] == "Zip fitting"


def test_work_requires_a_description(client, worker_headers):
    response = log_work(client, worker_headers, description=None)
    assert response.status_code == 422


def test_unknown_description_id_without_text(client, worker_headers):
    response = log_work(client, worker_headers, description=None, description_id=424242)
    assert response.status_code == 400


@pytest.mark.parametrize("field,value", [("quantity", 0), ("price_per_unit", -1), ("date", "02/04/2024")])
def test_work_validation(client, worker_headers, field, value):
    response = log_work(client, worker_headers, **{field: value})
    assert response.status_code == 422


def test_duplicate_description(client, owner_headers):
    client.post("/api/work/descriptions", json={"text": "Hemming"}, headers=owner_headers)
    response = client.post("/api/work/descriptions", json={"text": " Hemming "}, headers=owner_headers)
    assert response.status_code == 409


def test_descriptions_usage_counts(client, owner_headers, worker_headers):
    log_work(client, worker_headers, description="Buttons")
    log_work(client, worker_headers, date="2024-04-05", description="Buttons")
    log_work(client, worker_headers, description="Alterations")

    response = client.get("/api/work/descriptions", headers=worker_headers)
    assert response.status_code == 200
    data = response.json()
    assert [d["text"] for d in data] == ["Alterations", "Buttons"]
    assert data[1]["work_count"] == 2
    assert data[1]["export_count"] == 0


def test_delete_work_reverts_attendance(client, owner_headers, worker_headers):
    work = log_work(client, worker_headers).json()

    response = client.delete(f"/api/work/{work['id']}", headers=owner_headers)
    assert response.status_code == 200

    attendance = client.get("/api/attendance/2024-04-02", headers=worker_headers).json()
    assert attendance["status"] == "ABSENT"
    assert attendance["work_id"] is None

    assert client.get(f"/api/work/{work['id']}", headers=owner_headers).status_code == 404


def test_second_entry_same_day_relinks_attendance(client, worker_headers, owner_headers):
    first = log_work(client, worker_headers).json()
    second = log_work(client, worker_headers, description="Cuffs").json()

    attendance = client.get("/api/attendance/2024-04-02", headers=worker_headers).json()
    assert attendance["work_id"] == second["id"]

    # deleting the unlinked entry leaves the day alone
    client.delete(f"/api/work/{first['id']}", headers=owner_headers)
    attendance = client.get("/api/attendance/2024-04-02", headers=worker_headers).json()
    assert attendance["status"] == "PRESENT"
    assert attendance["work_id"] == second["id"]


def test_deleting_linked_entry_falls_back_to_remaining_work(client, worker_headers, owner_headers):
    first = log_work(client, worker_headers, description="Collars").json()
    second = log_work(client, worker_headers, description="Cuffs").json()

    client.delete(f"/api/work/{second['id']}", headers=owner_headers)
    attendance = client.get("/api/attendance/2024-04-02", headers=worker_headers).json()
    assert attendance["status"] == "PRESENT"
    assert attendance["work_id"] == first["id"]

    client.delete(f"/api/work/{first['id']}", headers=owner_headers)
    attendance = client.get("/api/attendance/2024-04-02", headers=worker_headers).json()
    assert attendance["status"] == "ABSENT"
    assert attendance["work_id"] is None


def test_report_counts_remaining_work_after_linked_delete(client, worker_headers, owner_headers):
    log_work(client, worker_headers, description="Collars", quantity=2, price_per_unit=10)
    linked = log_work(client, worker_headers, description="Cuffs").json()
    client.delete(f"/api/work/{linked['id']}", headers=owner_headers)

    report = client.get("/api/attendance/report/all/2024-04-02/2024-04-02", headers=owner_headers).json()
    day = report["report"][0]["attendance"][0]
    assert day["status"] == "PRESENT"
    assert day["has_work"] is True
    assert day["amount"] == 20.0


def test_failed_attendance_sync_rolls_back_work(worker_headers, monkeypatch):
    def fail(db, work):
        raise RuntimeError("attendance write failed")

    monkeypatch.setattr(attendance_service, "mark_present_for_work", fail)
    failing_client = TestClient(app, raise_server_exceptions=False)

    response = log_work(failing_client, worker_headers, description="Brand new description")
    assert response.status_code == 500

    db = TestingSessionLocal()
    try:
        assert db.query(Work).count() == 0
        assert db.query(WorkDescription).count() == 0
    finally:
        db.close()


def test_work_overrides_manual_absence(client, owner_headers, worker, worker_headers):
    client.post(
        "/api/attendance/",
        json={"date": "2024-04-02", "user_id": worker.id, "status": "ABSENT"},
        headers=owner_headers
    )
    log_work(client, worker_headers)

    attendance = client.get("/api/attendance/2024-04-02", headers=worker_headers).json()
    assert attendance["status"] == "PRESENT"


def test_worker_cannot_delete_or_update_work(client, worker_headers):
    work = log_work(client, worker_headers).json()
    assert client.delete(f"/api/work/{work['id']}", headers=worker_headers).status_code == 403
    assert client.put(f"/api/work/{work['id']}", json={"quantity": 1}, headers=worker_headers).status_code == 403


def test_update_work_recomputes_total(client, owner_headers, worker_headers):
    work = log_work(client, worker_headers).json()

    response = client.put(
        f"/api/work/{work['id']}",
        json={"quantity": 10, "description": "Lining"},
        headers=owner_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total_amount"] == 125.0
    assert data["description"]["text"] == "Lining"


def test_get_work_visibility(client, owner_headers, worker_headers, other_worker):
    other_work = log_work(client, owner_headers, user_id=other_worker.id).json()
    own_work = log_work(client, worker_headers).json()

    assert client.get(f"/api/work/{own_work['id']}", headers=worker_headers).status_code == 200
    assert client.get(f"/api/work/{other_work['id']}", headers=worker_headers).status_code == 403


def test_list_work_filters(client, owner_headers, worker, other_worker, worker_headers):
    log_work(client, worker_headers, date="2024-04-01", description="Hemming")
    log_work(client, worker_headers, date="2024-04-10", description="Buttons")
    log_work(client, owner_headers, user_id=other_worker.id, date="2024-04-05", description="Hemming")

    all_work = client.get("/api/work/", headers=owner_headers).json()
    assert [w["date"] for w in all_work] == ["2024-04-10", "2024-04-05", "2024-04-01"]

    by_user = client.get(f"/api/work/?user_id={worker.id}", headers=owner_headers).json()
    assert len(by_user) == 2

    by_range = client.get("/api/work/?start_date=2024-04-02&end_date=2024-04-09", headers=owner_headers).json()
    assert [w["date"] for w in by_range] == ["2024-04-05"]

    by_text = client.get("/api/work/?description=hem", headers=owner_headers).json()
    assert len(by_text) == 2


def test_list_work_requires_owner(client, worker_headers):
    assert client.get("/api/work/", headers=worker_headers).status_code == 403


def test_my_work(client, owner_headers, worker_headers, other_worker):
    log_work(client, worker_headers)
    log_work(client, owner_headers, user_id=other_worker.id)

    response = client.get("/api/work/my-work", headers=worker_headers)
    assert response.status_code == 200
    assert len(response.json()) == 1


def test_statistics(client, owner_headers, worker, other_worker, worker_headers):
    log_work(client, worker_headers, date="2024-04-01", quantity=2, price_per_unit=10, description="Hemming")
    log_work(client, worker_headers, date="2024-04-01", quantity=1, price_per_unit=5, description="Buttons")
    log_work(client, owner_headers, user_id=other_worker.id, date="2024-04-02", quantity=4, price_per_unit=10,
             description="Hemming")

    data = client.get("/api/work/statistics", headers=owner_headers).json()
    assert data["summary"] == {
        "total_amount": 65.0,
        "total_quantity": 7,
        "total_entries": 3,
        "average_amount": pytest.approx(65.0 / 3),
    }
    assert data["by_user"][0]["user_name"] == "Anna Worker"
    assert data["by_user"][0]["total_amount"] == 40.0
    assert data["by_description"][0] == {
        "description": "Hemming", "total_amount": 60.0, "total_quantity": 6, "count": 2
    }
    assert [d["date"] for d in data["daily"]] == ["2024-04-01", "2024-04-02"]

    own = client.get(f"/api/work/statistics?user_id={other_worker.id}", headers=worker_headers).json()
    assert own["summary"]["total_entries"] == 2
    assert {u["user_id"] for u in own["by_user"]} == {worker.id}


def test_statistics_empty(client, owner_headers):
    data = client.get("/api/work/statistics", headers=owner_headers).json()
    assert data["summary"]["total_amount"] == 0.0
    assert data["summary"]["total_entries"] == 0
    assert data["by_user"] == []


def test_export_work_csv(client, owner_headers, worker_headers):
    log_work(client, worker_headers)

    response = client.get("/api/work/export/csv", headers=owner_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0] == "id,date,worker,description,quantity,price_per_unit,total_amount"
    assert "Walter Worker" in lines[1]
    assert "Collar stitching" in lines[1]


def test_work_date_with_utc_offset(client, worker_headers):
    response = log_work(client, worker_headers, date="2024-04-02T10:00:00+05:30")
    assert response.status_code == 201
    assert response.json()["date"] == "2024-04-02"
