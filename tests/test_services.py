from datetime import datetime

import pytest
from fastapi import HTTPException
from jose import jwt

from init_db import seed_users, SEED_USERS
from stitchhub.core.security import create_access_token, decode_access_token, verify_password
from stitchhub.models.user import User
from stitchhub.schemas.common import parse_datetime
from stitchhub.services.salary_service import month_bounds
from stitchhub.services.spreadsheet_service import spreadsheet_service


def test_month_bounds():
    start, end, label = month_bounds("2024-02")
    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 3, 1)
    assert label == "2024-02"


def test_month_bounds_december_rolls_over():
    start, end, label = month_bounds("2023-12")
    assert end == datetime(2024, 1, 1)


def test_month_bounds_defaults_to_current_month():
    start, end, label = month_bounds(today=datetime(2024, 7, 19, 15, 30))
    assert start == datetime(2024, 7, 1)
    assert label == "2024-07"


def test_month_bounds_rejects_garbage():
    with pytest.raises(HTTPException) as exc:
        month_bounds("2024/07")
    assert exc.value.status_code == 400


def test_access_token_round_trip():
    token = create_access_token(7, "WORKER")
    payload = decode_access_token(token)
    assert payload["sub"] == "7"
    assert payload["role"] == "WORKER"


def test_decode_token_signed_with_other_key():
    token = jwt.encode({"sub": "7", "role": "OWNER"}, "some-other-key", algorithm="HS256")
    assert decode_access_token(token) is None


def test_spreadsheet_csv_formats_datetimes():
    buffer = spreadsheet_service.to_csv(
        [{"when": datetime(2024, 1, 2, 3, 4, 5), "amount": 1.5}],
        ["when", "amount"]
    )
    assert buffer.getvalue().decode("utf-8").splitlines() == ["when,amount", "2024-01-02 03:04:05,1.5"]


def test_seed_users_is_idempotent(db_session):
    assert seed_users(db_session) == len(SEED_USERS)
    assert seed_users(db_session) == 0

    admin = db_session.query(User).filter(User.email == "admin@stitchhub.com").first()
    assert admin.role == "OWNER"
    assert verify_password("Admin@123", admin.hashed_password)
    assert db_session.query(User).filter(User.role == "WORKER").count() == 3


def test_seeded_owner_can_log_in(client, db_session):
    seed_users(db_session)
    response = client.post(
        "/api/auth/login",
        data={"username": "admin@stitchhub.com", "password": "Admin@123"}
    )
    assert response.status_code == 200


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_parse_datetime_accepts_offsets():
    assert parse_datetime("2024-04-02T10:00:00+05:30") == datetime(2024, 4, 2, 4, 30)
    assert parse_datetime("2024-04-02T10:00:00Z") == datetime(2024, 4, 2, 10, 0)
    assert parse_datetime("2024-04-02") == datetime(2024, 4, 2)


def test_parse_datetime_rejects_other_formats():
    with pytest.raises(ValueError):
        parse_datetime("02/04/2024")
