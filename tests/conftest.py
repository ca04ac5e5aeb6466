import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from stitchhub.core.database import Base, get_db
from stitchhub.core.security import get_password_hash
from stitchhub.models.user import User, UserRole
from main import app

# Test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(scope="function")
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(setup_database):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_user(email, name, role=UserRole.WORKER, password="secret123", monthly_salary=None):
    db = TestingSessionLocal()
    user = User(
        email=email,
        name=name,
        hashed_password=get_password_hash(password),
        role=role.value,
        monthly_salary=monthly_salary,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    db.close()
    return user


def login(client, email, password="secret123"):
    response = client.post(
        "/api/auth/login",
        data={"username": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def owner(setup_database):
    return create_user("owner@test.com", "Olivia Owner", UserRole.OWNER)


@pytest.fixture
def worker(setup_database):
    return create_user("worker@test.com", "Walter Worker", monthly_salary=1000.0)


@pytest.fixture
def other_worker(setup_database):
    return create_user("another@test.com", "Anna Worker", monthly_salary=800.0)


@pytest.fixture
def owner_headers(client, owner):
    return login(client, owner.email)


@pytest.fixture
def worker_headers(client, worker):
    return login(client, worker.email)
