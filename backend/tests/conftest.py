import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Import all models so every table is registered with Base.metadata
from carecall.models.base import Base, get_db
from carecall.services.repository import MonitoringRepository
from carecall.seed_demo import (
    DEMO_CLINICIAN_PASSWORD,
    DEMO_CLINICIAN_USERNAME,
    DEMO_FAMILY_PASSWORD,
    DEMO_FAMILY_USERNAME,
)


@pytest.fixture()
def session_factory(monkeypatch):
    """An isolated in-memory SQLite database shared by the test and the app."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestSession = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    # Patch the module-level engine/SessionLocal used by the seeder and audit middleware
    import carecall.seed_demo as sd
    import carecall.models.base as mb

    monkeypatch.setattr(sd, "engine", test_engine)
    monkeypatch.setattr(sd, "SessionLocal", TestSession)
    monkeypatch.setattr(mb, "engine", test_engine)
    monkeypatch.setattr(mb, "SessionLocal", TestSession)

    yield TestSession
    test_engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def repo(db):
    return MonitoringRepository(db)


@pytest.fixture()
def seeded(session_factory):
    from carecall.seed_demo import seed_demo_data

    seed_demo_data()


@pytest.fixture()
def client(session_factory, seeded):
    from carecall.main import create_app

    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def login(client, username, password):
    resp = client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture()
def clinician_headers(client):
    return login(client, DEMO_CLINICIAN_USERNAME, DEMO_CLINICIAN_PASSWORD)


@pytest.fixture()
def family_headers(client):
    return login(client, DEMO_FAMILY_USERNAME, DEMO_FAMILY_PASSWORD)


@pytest.fixture()
def login_as(client):
    """Log in through the API and return bearer headers."""
    def _login(username, password):
        return login(client, username, password)
    return _login
