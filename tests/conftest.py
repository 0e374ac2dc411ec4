import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["WHATSAPP_MOCK_MODE"] = "true"
os.environ["EVOLUTION_API_KEY"] = "test-evolution-key"  # pragma: allowlist secret
os.environ["JWT_SECRET"] = "test-jwt-secret"  # pragma: allowlist secret
os.environ["TIMEZONE"] = "America/Sao_Paulo"

from collections.abc import Callable, Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from confirmaai.db.session import get_db  # noqa: E402
from confirmaai.main import app  # noqa: E402
from confirmaai.models.base import Base  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def override_get_db() -> Iterator[Session]:
    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _schema() -> Iterator[None]:
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def session_factory() -> sessionmaker:
    return TestingSessionLocal


@pytest.fixture
def db_session() -> Iterator[Session]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> Iterator[TestClient]:
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict[str, str]]:
    """Register a clinic account and return its bearer headers."""

    def _register(
        email: str = "clinica@teste.com",
        password: str = "segredo123",  # pragma: allowlist secret
        clinic_name: str = "Clínica Teste",
        avg_appointment_value: float = 150,
    ) -> dict[str, str]:
        response = client.post(
            "/api/auth/register",
            json={
                "name": "Dra. Teste",
                "email": email,
                "password": password,
                "clinic_name": clinic_name,
                "avg_appointment_value": avg_appointment_value,
            },
        )
        assert response.status_code == 201, response.text
        login = client.post("/api/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        return {"Authorization": f"Bearer {login.json()['access_token']}"}

    return _register


@pytest.fixture
def auth_headers(register) -> dict[str, str]:
    return register()


@pytest.fixture
def create_patient(client: TestClient) -> Callable[..., dict]:
    def _create(headers: dict[str, str], name: str = "Maria Santos", phone: str = "+5511999990001", **extra):
        response = client.post(
            "/api/patients", json={"name": name, "phone": phone, **extra}, headers=headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
