import os
import tempfile
from datetime import date, datetime

_TEST_DIR = tempfile.mkdtemp(prefix="salon-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_EMAILS"] = "admin@salao.com.br"
os.environ["ENV"] = "test"
os.environ["SALON_TIMEZONE"] = "America/Sao_Paulo"
os.environ["CLOSED_WEEKDAYS"] = "6,0"
os.environ["SMTP_HOST"] = ""
os.environ["GOOGLE_CALENDAR_ID"] = ""

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from salon.api.deps import get_now  # noqa: E402
from salon.core.db import engine, init_db  # noqa: E402
from salon.main import app  # noqa: E402

# Tuesday 4 March 2025, 10:15 salon time
FIXED_NOW = datetime(2025, 3, 4, 10, 15)
TODAY = date(2025, 3, 4)
TOMORROW = date(2025, 3, 5)
SUNDAY = date(2025, 3, 9)
MONDAY = date(2025, 3, 10)
LAST_FRIDAY = date(2025, 2, 28)

ADMIN_EMAIL = "admin@salao.com.br"
PASSWORD = "secret123"


@pytest.fixture
async def db():
    await init_db()
    yield
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def client(db):
    app.dependency_overrides[get_now] = lambda: FIXED_NOW
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def signup(client: AsyncClient, email: str, full_name: str = "Maria Silva") -> dict:
    resp = await client.post(
        "/api/v1/auth/signup",
        json={
            "email": email,
            "password": PASSWORD,
            "full_name": full_name,
            "phone": "11999998888",
        },
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def bearer(tokens: dict) -> dict:
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
async def client_headers(client):
    return bearer(await signup(client, "client@salao.com.br"))


@pytest.fixture
async def admin_headers(client):
    return bearer(await signup(client, ADMIN_EMAIL, full_name="Simone Cardoso"))


@pytest.fixture
async def service_factory(client, admin_headers):
    async def create(name: str = "Design de Sobrancelhas", duration: str = "1h", **extra) -> dict:
        resp = await client.post(
            "/api/v1/services",
            json={"name": name, "price": 50, "duration": duration, **extra},
            headers=admin_headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return create
