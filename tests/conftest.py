import os
import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker


# Ensure `import backend.devconnector...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before the package's config module is first imported.
os.environ["DISABLE_DOTENV"] = "1"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GITHUB_CLIENT_ID"] = ""
os.environ["GITHUB_CLIENT_SECRET"] = ""


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite3"


@pytest.fixture()
def app(test_db_path: Path) -> FastAPI:
    """
    Create a FastAPI app wired to a temporary SQLite DB.

    The schema is dropped and recreated for every test.
    """
    os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{test_db_path}"

    from backend.devconnector import database as db

    engine = db.make_engine(os.environ["DATABASE_URL"])
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Patch the shared database module so router dependencies use the test DB.
    db.engine = engine
    db.SessionLocal = TestingSessionLocal

    # Import models so Base metadata is populated, then create tables.
    from backend.devconnector import models  # noqa: F401

    db.Base.metadata.drop_all(bind=engine)
    db.Base.metadata.create_all(bind=engine)

    from backend.devconnector.main import create_app

    yield create_app()
    engine.dispose()


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(app: FastAPI):
    """
    Direct SQLAlchemy session bound to the same temporary SQLite DB used by the test app.
    """
    from backend.devconnector import database

    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _register(client: TestClient, *, name: str, email: str, password: str = "secret1") -> str:
    r = client.post("/users", json={"name": name, "email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


@pytest.fixture()
def alice_token(client: TestClient) -> str:
    return _register(client, name="Alice", email="a@x.com")


@pytest.fixture()
def bob_token(client: TestClient) -> str:
    return _register(client, name="Bob", email="b@x.com")
