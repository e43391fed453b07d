import os
import tempfile

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for the default database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_policy_ledger.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["ALGORITHM"] = "HS256"
os.environ["ADMINISTRATOR_PRINCIPAL"] = "admin"
os.environ.pop("TREASURY_URL", None)
os.environ.pop("EVENT_WEBHOOK_URL", None)

import shutil
import threading

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from app.main import app
from app.core.security import create_access_token
from app.services.events import EventEmitter
from app.services.treasury import TransferResult

ADMIN = "admin"
INSURER = "insurer-1"
HOLDER = "alice"
OTHER = "mallory"

START_TIME = 1_700_000_000
DAY = 24 * 60 * 60


class FakeClock:
    def __init__(self, now: int = START_TIME) -> None:
        self.current = now

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += seconds


class RecordingSink:
    def __init__(self) -> None:
        self.published: list[tuple[str, dict]] = []

    def publish(self, event_kind: str, payload: dict) -> None:
        self.published.append((event_kind, payload))

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.published]


class FakeTreasury:
    """Succeeds by default; queue outcomes with fail_next() or hold transfers with a gate."""

    def __init__(self) -> None:
        self.transfers: list[tuple[str, int, str]] = []
        self._failures: list[str] = []
        self.gate: threading.Event | None = None
        self.entered = threading.Event()
        self._lock = threading.Lock()

    def fail_next(self, reason: str = "insufficient funds") -> None:
        self._failures.append(reason)

    def transfer(self, to: str, amount: int, reference: str) -> TransferResult:
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        with self._lock:
            if self._failures:
                return TransferResult(succeeded=False, failure_reason=self._failures.pop(0))
            self.transfers.append((to, amount, reference))
            return TransferResult(succeeded=True, reference=f"tx-{len(self.transfers)}")


@pytest.fixture(scope="function")
def session_factory():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    # Enable WAL mode to reduce locking issues
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the schema and seed the administrator
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    try:
        yield TestingSessionLocal
    finally:
        test_engine.dispose()

        # Clean up - remove test database file, WAL files and directory
        shutil.rmtree(temp_db_dir, ignore_errors=True)


@pytest.fixture(scope="function")
def db(session_factory) -> Session:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
def treasury() -> FakeTreasury:
    return FakeTreasury()


@pytest.fixture(scope="function")
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture(scope="function")
def events(sink: RecordingSink) -> EventEmitter:
    return EventEmitter([sink])


@pytest.fixture(scope="function")
def client(db, clock, treasury, events):
    """Create a test client with database and collaborator overrides."""
    from app.api.deps import get_clock, get_db, get_event_emitter, get_treasury

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_treasury] = lambda: treasury
    app.dependency_overrides[get_event_emitter] = lambda: events

    yield TestClient(app)

    app.dependency_overrides.clear()


def auth(principal: str) -> dict[str, str]:
    """Authorization header carrying a token for `principal`."""
    token = create_access_token(data={"sub": principal})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def insurer(db: Session, clock: FakeClock) -> str:
    """Grant the insurer role to INSURER."""
    from app.services.authorization import grant_insurer

    grant_insurer(db, ADMIN, INSURER, clock=clock)
    return INSURER


@pytest.fixture(scope="function")
def policy(client, insurer: str) -> dict:
    """Policy 1: holder alice, premium 100, coverage 1000, 30 days."""
    response = client.post(
        "/api/v1/policies",
        json={
            "policyholder": HOLDER,
            "premium": 100,
            "coverage_amount": 1000,
            "duration": 30 * DAY,
        },
        headers=auth(insurer),
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture(scope="function")
def claim(client, policy: dict) -> dict:
    """Claim 1 against policy 1: 500 for fire."""
    response = client.post(
        "/api/v1/claims",
        json={"policy_id": policy["id"], "claim_amount": 500, "reason": "fire"},
        headers=auth(HOLDER),
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture(scope="function")
def approved_claim(client, insurer: str, claim: dict) -> dict:
    response = client.post(
        f"/api/v1/claims/{claim['id']}/approve", headers=auth(insurer)
    )
    assert response.status_code == 200
    return response.json()
