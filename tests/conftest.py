"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from event_admin.core.database import get_session
from event_admin.main import app
from event_admin.models import Event, NwtaEvent
from event_admin.roster.sessions import EditSessions


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_edit_sessions():
    """Start every test without open drafts."""
    EditSessions.clear()
    yield
    EditSessions.clear()


def schedule_entry(day: int, start_hour: int = 9, end_hour: int = 17) -> dict:
    return {
        "start": datetime(2025, 6, day, start_hour, tzinfo=UTC).isoformat(),
        "end": datetime(2025, 6, day, end_hour, tzinfo=UTC).isoformat(),
    }


@pytest.fixture(name="sample_event")
def sample_event_fixture(session: Session) -> Event:
    """A standard event with rosters, leadership and a two-day schedule."""
    event = Event(
        name="Spring Gathering",
        staff_capacity=4,
        participant_capacity=2,
        potential_staff=["s-potential"],
        committed_staff=["s-lead", "s-colead", "s-committed"],
        alternate_staff=["s-alternate"],
        potential_participants=["p-potential"],
        committed_participants=["p-committed"],
        waitlist_participants=["p-waitlist"],
        primary_leader_id="s-lead",
        leaders=["s-colead"],
        participant_schedule=[schedule_entry(1), schedule_entry(2)],
        staff_published_time={
            "start": datetime(2025, 5, 1, tzinfo=UTC).isoformat(),
            "end": datetime(2025, 5, 15, tzinfo=UTC).isoformat(),
        },
        start_at=datetime(2025, 6, 1, 9, tzinfo=UTC),
        end_at=datetime(2025, 6, 2, 17, tzinfo=UTC),
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@pytest.fixture(name="nwta_event")
def nwta_event_fixture(session: Session) -> Event:
    """An NWTA event with its extension rosters."""
    event = Event(name="Weekend Training", committed_staff=["s-elder"])
    event.nwta = NwtaEvent(id=event.id, rookies=["r-1"], elders=["s-elder"], mos=["m-1"])
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@pytest.fixture(name="legacy_event")
def legacy_event_fixture(session: Session) -> Event:
    """An event whose stored lists break the roster invariants."""
    event = Event(
        name="Imported Event",
        potential_staff=["dup", "loose-leader"],
        committed_staff=["dup", "primary"],
        alternate_staff=["dup"],
        potential_participants=["p-dup"],
        waitlist_participants=["p-dup"],
        primary_leader_id="primary",
        leaders=["primary", "loose-leader", "dup", "dup"],
        participant_schedule=[
            {
                "start": datetime(2025, 6, 2, tzinfo=UTC).isoformat(),
                "end": datetime(2025, 6, 1, tzinfo=UTC).isoformat(),
            },
            {
                "start": datetime(2025, 6, 3, 9, tzinfo=UTC).isoformat(),
                "end": datetime(2025, 6, 3, 17, tzinfo=UTC).isoformat(),
            },
        ],
        staff_schedule=[{"start": "sometime", "end": "later"}],
        staff_published_time={"start": "", "end": ""},
        participant_published_time={
            "start": datetime(2025, 5, 1, tzinfo=UTC).isoformat(),
            "end": "",
        },
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@pytest.fixture(name="archived_event")
def archived_event_fixture(session: Session) -> Event:
    event = Event(name="Past Event", is_active=False)
    session.add(event)
    session.commit()
    session.refresh(event)
    return event
