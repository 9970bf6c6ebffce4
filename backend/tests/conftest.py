import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_SEED_ON_EMPTY", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from scoreboard import models  # noqa: E402
from scoreboard.database import Base, get_db  # noqa: E402
from scoreboard.main import app  # noqa: E402


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    session_factory = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    Base.metadata.create_all(bind=engine)
    return session_factory


@pytest.fixture()
def reference_data(session_factory):
    with session_factory() as db:
        db.add_all(
            [
                models.Faculty(id="fa", name="Faculty Alpha", short_name="FA", color="blue"),
                models.Faculty(id="fb", name="Faculty Bravo", short_name="FB", color="green"),
                models.Faculty(id="fc", name="Faculty Charlie", short_name="FC", color="pink"),
                models.Faculty(id="fd", name="Faculty Delta", short_name="FD", color="purple"),
            ]
        )
        db.add_all(
            [
                models.Competition(id="futsal", name="Futsal", kind="sport", format="elimination", category="team"),
                models.Competition(id="esports", name="Esports", kind="sport", format="elimination", category="team"),
                models.Competition(id="chess", name="Chess League", kind="sport", format="table", category="individual"),
                models.Competition(id="band", name="Band", kind="art", format="table", category="team"),
            ]
        )
        db.commit()


@pytest.fixture()
def db(session_factory, reference_data):
    with session_factory() as session:
        yield session


@pytest.fixture()
def client(session_factory, reference_data):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
