from datetime import datetime, timedelta, timezone
from typing import Dict

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from moodshift.config.settings import ConfigManager
from moodshift.data.schemas import CatalogVector, Interaction, MoodVector
from moodshift.services import MoodShiftServices
from moodshift.utils.logging import StructuredLogger


# 15:00 at UTC+3; the local day began at 2025-06-14 21:00 UTC.
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock the tests move by hand."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def vector(**values: int) -> MoodVector:
    return MoodVector.from_dict(values)


def uniform(value: int) -> MoodVector:
    return MoodVector.from_dict({dim: value for dim in MoodVector().to_dict()})


CATALOG: Dict[int, MoodVector] = {
    1: vector(adrenaline=95, tension=85, darkness=70, joy=30),
    2: vector(adrenaline=10, tension=10, joy=85, nostalgia=75),
    3: vector(melancholy=90, darkness=80, joy=10),
    4: vector(romance=95, joy=75, wonder=60),
    5: vector(intellect=95, wonder=80, inspiration=70),
    6: vector(joy=90, inspiration=85, wonder=80, melancholy=10, darkness=10),
}


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def config():
    return ConfigManager().load_dict({
        'logging': {'level': 'WARNING', 'format': 'text'},
        'data': {'catalog_path': 'does-not-exist/catalog.json'},
    })


@pytest.fixture()
def logger():
    return StructuredLogger("moodshift.tests", level="WARNING", fmt="text")


@pytest.fixture()
def services(config, clock, logger):
    built = MoodShiftServices.build(config, clock=clock, logger=logger)
    built.catalog.add_many(
        CatalogVector(media_id=media_id, media_kind='movie', mood_vector=mood, title=f"Movie {media_id}")
        for media_id, mood in CATALOG.items()
    )
    yield built
    built.shutdown()


@pytest.fixture()
def rate(services, clock):
    """Record a rated activity directly, without scheduling a recompute."""

    def _rate(user_id: str, media_id: int, rating: int, days_ago: float = 0, media_kind: str = 'movie'):
        services.interactions.record_activity(user_id, Interaction(
            media_id=media_id,
            media_kind=media_kind,
            occurred_at=clock() - timedelta(days=days_ago),
            rating=rating,
        ))

    return _rate


@pytest.fixture()
def test_client(services):
    from moodshift.api.routes import router
    from moodshift.api.dependencies import get_services

    app = FastAPI()
    app.include_router(router, prefix="/api/v1")
    app.dependency_overrides[get_services] = lambda: services
    client = TestClient(app)
    try:
        yield client
    finally:
        app.dependency_overrides.clear()
