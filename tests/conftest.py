from __future__ import annotations

import pytest

from config import settings
from src.indexing.models import RecordLimits
from tests.factories import FakePublisher


@pytest.fixture
def limits() -> RecordLimits:
    return RecordLimits()


@pytest.fixture
def algolia_active(monkeypatch):
    monkeypatch.setattr(settings, "algolia_active", True)


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()
