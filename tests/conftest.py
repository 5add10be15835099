from __future__ import annotations

import random

import pytest

from fogmaze.environment.generators.settings import GenerationSettings
from fogmaze.environment.region import Region


@pytest.fixture
def rng() -> random.Random:
    """A fixed-seed random stream, fresh for each test."""
    return random.Random(1234)


@pytest.fixture
def settings() -> GenerationSettings:
    """Default generation settings (visibility radius 12)."""
    return GenerationSettings()


@pytest.fixture
def visible_area(settings: GenerationSettings) -> Region:
    return settings.visible_area
