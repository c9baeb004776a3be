"""
Pytest configuration for the plant catalog.

Provides:
- Settings with test-specific overrides
- The in-memory plant store fake
- Plant factories and a sample garden
"""

from __future__ import annotations

import os
from typing import List

import pytest

from plant_catalog.config import Settings
from plant_catalog.domain.models import Plant
from tests.fakes import make_plant
from tests.fakes.fake_plant_dao import FakePlantDao


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings fixture isolated from the developer's environment and `.env`.
    """
    return Settings(
        _env_file=None,
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "plant_catalog"),
        log_level="DEBUG",
        plants_base_url="https://plants.test/",
        plants_path="assets/plants.json",
        sort_order_path="assets/custom_plant_sort_order.json",
        network_retry_attempts=3,
        network_retry_backoff_seconds=0.0,
    )


@pytest.fixture
def garden() -> List[Plant]:
    return [
        make_plant("malus-pumila", "Apple", 3),
        make_plant("beta-vulgaris", "Beet", 2),
        make_plant("coriandrum-sativum", "Cilantro", 2),
        make_plant("persea-americana", "Avocado", 9),
        make_plant("solanum-lycopersicum", "Tomato", 9),
    ]


@pytest.fixture
def plant_dao() -> FakePlantDao:
    return FakePlantDao()


@pytest.fixture
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for integration tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )
