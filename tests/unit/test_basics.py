from __future__ import annotations

import json
from contextlib import asynccontextmanager
from pathlib import Path
from types import SimpleNamespace

from typer.testing import CliRunner

from plant_catalog import main as cli
from plant_catalog.config import Settings
from plant_catalog.container import build_repository
from plant_catalog.domain.models import NO_GROW_ZONE, Plant
from plant_catalog.interfaces import NetworkService, PlantDao
from plant_catalog.reporter import plants_to_rows
from plant_catalog.repository import PlantRepository
from scripts import load_plants
from tests.fakes import make_plant
from tests.fakes.fake_network import FakeNetworkService
from tests.fakes.fake_plant_dao import FakePlantDao

SEED_FILE = Path(__file__).resolve().parents[2] / "scripts" / "data" / "plants.json"


def test_settings_defaults(monkeypatch) -> None:
    for name in ("DB_HOST", "DB_PORT", "DB_NAME", "SORT_ORDER_WAIT_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_name == "plant_catalog"
    assert settings.plants_base_url.startswith("https://")
    assert settings.plants_path.endswith("plants.json")
    assert settings.sort_order_path.endswith("custom_plant_sort_order.json")
    assert settings.sort_order_wait_timeout_seconds is None
    assert settings.sort_order_cache_failures is True


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("SORT_ORDER_WAIT_TIMEOUT_SECONDS", "1.5")
    monkeypatch.setenv("LOG_JSON", "true")

    settings = Settings(_env_file=None)

    assert settings.sort_order_wait_timeout_seconds == 1.5
    assert settings.log_json is True


def test_plant_accepts_both_key_spellings() -> None:
    camel = Plant.model_validate({"plantId": "a", "name": "Apple", "growZoneNumber": 3})
    snake = Plant.model_validate({"plant_id": "a", "name": "Apple", "grow_zone_number": 3})

    assert camel == snake
    assert camel.watering_interval == 7
    assert camel.model_dump(by_alias=True)["plantId"] == "a"
    assert NO_GROW_ZONE.number == -1


def test_fakes_satisfy_collaborator_protocols() -> None:
    assert isinstance(FakePlantDao(), PlantDao)
    assert isinstance(FakeNetworkService(), NetworkService)


def test_build_repository_wires_collaborators(test_settings) -> None:
    repository = build_repository(FakePlantDao(), FakeNetworkService(), test_settings)

    assert isinstance(repository, PlantRepository)
    assert repository.sort_order_cache.name == "plants_list_order"


def test_plants_to_rows_marks_unranked_plants() -> None:
    plants = [make_plant("b", "Banana", 4), make_plant("c", "Cherry", 5, watering_interval=3)]

    rows = plants_to_rows(plants, ["x", "b"])

    assert rows == [
        ["1", "2", "b", "Banana", "4", "7d"],
        ["2", "-", "c", "Cherry", "5", "3d"],
    ]


def test_seed_file_parses() -> None:
    plants = load_plants._read_plants(SEED_FILE)

    assert len(plants) == 5
    assert {plant.plant_id for plant in plants} >= {"malus-pumila", "solanum-lycopersicum"}


def test_seed_script_dry_run(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(load_plants, "configure_logging", lambda **kwargs: None)
    document = tmp_path / "plants.json"
    document.write_text(
        json.dumps([{"plantId": "a", "name": "Apple", "growZoneNumber": 1}]), encoding="utf-8"
    )

    result = CliRunner().invoke(load_plants.app, [str(document), "--dry-run"])

    assert result.exit_code == 0
    assert "Parsed 1 plants" in result.output


def _fake_context(repository: PlantRepository, dao: FakePlantDao):
    @asynccontextmanager
    async def factory():
        async def refresh() -> None:
            return None

        dao.refresh = refresh  # type: ignore[attr-defined]
        yield SimpleNamespace(repository=repository, plant_dao=dao)

    return factory


def test_cli_refresh_reports_failure(monkeypatch, test_settings) -> None:
    dao = FakePlantDao()
    service = FakeNetworkService(plants_error=ConnectionError("offline"))
    repository = PlantRepository(dao, service, settings=test_settings)
    monkeypatch.setattr(cli, "create_app_context", _fake_context(repository, dao))
    monkeypatch.setattr(cli, "_setup", lambda: None)

    result = CliRunner().invoke(cli.app, ["refresh"])

    assert result.exit_code == 1
    assert "Refresh failed" in result.output


def test_cli_list_prints_sorted_json(monkeypatch, garden, test_settings) -> None:
    dao = FakePlantDao(garden)
    service = FakeNetworkService(sort_order=["solanum-lycopersicum"])
    repository = PlantRepository(dao, service, settings=test_settings)
    monkeypatch.setattr(cli, "create_app_context", _fake_context(repository, dao))
    monkeypatch.setattr(cli, "_setup", lambda: None)

    result = CliRunner().invoke(cli.app, ["list", "--json", "--grow-zone", "9"])

    assert result.exit_code == 0
    ids = [plant["plantId"] for plant in json.loads(result.output)]
    assert ids == ["solanum-lycopersicum", "persea-americana"]


def test_cli_info() -> None:
    result = CliRunner().invoke(cli.app, ["info"])

    assert result.exit_code == 0
    assert "DB=" in result.output
