import pytest

from evacmap.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.blockage_threshold_m == 60.0
    assert settings.default_blockage_radius_m == 70.0
    assert settings.osrm_max_retries == 0
    assert settings.map_center == (26.8467, 80.9462)


@pytest.mark.parametrize("raw", ["12.97, 77.59", "[12.97, 77.59]"])
def test_map_center_from_env(monkeypatch: pytest.MonkeyPatch, raw: str):
    monkeypatch.setenv("EVAC_MAP_CENTER", raw)
    assert Settings(_env_file=None).map_center == (12.97, 77.59)


def test_allowed_origins_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EVAC_FRONTEND_ALLOWED_ORIGINS", "https://a.example, https://b.example")
    assert Settings(_env_file=None).frontend_allowed_origins == ("https://a.example", "https://b.example")


def test_threshold_override(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EVAC_BLOCKAGE_THRESHOLD_M", "25")
    assert Settings(_env_file=None).blockage_threshold_m == 25.0
