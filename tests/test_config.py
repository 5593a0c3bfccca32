import pytest

from rasterforge import DEFAULT_SETTINGS, Settings


def test_defaults():
    assert DEFAULT_SETTINGS.random_seed == 0
    assert DEFAULT_SETTINGS.random_noise == 0.2
    assert DEFAULT_SETTINGS.threshold == 0.5
    assert DEFAULT_SETTINGS.edge_passes == 3
    assert DEFAULT_SETTINGS.popularity_palette_size == 256
    assert DEFAULT_SETTINGS.popularity_bits == 5


def test_from_env_overrides():
    env = {"RASTERFORGE_RANDOM_SEED": "17", "RASTERFORGE_EDGE_PASSES": "1", "OTHER": "x"}
    s = Settings.from_env(env)
    assert s.random_seed == 17
    assert s.edge_passes == 1
    assert s.threshold == 0.5


def test_from_env_bad_value():
    with pytest.raises(ValueError, match="RASTERFORGE_RANDOM_NOISE"):
        Settings.from_env({"RASTERFORGE_RANDOM_NOISE": "lots"})


@pytest.mark.parametrize(
    "kwargs",
    [{"random_noise": -0.1}, {"threshold": 1.5}, {"edge_passes": 0}, {"popularity_bits": 9}],
)
def test_validation(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs)


def test_settings_are_frozen():
    with pytest.raises(AttributeError):
        DEFAULT_SETTINGS.random_seed = 3
