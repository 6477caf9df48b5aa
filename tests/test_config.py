"""Tests for TOML configuration loading."""

import pytest

from hf_link.config import LinkConfig, load_config

SAMPLE_TOML = """
[station]
callsign = "LA1ABC"
locator = "JO59jp"

[server]
address = "murmur.example.org"
username = "ola"
password = "secret"
tokens = ["hf", "cw"]
preferred_band = "40m"

[session]
gateway_timeout_sec = 5
message_history = 50
random_seed = 42
"""


def test_load_config(tmp_path):
    path = tmp_path / "hf-link.toml"
    path.write_text(SAMPLE_TOML)

    config = load_config(path)

    assert config.callsign == "LA1ABC"
    assert config.locator == "JO59jp"
    assert config.server_address == "murmur.example.org"
    assert config.username == "ola"
    assert config.password == "secret"
    assert config.tokens == ["hf", "cw"]
    assert config.preferred_band == "40m"
    assert not config.auto_band
    assert config.gateway_timeout_sec == 5.0
    assert isinstance(config.gateway_timeout_sec, float)
    assert config.message_history == 50
    assert config.random_seed == 42


def test_load_config_accepts_str_path(tmp_path):
    path = tmp_path / "hf-link.toml"
    path.write_text(SAMPLE_TOML)
    assert load_config(str(path)).callsign == "LA1ABC"


def test_missing_sections_use_defaults():
    config = LinkConfig.from_dict({'station': {'callsign': 'G4ABC'}})
    assert config.callsign == "G4ABC"
    assert config.locator == ""
    assert config.server_address == ""
    assert config.tokens == []
    assert config.auto_band
    assert config.gateway_timeout_sec == 10.0
    assert config.message_history == 200
    assert config.random_seed is None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.toml")


def test_invalid_toml(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text('[station]\ncallsign = "LA1ABC"\ncallsign = "G4ABC"\n')
    with pytest.raises(ValueError, match="Invalid TOML"):
        load_config(path)


@pytest.mark.parametrize("overrides", [
    {'preferred_band': ''},
    {'preferred_band': '   '},
    {'gateway_timeout_sec': 0},
    {'gateway_timeout_sec': -1.5},
    {'message_history': 0},
    {'tokens': 'hf'},
])
def test_invalid_values(overrides):
    with pytest.raises(ValueError):
        LinkConfig(**overrides)


@pytest.mark.parametrize("band, auto", [("auto", True), ("AUTO", True), (" Auto ", True), ("20m", False)])
def test_auto_band(band, auto):
    assert LinkConfig(preferred_band=band).auto_band is auto


def test_display_name():
    assert LinkConfig(callsign="LA1ABC").display_name == "LA1ABC"
    assert LinkConfig(callsign="LA1ABC", username="ola").display_name == "ola"
    assert LinkConfig().display_name == ""


def test_to_dict_round_trip():
    config = LinkConfig(callsign="LA1ABC", locator="JO59", tokens=["hf"], random_seed=7)
    data = config.to_dict()
    assert data['callsign'] == "LA1ABC"
    assert data['tokens'] == ["hf"]
    assert LinkConfig(**data) == config
