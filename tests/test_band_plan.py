"""Tests for the HF band plan lookups."""

import pytest

from hf_link.core.band_plan import (
    BAND_NAMES,
    HF_BANDS,
    band_for_channel_id,
    channel_id_for_band,
    get_band,
    is_band,
    normalize_band,
)


def test_ten_bands_in_frequency_order():
    assert BAND_NAMES == ["160m", "80m", "60m", "40m", "30m", "20m", "17m", "15m", "10m", "6m"]
    freqs = [b.frequency_mhz for b in HF_BANDS]
    assert freqs == sorted(freqs)


def test_channel_ids_are_unique():
    ids = [b.channel_id for b in HF_BANDS]
    assert ids == list(range(1, 11))


def test_distance_ranges_are_ordered():
    for band in HF_BANDS:
        assert 0 <= band.min_distance_km < band.max_distance_km


@pytest.mark.parametrize("raw, expected", [("40m", "40m"), ("40M", "40m"), (" 160m ", "160m")])
def test_normalize_band(raw, expected):
    assert normalize_band(raw) == expected


@pytest.mark.parametrize("name, expected", [
    ("40m", True), ("6M", True), ("Root", False), ("2m", False), ("", False), (None, False),
])
def test_is_band(name, expected):
    assert is_band(name) is expected


def test_get_band():
    band = get_band("20M")
    assert band.name == "20m"
    assert band.channel_id == 6
    assert band.frequency_mhz == pytest.approx(14.175)


def test_get_band_unknown():
    with pytest.raises(KeyError):
        get_band("Lobby")


def test_channel_id_mapping():
    assert channel_id_for_band("40m") == 4
    assert band_for_channel_id(4) == "40m"
    assert band_for_channel_id(0) is None
    for name in BAND_NAMES:
        assert band_for_channel_id(channel_id_for_band(name)) == name
