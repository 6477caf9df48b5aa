"""Tests for the band propagation estimator."""

from datetime import datetime

import pytest

from conftest import FixedRandom, SequenceRandom
from hf_link.core.band_plan import BAND_NAMES
from hf_link.core.propagation import (
    BASE_LEVELS,
    DAY_BANDS,
    NIGHT_BANDS,
    NON_BAND_LEVEL,
    PropagationEstimator,
    PropagationReading,
)


def make_estimator(value: int = 0) -> PropagationEstimator:
    return PropagationEstimator(random_source=FixedRandom(value))


class TestEstimateLevel:
    @pytest.mark.parametrize("band, day, night", [
        ("160m", 2, 4), ("80m", 2, 4), ("60m", 3, 4), ("40m", 3, 4), ("30m", 4, 4),
        ("20m", 4, 4), ("17m", 4, 2), ("15m", 4, 2), ("10m", 3, 1), ("6m", 3, 1),
    ])
    def test_base_levels(self, band, day, night):
        estimator = make_estimator(0)
        assert estimator.estimate_level(band, 12) == day
        assert estimator.estimate_level(band, 2) == night

    def test_day_night_boundary(self):
        estimator = make_estimator(0)
        assert estimator.estimate_level("160m", 5) == 4
        assert estimator.estimate_level("160m", 6) == 2
        assert estimator.estimate_level("160m", 17) == 2
        assert estimator.estimate_level("160m", 18) == 4

    def test_perturbation_applied(self):
        assert make_estimator(1).estimate_level("40m", 12) == 4
        assert make_estimator(-1).estimate_level("40m", 12) == 2

    def test_clamped_high(self):
        assert make_estimator(1).estimate_level("160m", 2) == 5
        assert make_estimator(1).estimate_level("20m", 12) == 5

    def test_clamped_low(self):
        assert make_estimator(-1).estimate_level("10m", 2) == 1
        assert make_estimator(-1).estimate_level("6m", 22) == 1

    def test_band_name_case_insensitive(self):
        assert make_estimator(0).estimate_level("40M", 2) == 4

    def test_seeded_levels_stay_in_range(self):
        estimator = PropagationEstimator(seed=1234)
        for band in BAND_NAMES:
            for hour in range(24):
                level = estimator.estimate_level(band, hour)
                base = BASE_LEVELS[band][0 if 6 <= hour < 18 else 1]
                assert 1 <= level <= 5
                assert abs(level - base) <= 1
                assert isinstance(level, int)

    @pytest.mark.parametrize("channel", ["Root", "Lobby", "", "2m"])
    def test_non_band_is_fixed(self, channel):
        source = FixedRandom(1)
        estimator = PropagationEstimator(random_source=source)
        assert estimator.estimate_level(channel, 2) == NON_BAND_LEVEL
        assert estimator.estimate_level(channel, 12) == NON_BAND_LEVEL
        assert source.calls == 0

    def test_one_draw_per_band_estimate(self):
        source = FixedRandom(0)
        estimator = PropagationEstimator(random_source=source)
        estimator.estimate_level("40m", 2)
        estimator.estimate_level("20m", 12)
        assert source.calls == 2

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_invalid_hour(self, hour):
        with pytest.raises(ValueError):
            make_estimator().estimate_level("40m", hour)

    def test_same_seed_same_sequence(self):
        a = PropagationEstimator(seed=99)
        b = PropagationEstimator(seed=99)
        seq_a = [a.estimate_level("40m", h % 24) for h in range(50)]
        seq_b = [b.estimate_level("40m", h % 24) for h in range(50)]
        assert seq_a == seq_b


class TestReading:
    def test_reading_uses_hour_of_time(self):
        at = datetime(2025, 1, 10, 22, 15)
        reading = make_estimator(0).reading("17m", at)
        assert reading == PropagationReading(band="17m", level=2, timestamp=at)

    def test_to_dict(self):
        at = datetime(2025, 1, 10, 9, 0)
        data = make_estimator(0).reading("20m", at).to_dict()
        assert data == {'band': '20m', 'level': 4, 'timestamp': '2025-01-10T09:00:00'}

    def test_default_time_is_now(self):
        before = datetime.now()
        reading = make_estimator(0).reading("Root")
        assert before <= reading.timestamp <= datetime.now()
        assert reading.level == NON_BAND_LEVEL


class TestRecommendation:
    def test_night_pick(self):
        estimator = PropagationEstimator(random_source=SequenceRandom([0, 3, 1]))
        assert estimator.recommend_band(2) == "160m"
        assert estimator.recommend_band(23) == "40m"
        assert estimator.recommend_band(5) == "80m"

    def test_day_pick(self):
        estimator = PropagationEstimator(random_source=SequenceRandom([0, 3, 2]))
        assert estimator.recommend_band(6) == "20m"
        assert estimator.recommend_band(12) == "10m"
        assert estimator.recommend_band(17) == "15m"

    def test_seeded_picks_from_open_bands(self):
        estimator = PropagationEstimator(seed=5)
        for hour in range(24):
            band = estimator.recommend_band(hour)
            assert band in (DAY_BANDS if 6 <= hour < 18 else NIGHT_BANDS)

    @pytest.mark.parametrize("km, hour, band", [
        (100, 12, "40m"), (100, 2, "80m"),
        (1131, 12, "20m"), (1131, 22, "40m"),
        (2000, 12, "20m"), (2000, 2, "20m"),
        (8000, 12, "15m"), (8000, 2, "20m"),
        (499.99, 2, "80m"), (500, 2, "40m"), (3000, 9, "15m"),
    ])
    def test_for_distance(self, km, hour, band):
        assert make_estimator().recommend_band_for_distance(km, hour) == band

    def test_for_distance_is_deterministic(self):
        source = FixedRandom(0)
        estimator = PropagationEstimator(random_source=source)
        estimator.recommend_band_for_distance(1131, 22)
        assert source.calls == 0


class TestForecastTable:
    def test_shape_and_values(self):
        table = make_estimator(0).forecast_table()
        assert table.shape == (24, 10)
        assert table.index.name == 'hour'
        assert list(table.columns) == BAND_NAMES
        assert table.loc[2, '160m'] == 4
        assert table.loc[12, '160m'] == 2
        assert table.loc[22, '10m'] == 1

    def test_custom_hours_and_channels(self):
        table = make_estimator(1).forecast_table(hours=[0, 12], bands=["40m", "Root"])
        assert table.shape == (2, 2)
        assert table.loc[0, '40m'] == 5
        assert table.loc[12, '40m'] == 4
        assert (table['Root'] == NON_BAND_LEVEL).all()
