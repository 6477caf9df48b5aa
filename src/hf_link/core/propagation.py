"""
Band Propagation Estimator

Heuristic 1-5 quality level for an HF band at a given local hour. This is a
training-aid placeholder, not an ionospheric model: a fixed day/night base
level per band plus a random -1/0/+1 wobble, clamped to 1..5.

Randomness comes from an injectable source with a single capability,
``integers(low, high)`` (half-open, like numpy). The default is a
numpy Generator, so passing a seed gives a reproducible sequence and tests
can substitute a source that always returns a fixed value.

Example:
    estimator = PropagationEstimator(seed=42)
    level = estimator.estimate_level("40m", hour=22)
    band = estimator.recommend_band_for_distance(1130.0, hour=22)   # "40m"
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional, Protocol, Tuple

import numpy as np
import pandas as pd

from .band_plan import BAND_NAMES, normalize_band
from .geodesy import DistanceBucket, classify_distance, is_daytime

logger = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 5

# Channels that are not HF bands (lobby, root, ...) always report this
NON_BAND_LEVEL = 4

# band -> (day level, night level)
BASE_LEVELS: Dict[str, Tuple[int, int]] = {
    "160m": (2, 4),
    "80m": (2, 4),
    "60m": (3, 4),
    "40m": (3, 4),
    "30m": (4, 4),
    "20m": (4, 4),
    "17m": (4, 2),
    "15m": (4, 2),
    "10m": (3, 1),
    "6m": (3, 1),
}

DAY_BANDS = ("20m", "17m", "15m", "10m")
NIGHT_BANDS = ("160m", "80m", "60m", "40m")

# bucket -> (day band, night band)
DISTANCE_BANDS: Dict[DistanceBucket, Tuple[str, str]] = {
    DistanceBucket.SHORT: ("40m", "80m"),
    DistanceBucket.MEDIUM: ("20m", "40m"),
    DistanceBucket.MEDIUM_LONG: ("20m", "20m"),
    DistanceBucket.LONG: ("15m", "20m"),
}


class RandomSource(Protocol):
    """Anything with numpy-style ``integers(low, high)`` -> int in [low, high)"""

    def integers(self, low: int, high: int) -> int:
        ...


@dataclass(frozen=True)
class PropagationReading:
    """One propagation estimate; recomputed on demand, never stored"""
    band: str
    level: int
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            'band': self.band,
            'level': self.level,
            'timestamp': self.timestamp.isoformat(),
        }


class PropagationEstimator:
    """Band/time-of-day propagation heuristics with injectable randomness"""

    def __init__(self, random_source: Optional[RandomSource] = None,
                 seed: Optional[int] = None):
        """
        Args:
            random_source: Source of perturbations and band picks. Defaults to
                numpy.random.default_rng(seed).
            seed: Seed for the default source (ignored if random_source given)
        """
        self.random = random_source if random_source is not None else np.random.default_rng(seed)

    def _pick(self, low: int, high: int) -> int:
        return int(self.random.integers(low, high))

    def estimate_level(self, band: str, hour: int) -> int:
        """
        Quality level 1..5 for a band at a local hour.

        Non-band channel names get the fixed NON_BAND_LEVEL with no
        perturbation.
        """
        daytime = is_daytime(hour)
        levels = BASE_LEVELS.get(normalize_band(band)) if band else None
        if levels is None:
            return NON_BAND_LEVEL

        base = levels[0] if daytime else levels[1]
        perturbation = self._pick(-1, 2)
        level = max(MIN_LEVEL, min(MAX_LEVEL, base + perturbation))
        logger.debug(f"{band} @ {hour:02d}h: base={base} perturbation={perturbation:+d} -> {level}")
        return level

    def reading(self, band: str, at_time: Optional[datetime] = None) -> PropagationReading:
        """Estimate for a band at a local time (default: now)"""
        at_time = at_time or datetime.now()
        return PropagationReading(
            band=band,
            level=self.estimate_level(band, at_time.hour),
            timestamp=at_time,
        )

    def recommend_band(self, hour: int) -> str:
        """Random pick among the bands that are typically open at this hour"""
        choices = DAY_BANDS if is_daytime(hour) else NIGHT_BANDS
        return choices[self._pick(0, len(choices))]

    def recommend_band_for_distance(self, distance_km: float, hour: int) -> str:
        """Deterministic band for a path length and local hour"""
        day_band, night_band = DISTANCE_BANDS[classify_distance(distance_km)]
        return day_band if is_daytime(hour) else night_band

    def forecast_table(self, hours: Iterable[int] = range(24),
                       bands: Iterable[str] = BAND_NAMES) -> pd.DataFrame:
        """
        Levels for every (hour, band) pair.

        Returns:
            DataFrame indexed by hour with one column per band
        """
        hours = list(hours)
        bands = list(bands)
        rows = [[self.estimate_level(band, hour) for band in bands] for hour in hours]
        table = pd.DataFrame(rows, index=pd.Index(hours, name='hour'), columns=bands)
        return table
