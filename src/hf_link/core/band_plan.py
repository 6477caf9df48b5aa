"""
HF band plan

The ten amateur bands the voice server exposes as channels, with the channel
id each band is served on and a rough usable skip distance range.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class BandDefinition:
    name: str                # "40m"
    channel_id: int          # Server channel carrying this band
    frequency_mhz: float     # Representative centre frequency
    min_distance_km: float   # Inside this: skip zone
    max_distance_km: float   # Beyond this: too far for reliable contact


HF_BANDS: List[BandDefinition] = [
    BandDefinition("160m", 1, 1.9, 0, 1000),
    BandDefinition("80m", 2, 3.75, 0, 1500),
    BandDefinition("60m", 3, 5.35, 200, 2000),
    BandDefinition("40m", 4, 7.15, 500, 3000),
    BandDefinition("30m", 5, 10.125, 800, 4000),
    BandDefinition("20m", 6, 14.175, 1000, 10000),
    BandDefinition("17m", 7, 18.118, 1500, 12000),
    BandDefinition("15m", 8, 21.225, 2000, 15000),
    BandDefinition("10m", 9, 28.85, 3000, 20000),
    BandDefinition("6m", 10, 52.0, 5000, 25000),
]

BAND_NAMES: List[str] = [b.name for b in HF_BANDS]

_BY_NAME: Dict[str, BandDefinition] = {b.name: b for b in HF_BANDS}
_BY_CHANNEL: Dict[int, BandDefinition] = {b.channel_id: b for b in HF_BANDS}


def normalize_band(name: str) -> str:
    """'40M ' -> '40m'"""
    return name.strip().lower()


def is_band(name: Optional[str]) -> bool:
    return bool(name) and normalize_band(name) in _BY_NAME


def get_band(name: str) -> BandDefinition:
    """Look up a band by name (case-insensitive). Raises KeyError if unknown."""
    key = normalize_band(name)
    if key not in _BY_NAME:
        raise KeyError(f"Unknown band: {name!r}")
    return _BY_NAME[key]


def band_for_channel_id(channel_id: int) -> Optional[str]:
    """Band name served on a channel id, or None for non-band channels"""
    band = _BY_CHANNEL.get(channel_id)
    return band.name if band else None


def channel_id_for_band(name: str) -> int:
    return get_band(name).channel_id
