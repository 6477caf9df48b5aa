"""
Core - grid geodesy, propagation heuristics and the channel session

This package provides:
- maidenhead: GridLocator <-> Coordinate codec
- geodesy: great-circle distance, bearing, day/night and distance buckets
- band_plan: the ten HF bands and their server channel ids
- propagation: band quality levels (1-5) and band recommendations
- session: SessionStateMachine driving a TransportGateway

None of these modules touch the network or the UI directly.
"""

from .maidenhead import (
    Coordinate,
    GridLocator,
    decode,
    encode,
    is_valid_locator,
)
from .geodesy import (
    DistanceBucket,
    EARTH_RADIUS_KM,
    distance_km,
    locator_distance_km,
    initial_bearing_deg,
    midpoint,
    is_daytime,
    classify_distance,
)
from .band_plan import (
    BandDefinition,
    HF_BANDS,
    BAND_NAMES,
    is_band,
    get_band,
    band_for_channel_id,
    channel_id_for_band,
)
from .propagation import (
    RandomSource,
    PropagationReading,
    PropagationEstimator,
)
from .session import (
    SessionState,
    Station,
    ChatMessage,
    ChannelSession,
    SessionSnapshot,
    SessionStateMachine,
)

__all__ = [
    # Grid locators
    "Coordinate",
    "GridLocator",
    "decode",
    "encode",
    "is_valid_locator",
    # Geodesy
    "DistanceBucket",
    "EARTH_RADIUS_KM",
    "distance_km",
    "locator_distance_km",
    "initial_bearing_deg",
    "midpoint",
    "is_daytime",
    "classify_distance",
    # Band plan
    "BandDefinition",
    "HF_BANDS",
    "BAND_NAMES",
    "is_band",
    "get_band",
    "band_for_channel_id",
    "channel_id_for_band",
    # Propagation
    "RandomSource",
    "PropagationReading",
    "PropagationEstimator",
    # Session
    "SessionState",
    "Station",
    "ChatMessage",
    "ChannelSession",
    "SessionSnapshot",
    "SessionStateMachine",
]
