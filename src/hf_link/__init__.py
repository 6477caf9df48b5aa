"""
hf-link: HF Propagation Session Core

Grid-locator geodesy and propagation-session subsystem for a Morse-code
training application's on-air practice. Operators are placed on simulated
HF bands on a voice server; this package decides who may connect, where
stations are, how good each band is right now, and keeps the connection
state consistent with the transport gateway.

Key Features:
- Maidenhead locator <-> coordinate codec (4 and 6 characters)
- Great-circle distance and bearing between stations
- Band/time-of-day propagation levels (1-5) and band recommendations
- Mastery-gated connection/channel state machine over an async gateway

Quick Start:
    from hf_link import SessionStateMachine, SimulatedGateway, MasterySnapshot

    machine = SessionStateMachine(
        gateway=SimulatedGateway(seed=1),
        mastery_provider=lambda: MasterySnapshot(1.0, 1.0, 1.0),
    )
    await machine.connect("murmur.example.org", "JO59jp")
    await machine.switch_channel("40m")
"""

from .version import HF_LINK_VERSION

__version__ = HF_LINK_VERSION

# =============================================================================
# CORE (geodesy, propagation, session)
# =============================================================================
from .core import (
    Coordinate,
    GridLocator,
    decode,
    encode,
    is_valid_locator,
    DistanceBucket,
    distance_km,
    locator_distance_km,
    initial_bearing_deg,
    midpoint,
    is_daytime,
    classify_distance,
    BandDefinition,
    HF_BANDS,
    BAND_NAMES,
    is_band,
    get_band,
    band_for_channel_id,
    channel_id_for_band,
    RandomSource,
    PropagationReading,
    PropagationEstimator,
    SessionState,
    Station,
    ChatMessage,
    SessionSnapshot,
    SessionStateMachine,
)

# =============================================================================
# COLLABORATOR INTERFACES
# =============================================================================
from .interfaces import (
    MasterySnapshot,
    ConnectOptions,
    GatewayResult,
    ChannelListing,
    ChannelListResult,
    GatewayUser,
    GatewayStatus,
    ConnectionStatusEvent,
    UserListEvent,
    MessageEvent,
    TransportGateway,
)

from .errors import (
    HFLinkError,
    InvalidLocatorFormat,
    MissingServerAddress,
    MasteryNotMet,
    OperationInProgress,
    NotConnected,
    TransportError,
    ChannelSwitchFailure,
)
from .config import LinkConfig, load_config
from .simulator import SimulatedGateway

__all__ = [
    # === Grid / geodesy ===
    "Coordinate",
    "GridLocator",
    "decode",
    "encode",
    "is_valid_locator",
    "DistanceBucket",
    "distance_km",
    "locator_distance_km",
    "initial_bearing_deg",
    "midpoint",
    "is_daytime",
    "classify_distance",
    # === Bands / propagation ===
    "BandDefinition",
    "HF_BANDS",
    "BAND_NAMES",
    "is_band",
    "get_band",
    "band_for_channel_id",
    "channel_id_for_band",
    "RandomSource",
    "PropagationReading",
    "PropagationEstimator",
    # === Session ===
    "SessionState",
    "Station",
    "ChatMessage",
    "SessionSnapshot",
    "SessionStateMachine",
    # === Interfaces ===
    "MasterySnapshot",
    "ConnectOptions",
    "GatewayResult",
    "ChannelListing",
    "ChannelListResult",
    "GatewayUser",
    "GatewayStatus",
    "ConnectionStatusEvent",
    "UserListEvent",
    "MessageEvent",
    "TransportGateway",
    # === Errors ===
    "HFLinkError",
    "InvalidLocatorFormat",
    "MissingServerAddress",
    "MasteryNotMet",
    "OperationInProgress",
    "NotConnected",
    "TransportError",
    "ChannelSwitchFailure",
    # === Config / simulation ===
    "LinkConfig",
    "load_config",
    "SimulatedGateway",
]
