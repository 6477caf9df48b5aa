"""
hf-link Collaborator Interfaces

Defines the contracts between the session core and the components it does
not own:
1. Transport gateway (network session to the voice server)
2. Mastery/progress tracker (read-only snapshot)

These interfaces allow testing, implementation swapping, and clear separation of concerns.
"""

# Data models (shared structures)
from .data_models import (
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
    GatewayEvent,
)

# Interface definitions (abstract base classes)
from .gateway import TransportGateway

__all__ = [
    # ===== Data Models =====
    'MasterySnapshot',
    'ConnectOptions',
    'GatewayResult',
    'ChannelListing',
    'ChannelListResult',
    'GatewayUser',
    'GatewayStatus',

    # Push events
    'ConnectionStatusEvent',
    'UserListEvent',
    'MessageEvent',
    'GatewayEvent',

    # ===== Interfaces =====
    'TransportGateway',
]
