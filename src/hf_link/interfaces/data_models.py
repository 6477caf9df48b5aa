"""
Data models shared between the session core and its collaborators

- MasterySnapshot: read-only progress figures from the training side
- ConnectOptions / GatewayResult / ChannelListResult: gateway request/response
- ConnectionStatusEvent / UserListEvent / MessageEvent: gateway push events
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union


@dataclass(frozen=True)
class MasterySnapshot:
    """Completion ratios (0.0-1.0) for the three required character sets"""
    international_ratio: float = 0.0
    prosigns_ratio: float = 0.0
    special_ratio: float = 0.0

    def __post_init__(self):
        for name in ('international_ratio', 'prosigns_ratio', 'special_ratio'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")

    @property
    def is_complete(self) -> bool:
        return (self.international_ratio >= 1.0
                and self.prosigns_ratio >= 1.0
                and self.special_ratio >= 1.0)

    def describe(self) -> str:
        return (f"international {self.international_ratio:.0%}, "
                f"prosigns {self.prosigns_ratio:.0%}, "
                f"special {self.special_ratio:.0%}")

    @classmethod
    def from_percentages(cls, international: float, prosigns: float,
                         special: float) -> 'MasterySnapshot':
        """Build from 0-100 percentages as stored by the progress tracker"""
        return cls(international / 100.0, prosigns / 100.0, special / 100.0)


@dataclass(frozen=True)
class ConnectOptions:
    username: str = ""
    password: str = ""
    tokens: List[str] = field(default_factory=list)
    initial_channel: Optional[str] = None


@dataclass(frozen=True)
class GatewayResult:
    """Outcome of a gateway request"""
    success: bool
    error: Optional[str] = None
    channel: Optional[str] = None    # Channel the gateway put us in, if any

    @classmethod
    def ok(cls, channel: Optional[str] = None) -> 'GatewayResult':
        return cls(success=True, channel=channel)

    @classmethod
    def failed(cls, error: str) -> 'GatewayResult':
        return cls(success=False, error=error)


@dataclass(frozen=True)
class ChannelListing:
    name: str
    level: int = 0          # Channel depth in the server tree
    user_count: int = 0


@dataclass(frozen=True)
class ChannelListResult:
    success: bool
    channels: List[ChannelListing] = field(default_factory=list)
    error: Optional[str] = None


@dataclass(frozen=True)
class GatewayUser:
    """A user as reported by the gateway; locator is unvalidated text"""
    name: str
    locator: Optional[str] = None
    muted: bool = False
    deafened: bool = False


class GatewayStatus(Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionStatusEvent:
    status: GatewayStatus
    current_channel: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_disconnect(self) -> bool:
        return self.status in (GatewayStatus.DISCONNECTED, GatewayStatus.ERROR)


@dataclass(frozen=True)
class UserListEvent:
    users: List[GatewayUser] = field(default_factory=list)


@dataclass(frozen=True)
class MessageEvent:
    sender: str
    content: str
    time: datetime


GatewayEvent = Union[ConnectionStatusEvent, UserListEvent, MessageEvent]
