"""
Simulated Transport Gateway

An in-process stand-in for the voice server, used by the demo, the
``hf-link simulate`` command and tests. It answers every request
immediately and fakes the traffic a real server would push:

- a roster of 3-6 stations with plausible callsigns and locators
  (never in the operator's own square) each time a channel is joined
- a canned Morse-style reply from the first station to every message sent

Nothing here models real propagation; stations are audible on any band.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import numpy as np

from .core.band_plan import BAND_NAMES
from .core.maidenhead import GridLocator
from .core.propagation import RandomSource
from .interfaces.data_models import (
    ChannelListing,
    ChannelListResult,
    ConnectionStatusEvent,
    ConnectOptions,
    GatewayResult,
    GatewayStatus,
    GatewayUser,
    MessageEvent,
    UserListEvent,
)
from .interfaces.gateway import TransportGateway

logger = logging.getLogger(__name__)

ROOT_CHANNEL = "Root"

CALLSIGN_PREFIXES = [
    'LA', 'SM', 'OH', 'OZ', 'G', 'DL', 'F', 'EA', 'I', 'HA', 'OK', 'SP',
    'W', 'K', 'N', 'VE', 'JA', 'VK', 'ZL', 'PY', 'LU',
]

STATION_LOCATORS = [
    'JO59', 'JO65', 'KP20', 'IO91', 'JN49', 'JO10', 'JN33', 'IM76', 'JN54',
    'JN97', 'JO70', 'KO02', 'FN31', 'EN82', 'DN70', 'FN25', 'PM95', 'QF56',
    'RF80', 'GG66', 'FF57',
]

CANNED_REPLIES = [
    'RR FB OM TNX',
    'QSL TNX FOR CALL',
    'GM UR RST 599',
    'RR NAME IS JOHN QTH LONDON',
    'FB COPY ES 73',
    'QSB QRN QSY?',
    'WX SUNNY TEMP 25C',
    'RIG ICOM IC-7300 PWR 100W',
    'ANT DIPOLE',
    'HW CPY?',
    'QRM PSE REPEAT',
    'TNX FER NICE QSO 73',
]


class SimulatedGateway(TransportGateway):
    """TransportGateway that simulates a populated voice server"""

    def __init__(
        self,
        random_source: Optional[RandomSource] = None,
        seed: Optional[int] = None,
        operator_locator: Optional[str] = None,
        channels: Optional[Iterable[str]] = None,
        unreachable: Iterable[str] = (),
    ):
        """
        Args:
            random_source: Source for rosters and replies (default numpy rng)
            seed: Seed for the default source
            operator_locator: Our own locator; simulated stations avoid its square
            channels: Channel names offered (default Root + the ten bands)
            unreachable: Server addresses whose connect attempts fail
        """
        super().__init__()
        self.random = random_source if random_source is not None else np.random.default_rng(seed)
        self.operator_square = (
            GridLocator.parse(operator_locator).square.text if operator_locator else None
        )
        self.channels: List[str] = list(channels) if channels is not None else [ROOT_CHANNEL] + BAND_NAMES
        self.unreachable = set(unreachable)

        self.connected = False
        self.address: Optional[str] = None
        self.current_channel: Optional[str] = None
        self.roster: List[GatewayUser] = []
        self.sent_messages: List[str] = []

    def _pick(self, options: list):
        return options[int(self.random.integers(0, len(options)))]

    def _callsign(self) -> str:
        prefix = self._pick(CALLSIGN_PREFIXES)
        digit = int(self.random.integers(0, 10))
        suffix_len = 2 + int(self.random.integers(0, 2))
        suffix = ''.join(chr(ord('A') + int(self.random.integers(0, 26))) for _ in range(suffix_len))
        return f"{prefix}{digit}{suffix}"

    def generate_roster(self) -> List[GatewayUser]:
        """3-6 random stations outside the operator's square"""
        locators = [loc for loc in STATION_LOCATORS if loc != self.operator_square]
        count = 3 + int(self.random.integers(0, 4))
        return [GatewayUser(name=self._callsign(), locator=self._pick(locators)) for _ in range(count)]

    def _enter_channel(self, channel: str) -> None:
        self.current_channel = channel
        self.roster = self.generate_roster()
        self.publish(ConnectionStatusEvent(GatewayStatus.CONNECTED, current_channel=channel))
        self.publish(UserListEvent(users=list(self.roster)))

    async def connect(self, address: str, options: ConnectOptions) -> GatewayResult:
        if address in self.unreachable:
            logger.info(f"Simulated connect to {address}: unreachable")
            return GatewayResult.failed(f"Server unreachable: {address}")

        channel = options.initial_channel if options.initial_channel in self.channels else ROOT_CHANNEL
        self.connected = True
        self.address = address
        logger.info(f"Simulated connect to {address} as {options.username or '(anonymous)'} on {channel}")
        self._enter_channel(channel)
        return GatewayResult.ok(channel=channel)

    async def disconnect(self) -> None:
        self.connected = False
        self.current_channel = None
        self.roster = []

    async def join_channel(self, name: str) -> GatewayResult:
        if not self.connected:
            return GatewayResult.failed("Not connected to a server")
        if name not in self.channels:
            return GatewayResult.failed(f"Channel {name} not found")
        self._enter_channel(name)
        return GatewayResult.ok(channel=name)

    async def send_message(self, text: str) -> GatewayResult:
        if not self.connected:
            return GatewayResult.failed("Not connected to a server")
        self.sent_messages.append(text)
        if self.roster:
            self.publish(MessageEvent(
                sender=self.roster[0].name,
                content=self._pick(CANNED_REPLIES),
                time=datetime.now(),
            ))
        return GatewayResult.ok()

    async def list_channels(self) -> ChannelListResult:
        if not self.connected:
            return ChannelListResult(success=False, error="Not connected to a server")
        listings = [
            ChannelListing(
                name=name,
                level=0 if name == ROOT_CHANNEL else 1,
                user_count=len(self.roster) if name == self.current_channel else 0,
            )
            for name in self.channels
        ]
        return ChannelListResult(success=True, channels=listings)

    def drop_connection(self, error: str = "Connection reset by peer") -> None:
        """Simulate the server going away without a disconnect request"""
        logger.info(f"Simulated connection loss: {error}")
        self.connected = False
        self.current_channel = None
        self.roster = []
        self.publish(ConnectionStatusEvent(GatewayStatus.DISCONNECTED, error=error))
