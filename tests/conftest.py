"""Shared pytest fixtures for hf-link tests."""

import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pytest

# Add src to path for development
src_path = str(Path(__file__).parent.parent / 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from hf_link.config import LinkConfig
from hf_link.core.propagation import PropagationEstimator
from hf_link.core.session import SessionStateMachine
from hf_link.interfaces import (
    ChannelListing,
    ChannelListResult,
    ConnectOptions,
    GatewayResult,
    MasterySnapshot,
    TransportGateway,
)

NIGHT = datetime(2025, 6, 1, 2, 0)
DAY = datetime(2025, 6, 1, 12, 0)

FULL_MASTERY = MasterySnapshot(1.0, 1.0, 1.0)


class FixedRandom:
    """Random source that always returns the same value (clamped into range)"""

    def __init__(self, value: int = 0):
        self.value = value
        self.calls = 0

    def integers(self, low: int, high: int) -> int:
        self.calls += 1
        return min(max(self.value, low), high - 1)


class SequenceRandom:
    """Random source that replays a list of values, cycling"""

    def __init__(self, values: List[int]):
        self.values = list(values)
        self.index = 0

    def integers(self, low: int, high: int) -> int:
        value = self.values[self.index % len(self.values)]
        self.index += 1
        assert low <= value < high, f"{value} not in [{low}, {high})"
        return value


class FakeGateway(TransportGateway):
    """
    Scripted gateway. Set the *_result attributes to choose answers, set a
    hold_* asyncio.Event to keep a call outstanding until the event is set.
    """

    def __init__(self):
        super().__init__()
        self.calls: list = []
        self.connect_result = GatewayResult.ok()
        self.join_result: Optional[GatewayResult] = None     # None = ok on requested channel
        self.send_result = GatewayResult.ok()
        self.list_result = ChannelListResult(
            success=True,
            channels=[ChannelListing("Root", 0, 3), ChannelListing("40m", 1, 2)],
        )
        self.connect_error: Optional[BaseException] = None
        self.disconnect_error: Optional[BaseException] = None
        self.join_error: Optional[BaseException] = None
        self.hold_connect: Optional[asyncio.Event] = None
        self.hold_join: Optional[asyncio.Event] = None

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def connect(self, address: str, options: ConnectOptions) -> GatewayResult:
        self.calls.append(('connect', address, options))
        if self.hold_connect is not None:
            await self.hold_connect.wait()
        if self.connect_error is not None:
            raise self.connect_error
        return self.connect_result

    async def disconnect(self) -> None:
        self.calls.append(('disconnect',))
        if self.disconnect_error is not None:
            raise self.disconnect_error

    async def join_channel(self, name: str) -> GatewayResult:
        self.calls.append(('join_channel', name))
        if self.hold_join is not None:
            await self.hold_join.wait()
        if self.join_error is not None:
            raise self.join_error
        return self.join_result or GatewayResult.ok(channel=name)

    async def send_message(self, text: str) -> GatewayResult:
        self.calls.append(('send_message', text))
        return self.send_result

    async def list_channels(self) -> ChannelListResult:
        self.calls.append(('list_channels',))
        return self.list_result


async def settle(rounds: int = 5) -> None:
    """Let pending tasks run up to their next real suspension point"""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def anyio_backend() -> str:
    # The session core is built on asyncio primitives
    return 'asyncio'


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def link_config() -> LinkConfig:
    return LinkConfig(
        callsign="LA1ABC",
        locator="JO59jp",
        server_address="murmur.example.org",
        preferred_band="auto",
        gateway_timeout_sec=0.5,
    )


@pytest.fixture
def make_machine(gateway, link_config):
    """Factory for a state machine at 02:00 local with zero perturbation"""
    def _make(mastery: MasterySnapshot = FULL_MASTERY,
              config: Optional[LinkConfig] = None,
              random_value: int = 0,
              clock=lambda: NIGHT) -> SessionStateMachine:
        return SessionStateMachine(
            gateway=gateway,
            mastery_provider=lambda: mastery,
            config=config or link_config,
            estimator=PropagationEstimator(random_source=FixedRandom(random_value)),
            clock=clock,
        )
    return _make
