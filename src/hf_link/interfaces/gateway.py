"""
Transport Gateway Interface

Contract for the component that owns the real network session to the voice
server (connection, channel membership, text messages). The session core
never talks to the network itself.

Two directions:
    Requests (coroutines, one outstanding call per kind):
        connect, disconnect, join_channel, send_message, list_channels
    Push events (asyncio.Queue at ``gateway.events``):
        ConnectionStatusEvent, UserListEvent, MessageEvent

Implementations report expected failures through ``GatewayResult`` rather
than raising; OSError from the transport is tolerated and wrapped by the
caller.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from .data_models import (
    ChannelListResult,
    ConnectOptions,
    GatewayEvent,
    GatewayResult,
)

logger = logging.getLogger(__name__)


class TransportGateway(ABC):
    """Interface to the voice/text server connection"""

    def __init__(self):
        self.events: 'asyncio.Queue[GatewayEvent]' = asyncio.Queue()

    def publish(self, event: GatewayEvent) -> None:
        """Push an event to whoever is consuming ``events``"""
        logger.debug(f"Gateway event: {event}")
        self.events.put_nowait(event)

    @abstractmethod
    async def connect(self, address: str, options: ConnectOptions) -> GatewayResult:
        """
        Open a session to the server.

        Returns:
            GatewayResult; on success ``channel`` is the channel joined
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    async def join_channel(self, name: str) -> GatewayResult:
        pass

    @abstractmethod
    async def send_message(self, text: str) -> GatewayResult:
        """Send a text message to the current channel"""
        pass

    @abstractmethod
    async def list_channels(self) -> ChannelListResult:
        pass
