"""
Channel Session State Machine

Owns the connection/channel state of the operator's voice-server session and
is the only code allowed to change it. UI commands arrive as coroutines,
gateway push events through ``dispatch_event``/``process_events``, and every
change is published to observers as an immutable SessionSnapshot.

States:
    DISCONNECTED -> CONNECTING -> CONNECTED <-> SWITCHING
    any state    -> DISCONNECTED   (explicit disconnect or gateway loss)

CONNECTING and SWITCHING are transitional: while a connect or join is
outstanding, any new command is rejected with OperationInProgress instead of
being queued. Everything runs on one asyncio loop, so no locks are needed.

Architecture:
    UI -> SessionStateMachine -> TransportGateway (network)
                  |      ^
                  |      +-- gateway.events (status, user list, messages)
                  +-> maidenhead / geodesy / propagation
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Deque, Dict, FrozenSet, List, Optional, Set, Tuple, TypeVar

from ..config import LinkConfig
from ..errors import (
    ChannelSwitchFailure,
    MasteryNotMet,
    MissingServerAddress,
    NotConnected,
    OperationInProgress,
    TransportError,
)
from ..interfaces.data_models import (
    ChannelListing,
    ConnectionStatusEvent,
    ConnectOptions,
    GatewayEvent,
    GatewayResult,
    GatewayStatus,
    GatewayUser,
    MasterySnapshot,
    MessageEvent,
    UserListEvent,
)
from ..interfaces.gateway import TransportGateway
from .geodesy import distance_km, initial_bearing_deg
from .maidenhead import GridLocator, decode, is_valid_locator
from .propagation import PropagationEstimator, PropagationReading

logger = logging.getLogger(__name__)

T = TypeVar('T')


class SessionState(Enum):
    """Session connection states"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"    # Gateway connect outstanding
    CONNECTED = "connected"
    SWITCHING = "switching"      # Gateway join-channel outstanding


TRANSITIONAL_STATES: FrozenSet[SessionState] = frozenset(
    {SessionState.CONNECTING, SessionState.SWITCHING}
)

ALLOWED_TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.DISCONNECTED: frozenset({SessionState.CONNECTING}),
    SessionState.CONNECTING: frozenset({SessionState.CONNECTED, SessionState.DISCONNECTED}),
    SessionState.CONNECTED: frozenset({SessionState.SWITCHING, SessionState.DISCONNECTED}),
    SessionState.SWITCHING: frozenset({SessionState.CONNECTED, SessionState.DISCONNECTED}),
}


@dataclass(frozen=True)
class Station:
    """Another operator in the current channel"""
    name: str
    locator: Optional[GridLocator] = None
    muted: bool = False
    deafened: bool = False
    distance_km: Optional[float] = None     # From our own locator
    bearing_deg: Optional[float] = None

    @classmethod
    def from_user(cls, user: GatewayUser, own_locator: Optional[GridLocator] = None) -> 'Station':
        locator = None
        if user.locator and is_valid_locator(user.locator):
            locator = GridLocator.parse(user.locator)
        elif user.locator:
            logger.debug(f"Ignoring invalid locator {user.locator!r} for {user.name}")

        distance = bearing = None
        if locator is not None and own_locator is not None:
            here, there = decode(own_locator), decode(locator)
            distance = distance_km(here, there)
            bearing = initial_bearing_deg(here, there)

        return cls(
            name=user.name,
            locator=locator,
            muted=user.muted,
            deafened=user.deafened,
            distance_km=distance,
            bearing_deg=bearing,
        )


@dataclass(frozen=True)
class ChatMessage:
    sender: str
    content: str
    time: datetime
    is_self: bool = False


@dataclass
class ChannelSession:
    """Mutable session record; only SessionStateMachine touches it"""
    state: SessionState = SessionState.DISCONNECTED
    band: Optional[str] = None
    server_address: str = ""
    locator: Optional[GridLocator] = None
    stations: List[Station] = field(default_factory=list)
    mastery: Optional[MasterySnapshot] = None
    reading: Optional[PropagationReading] = None
    messages: Deque[ChatMessage] = field(default_factory=deque)

    def clear_channel(self) -> None:
        self.band = None
        self.stations = []
        self.reading = None


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session handed to the UI"""
    state: SessionState
    band: Optional[str]
    server_address: str
    locator: Optional[str]
    reading: Optional[PropagationReading]
    stations: Tuple[Station, ...]
    messages: Tuple[ChatMessage, ...]

    @property
    def propagation_level(self) -> Optional[int]:
        return self.reading.level if self.reading else None

    @property
    def is_connected(self) -> bool:
        return self.state is SessionState.CONNECTED


SessionObserver = Callable[[SessionSnapshot], None]


class SessionStateMachine:
    """
    Connection/channel session with mastery gating.

    Example:
        machine = SessionStateMachine(
            gateway=gateway,
            mastery_provider=lambda: progress.mastery_snapshot(),
            config=load_config('hf-link.toml'),
        )
        machine.subscribe(ui.render)
        events_task = asyncio.create_task(machine.process_events())
        await machine.connect()
        await machine.switch_channel("40m")
    """

    def __init__(
        self,
        gateway: TransportGateway,
        mastery_provider: Callable[[], MasterySnapshot],
        config: Optional[LinkConfig] = None,
        estimator: Optional[PropagationEstimator] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            gateway: Transport gateway collaborator
            mastery_provider: Returns the operator's current mastery snapshot
            config: Defaults for connect() and session behaviour
            estimator: Propagation estimator (default: seeded from config)
            clock: Local-time source for propagation readings
        """
        self.gateway = gateway
        self.mastery_provider = mastery_provider
        self.config = config or LinkConfig()
        self.estimator = estimator or PropagationEstimator(seed=self.config.random_seed)
        self.clock = clock

        self.session = ChannelSession(messages=deque(maxlen=self.config.message_history))
        self._observers: List[SessionObserver] = []
        self._in_flight: Set[str] = set()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def band(self) -> Optional[str]:
        return self.session.band

    @property
    def propagation_level(self) -> Optional[int]:
        return self.session.reading.level if self.session.reading else None

    @property
    def stations(self) -> List[Station]:
        return list(self.session.stations)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.session.state,
            band=self.session.band,
            server_address=self.session.server_address,
            locator=str(self.session.locator) if self.session.locator else None,
            reading=self.session.reading,
            stations=tuple(self.session.stations),
            messages=tuple(self.session.messages),
        )

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        """Register for snapshots after every change. Returns unsubscribe function."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception(f"Session observer {observer!r} failed")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _transition(self, new_state: SessionState) -> None:
        old_state = self.session.state
        if new_state not in ALLOWED_TRANSITIONS[old_state]:
            raise RuntimeError(f"Illegal session transition {old_state.name} -> {new_state.name}")
        self.session.state = new_state
        logger.info(f"Session state: {old_state.name} -> {new_state.name}")
        self._notify()

    def _enter_disconnected(self) -> None:
        self.session.clear_channel()
        if self.session.state is SessionState.DISCONNECTED:
            self._notify()
        else:
            self._transition(SessionState.DISCONNECTED)

    def _reject_if_busy(self, operation: str) -> None:
        if self.session.state in TRANSITIONAL_STATES:
            raise OperationInProgress(self.session.state.name, operation)

    def _require_connected(self, operation: str) -> None:
        self._reject_if_busy(operation)
        if self.session.state is not SessionState.CONNECTED:
            raise NotConnected(operation)

    def _claim(self, kind: str) -> None:
        # One outstanding gateway call per kind
        if kind in self._in_flight:
            label = kind.replace('_', ' ')
            raise OperationInProgress(self.session.state.name, label,
                                      detail=f"previous {label} still outstanding")
        self._in_flight.add(kind)

    async def _call_gateway(self, call: Awaitable[T]) -> T:
        timeout = self.config.gateway_timeout_sec
        try:
            return await asyncio.wait_for(call, timeout)
        except asyncio.TimeoutError:
            raise TransportError(f"Gateway did not respond within {timeout:g}s")
        except OSError as e:
            raise TransportError(str(e)) from e

    def _initial_channel(self, hour: int) -> str:
        if self.config.auto_band:
            band = self.estimator.recommend_band(hour)
            logger.info(f"Auto band selection for {hour:02d}h: {band}")
            return band
        return self.config.preferred_band.strip()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def connect(self, server_address: Optional[str] = None,
                      locator: Optional[str] = None) -> SessionSnapshot:
        """
        Connect to a voice server.

        Args:
            server_address: Host or IP (default: config.server_address)
            locator: Operator's Maidenhead locator (default: config.locator)

        Returns:
            Snapshot of the CONNECTED session

        Raises:
            OperationInProgress: a connect or switch is outstanding
            MasteryNotMet: any mastery ratio below 100%
            MissingServerAddress: no server address
            InvalidLocatorFormat: locator missing or malformed
            TransportError: gateway refused, failed or timed out
        """
        self._reject_if_busy('connect')
        if self.session.state is SessionState.CONNECTED:
            logger.info(f"Already connected to {self.session.server_address}")
            return self.snapshot()

        mastery = self.mastery_provider()
        if not mastery.is_complete:
            logger.warning(f"Connect refused, mastery incomplete: {mastery.describe()}")
            raise MasteryNotMet(mastery)

        address = (server_address if server_address is not None else self.config.server_address) or ""
        address = address.strip()
        if not address:
            raise MissingServerAddress()

        grid = GridLocator.parse(locator if locator is not None else self.config.locator)

        initial_channel = self._initial_channel(self.clock().hour)
        options = ConnectOptions(
            username=self.config.display_name,
            password=self.config.password,
            tokens=list(self.config.tokens),
            initial_channel=initial_channel,
        )

        self._claim('connect')
        self.session.mastery = mastery
        self.session.server_address = address
        self.session.locator = grid
        self._transition(SessionState.CONNECTING)
        logger.info(f"Connecting to {address} as {options.username or '(anonymous)'} from {grid}")

        try:
            result = await self._call_gateway(self.gateway.connect(address, options))
        except TransportError as e:
            logger.error(f"Connect to {address} failed: {e}")
            if self.session.state is SessionState.CONNECTING:
                self._enter_disconnected()
            raise
        except BaseException:
            logger.exception(f"Connect to {address} aborted")
            if self.session.state is SessionState.CONNECTING:
                self._enter_disconnected()
            raise
        finally:
            self._in_flight.discard('connect')

        if self.session.state is not SessionState.CONNECTING:
            logger.warning(f"Connect to {address} resolved after session became "
                           f"{self.session.state.name}; discarding result")
            if result.success:
                await self._gateway_disconnect()
            raise TransportError("Connection attempt superseded by disconnect")

        if not result.success:
            logger.error(f"Connect to {address} rejected: {result.error}")
            self._enter_disconnected()
            raise TransportError(result.error)

        channel = result.channel or initial_channel
        self.session.band = channel
        self.session.reading = self.estimator.reading(channel, self.clock())
        self._transition(SessionState.CONNECTED)
        logger.info(f"Connected to {address} on {channel} "
                    f"(propagation {self.session.reading.level}/5)")
        return self.snapshot()

    async def switch_channel(self, name: str) -> PropagationReading:
        """
        Move to another channel (band).

        Returns:
            Propagation reading for the new channel

        Raises:
            OperationInProgress / NotConnected: not in CONNECTED
            ChannelSwitchFailure: gateway refused, failed or timed out
        """
        if not name or not name.strip():
            raise ValueError("channel name is empty")
        name = name.strip()
        self._require_connected('switch channel')

        previous_stations = self.session.stations
        self._claim('join_channel')
        self._transition(SessionState.SWITCHING)
        try:
            result = await self._call_gateway(self.gateway.join_channel(name))
        except TransportError as e:
            result = GatewayResult.failed(e.gateway_message)
        except BaseException:
            logger.exception(f"Switch to {name} aborted")
            if self.session.state is SessionState.SWITCHING:
                self._transition(SessionState.CONNECTED)
            raise
        finally:
            self._in_flight.discard('join_channel')

        if self.session.state is not SessionState.SWITCHING:
            logger.warning(f"Connection lost while switching to {name}")
            raise ChannelSwitchFailure(name, "connection lost during channel switch")

        if not result.success:
            logger.warning(f"Switch to {name} failed: {result.error}; staying on {self.session.band}")
            self._transition(SessionState.CONNECTED)
            raise ChannelSwitchFailure(name, result.error)

        new_band = result.channel or name
        if new_band != self.session.band and self.session.stations is previous_stations:
            # Roster belongs to the old channel unless one was pushed during the switch
            self.session.stations = []
        self.session.band = new_band
        self.session.reading = self.estimator.reading(self.session.band, self.clock())
        self._transition(SessionState.CONNECTED)
        logger.info(f"Now on {self.session.band} (propagation {self.session.reading.level}/5)")
        return self.session.reading

    async def send_message(self, text: str) -> ChatMessage:
        """Send a text (Morse) message to the current channel"""
        text = (text or "").strip()
        if not text:
            raise ValueError("message is empty")
        self._require_connected('send message')

        self._claim('send_message')
        try:
            result = await self._call_gateway(self.gateway.send_message(text))
        finally:
            self._in_flight.discard('send_message')

        if not result.success:
            logger.warning(f"Message not sent: {result.error}")
            raise TransportError(result.error)

        message = ChatMessage(
            sender=self.config.display_name or "You",
            content=text,
            time=self.clock(),
            is_self=True,
        )
        self.session.messages.append(message)
        self._notify()
        return message

    async def list_channels(self) -> List[ChannelListing]:
        self._require_connected('list channels')

        self._claim('list_channels')
        try:
            result = await self._call_gateway(self.gateway.list_channels())
        finally:
            self._in_flight.discard('list_channels')

        if not result.success:
            raise TransportError(result.error)
        return list(result.channels)

    async def disconnect(self) -> None:
        """Leave the server. Always ends DISCONNECTED, even if the gateway errors."""
        if self.session.state is SessionState.DISCONNECTED:
            logger.debug("Disconnect requested while already disconnected")
            return
        if 'disconnect' in self._in_flight:
            return

        self._claim('disconnect')
        try:
            await self._gateway_disconnect()
        finally:
            self._in_flight.discard('disconnect')
            self._enter_disconnected()

    async def _gateway_disconnect(self) -> None:
        try:
            await asyncio.wait_for(self.gateway.disconnect(), self.config.gateway_timeout_sec)
        except asyncio.TimeoutError:
            logger.warning("Gateway disconnect timed out")
        except OSError as e:
            logger.warning(f"Gateway disconnect failed: {e}")

    # ------------------------------------------------------------------
    # Gateway push events
    # ------------------------------------------------------------------

    def on_station_list_updated(self, users: List[GatewayUser]) -> None:
        """Replace the station list wholesale; no state change"""
        if self.session.state is SessionState.DISCONNECTED:
            logger.debug(f"Ignoring user list ({len(users)} users) while disconnected")
            return
        self.session.stations = [Station.from_user(u, self.session.locator) for u in users]
        logger.debug(f"Station list updated: {len(self.session.stations)} stations")
        self._notify()

    def on_gateway_status(self, event: ConnectionStatusEvent) -> None:
        """Handle a connection status push (the gateway may drop us at any time)"""
        if event.is_disconnect:
            if self.session.state is not SessionState.DISCONNECTED:
                logger.warning(f"Gateway reported {event.status.value}"
                               f"{': ' + event.error if event.error else ''}")
                self._enter_disconnected()
            return

        if (event.status is GatewayStatus.CONNECTED
                and self.session.state is SessionState.CONNECTED
                and event.current_channel
                and event.current_channel != self.session.band):
            logger.info(f"Server moved us to {event.current_channel}")
            self.session.band = event.current_channel
            self.session.stations = []
            self.session.reading = self.estimator.reading(event.current_channel, self.clock())
            self._notify()

    def on_message(self, event: MessageEvent) -> None:
        if self.session.state is SessionState.DISCONNECTED:
            logger.debug(f"Dropping message from {event.sender} while disconnected")
            return
        self.session.messages.append(
            ChatMessage(sender=event.sender, content=event.content, time=event.time)
        )
        self._notify()

    def dispatch_event(self, event: GatewayEvent) -> None:
        if isinstance(event, ConnectionStatusEvent):
            self.on_gateway_status(event)
        elif isinstance(event, UserListEvent):
            self.on_station_list_updated(event.users)
        elif isinstance(event, MessageEvent):
            self.on_message(event)
        else:
            logger.warning(f"Unknown gateway event: {event!r}")

    def drain_events(self) -> int:
        """Dispatch every event already queued. Returns the number handled."""
        handled = 0
        while not self.gateway.events.empty():
            self.dispatch_event(self.gateway.events.get_nowait())
            handled += 1
        return handled

    async def process_events(self) -> None:
        """Dispatch gateway events forever (run as a task; cancel to stop)"""
        while True:
            event = await self.gateway.events.get()
            self.dispatch_event(event)
