"""
Configuration for hf-link

Loaded from a TOML file:

    [station]
    callsign = "LA1ABC"
    locator = "JO59jp"

    [server]
    address = "murmur.example.org"
    username = "LA1ABC"
    password = ""
    tokens = []
    preferred_band = "auto"     # "auto" = recommend by time of day

    [session]
    gateway_timeout_sec = 10.0
    message_history = 200
    random_seed = 42            # optional, for reproducible propagation

The locator and server address are deliberately not validated here: both
are connect-time preconditions and produce their own errors there.
"""

import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import toml

logger = logging.getLogger(__name__)

AUTO_BAND = "auto"
DEFAULT_GATEWAY_TIMEOUT_SEC = 10.0
DEFAULT_MESSAGE_HISTORY = 200


@dataclass
class LinkConfig:
    # Station
    callsign: str = ""
    locator: str = ""

    # Server
    server_address: str = ""
    username: str = ""
    password: str = ""
    tokens: List[str] = field(default_factory=list)
    preferred_band: str = AUTO_BAND

    # Session behaviour
    gateway_timeout_sec: float = DEFAULT_GATEWAY_TIMEOUT_SEC
    message_history: int = DEFAULT_MESSAGE_HISTORY
    random_seed: Optional[int] = None

    def __post_init__(self):
        if not self.preferred_band or not self.preferred_band.strip():
            raise ValueError("preferred_band must be 'auto' or a channel name")
        if self.gateway_timeout_sec <= 0:
            raise ValueError(f"gateway_timeout_sec must be positive, got {self.gateway_timeout_sec}")
        if self.message_history < 1:
            raise ValueError(f"message_history must be at least 1, got {self.message_history}")
        if not isinstance(self.tokens, list):
            raise ValueError("tokens must be a list of strings")

    @property
    def auto_band(self) -> bool:
        return self.preferred_band.strip().lower() == AUTO_BAND

    @property
    def display_name(self) -> str:
        """Name used on the server: username, else callsign"""
        return self.username or self.callsign

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LinkConfig':
        """Build from a parsed TOML document (missing keys use defaults)"""
        station = data.get('station', {})
        server = data.get('server', {})
        session = data.get('session', {})

        return cls(
            callsign=station.get('callsign', ''),
            locator=station.get('locator', ''),
            server_address=server.get('address', ''),
            username=server.get('username', ''),
            password=server.get('password', ''),
            tokens=list(server.get('tokens', [])),
            preferred_band=server.get('preferred_band', AUTO_BAND),
            gateway_timeout_sec=float(session.get('gateway_timeout_sec', DEFAULT_GATEWAY_TIMEOUT_SEC)),
            message_history=int(session.get('message_history', DEFAULT_MESSAGE_HISTORY)),
            random_seed=session.get('random_seed'),
        )


def load_config(config_file: Union[str, Path]) -> LinkConfig:
    """
    Load configuration from a TOML file

    Raises:
        FileNotFoundError: file does not exist
        ValueError: file is not valid TOML or holds invalid values
    """
    config_file = Path(config_file)
    try:
        with open(config_file, 'r') as f:
            data = toml.load(f)
    except toml.TomlDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_file}: {e}") from e

    config = LinkConfig.from_dict(data)
    logger.info(f"Loaded configuration from {config_file} "
                f"(station {config.callsign or '?'} @ {config.locator or '?'})")
    return config
