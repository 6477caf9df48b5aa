"""
Error kinds for hf-link

All errors are recoverable: callers catch them, show the message and let the
operator re-issue the command. Nothing here is retried automatically.

Precondition failures (raised before any state change or gateway call):
- InvalidLocatorFormat
- MissingServerAddress
- MasteryNotMet
- OperationInProgress
- NotConnected

Gateway-originated failures (state is forced to a defined value first):
- TransportError        -> session ends DISCONNECTED (connect) or unchanged
- ChannelSwitchFailure  -> session stays CONNECTED on the previous channel
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .interfaces.data_models import MasterySnapshot


class HFLinkError(Exception):
    """Base class for all hf-link errors"""


class InvalidLocatorFormat(HFLinkError, ValueError):
    """Grid locator is not 4 or 6 valid Maidenhead characters"""

    def __init__(self, locator: object):
        self.locator = locator
        super().__init__(
            f"Invalid Maidenhead locator {locator!r}: expected 2 letters A-R, "
            f"2 digits and optionally 2 letters A-X (e.g. JO59 or JO59jp)"
        )


class MissingServerAddress(HFLinkError):
    def __init__(self):
        super().__init__("A server address (IP or host name) is required to connect")


class MasteryNotMet(HFLinkError):
    """Operator has not reached 100% on every required character set"""

    def __init__(self, mastery: 'MasterySnapshot'):
        self.mastery = mastery
        super().__init__(
            "100% mastery of the International alphabet, prosigns and special "
            f"characters is required before connecting (have {mastery.describe()})"
        )


class OperationInProgress(HFLinkError):
    """A connect or channel switch is already outstanding"""

    def __init__(self, state: object, operation: str, detail: Optional[str] = None):
        self.state = state
        self.operation = operation
        super().__init__(f"Cannot {operation}: {detail or f'session is {state}'}")


class NotConnected(HFLinkError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Cannot {operation}: not connected to a server")


class TransportError(HFLinkError):
    """Gateway reported a failure (or did not answer in time)"""

    def __init__(self, message: Optional[str]):
        self.gateway_message = message or "Unknown transport error"
        super().__init__(self.gateway_message)


class ChannelSwitchFailure(HFLinkError):
    def __init__(self, channel: str, message: Optional[str]):
        self.channel = channel
        self.gateway_message = message or "Unknown error"
        super().__init__(f"Could not join channel {channel!r}: {self.gateway_message}")
