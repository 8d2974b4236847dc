"""
Transport contract - Sender/Receiver protocols and the receive-loop harness.

Every transport (broadcast, multicast, unicast TCP/UDP) exposes the same
two capabilities:

- Sender: one-shot, fire-and-forget ``send(address, message)``
- Receiver: binds at construction, then ``receive(cancel)`` loops until
  the cancellation event is set

The harness wires a receiver's loop to SIGINT/SIGTERM through a
``threading.Event`` that the loop polls once per iteration.
"""

import signal
import socket
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple, runtime_checkable

from netools.errors import AddressError, TransportError
from netools.utils.logger import get_logger
from netools.utils.validation import format_endpoint, parse_endpoint

logger = get_logger("transport")


# =============================================================================
# Protocols
# =============================================================================

@runtime_checkable
class Sender(Protocol):
    """Protocol for one-shot message senders."""
    name: str

    def send(self, address: str, message: str) -> None:
        ...


@runtime_checkable
class Receiver(Protocol):
    """Protocol for long-running receivers owning one bound socket."""
    name: str

    @property
    def address(self) -> str:
        ...

    def receive(self, cancel: threading.Event) -> None:
        ...

    def close(self) -> None:
        ...


# =============================================================================
# Inbound Message
# =============================================================================

@dataclass(frozen=True)
class InboundMessage:
    """
    A single received payload and where it came from.

    Attributes:
        payload: Raw bytes, at most one receive buffer long
        origin: Peer socket address as returned by recvfrom/accept
    """
    payload: bytes
    origin: tuple

    @property
    def text(self) -> str:
        """Payload decoded as UTF-8, invalid sequences replaced."""
        return self.payload.decode("utf-8", errors="replace")

    @property
    def origin_str(self) -> str:
        return format_endpoint(self.origin)

    def log_line(self) -> str:
        return f"Receive message from {self.origin_str}: {self.text}"


# =============================================================================
# Address Resolution
# =============================================================================

def resolve_endpoint(address: str, socktype: int) -> Tuple[int, tuple]:
    """
    Resolve ``host:port`` to a socket family and address.

    Args:
        address: Address string
        socktype: socket.SOCK_STREAM or socket.SOCK_DGRAM

    Returns:
        (family, sockaddr) for the first usable result

    Raises:
        AddressError: Unparseable address or failed name resolution
    """
    host, port = parse_endpoint(address)
    try:
        infos = socket.getaddrinfo(host, port, type=socktype)
    except socket.gaierror as e:
        raise AddressError(f"failed to resolve {address!r}: {e}") from e

    family, _, _, _, sockaddr = infos[0]
    return family, sockaddr


# =============================================================================
# Harness
# =============================================================================

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def install_stop_handler(cancel: threading.Event) -> Dict[int, Callable]:
    """
    Route SIGINT/SIGTERM to the cancellation event.

    Must be called from the main thread.

    Returns:
        Previous handlers, for restore_handlers()
    """
    def _on_signal(signum, frame):
        cancel.set()

    previous = {}
    for signum in STOP_SIGNALS:
        previous[signum] = signal.signal(signum, _on_signal)
    return previous


def restore_handlers(previous: Dict[int, Callable]) -> None:
    """Reinstall handlers returned by install_stop_handler()."""
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def run_sender(sender: Sender, address: str, message: str) -> None:
    """Announce and perform a single send."""
    logger.info(f"{sender.name} sender started")
    sender.send(address, message)


def run_receiver(
    receiver: Receiver,
    cancel: Optional[threading.Event] = None,
    handle_signals: bool = True,
) -> None:
    """
    Run a receiver until cancelled, then release its socket.

    Args:
        receiver: Bound receiver
        cancel: Cancellation event (a new one is created if None)
        handle_signals: Set the event on SIGINT/SIGTERM
    """
    cancel = cancel or threading.Event()
    previous = {}
    try:
        logger.info(f"{receiver.name} receiver started on {receiver.address}")
        if handle_signals:
            previous = install_stop_handler(cancel)
        receiver.receive(cancel)
    finally:
        restore_handlers(previous)
        receiver.close()


__all__ = [
    "Sender",
    "Receiver",
    "InboundMessage",
    "TransportError",
    "AddressError",
    "resolve_endpoint",
    "install_stop_handler",
    "restore_handlers",
    "run_sender",
    "run_receiver",
]
