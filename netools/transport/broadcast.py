"""
Broadcast transport - subnet-wide delivery over UDP.

The sender needs SO_BROADCAST on its ephemeral socket; without it the
kernel refuses datagrams addressed to a broadcast address. The receiver
binds the wildcard address so it sees traffic sent to any local address.
"""

import socket
import threading
from typing import Optional

from netools.config import TransportConfig, load_config
from netools.errors import TransportError
from netools.transport.datagram import bind_datagram_socket, receive_datagrams, send_datagram
from netools.utils.logger import get_logger
from netools.utils.validation import format_endpoint, validate_port

logger = get_logger("transport.broadcast")


class BroadcastSender:
    """Fire-and-forget broadcast sender."""

    name = "Broadcast"

    def __init__(self, enable_broadcast: bool = True):
        self.enable_broadcast = enable_broadcast

    def send(self, address: str, message: str) -> None:
        """
        Broadcast message to address (e.g. ``255.255.255.255:8080``).

        Raises:
            AddressError: Unparseable address
            TransportError: SO_BROADCAST could not be set or send failed
        """
        send_datagram(address, message, configure=self._configure)

    def _configure(self, sock: socket.socket) -> None:
        if not self.enable_broadcast:
            return
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        except OSError as e:
            raise TransportError(f"Failed to enable broadcast: {e}") from e


class BroadcastReceiver:
    """Receives broadcast datagrams on a port of every local interface."""

    name = "Broadcast"

    def __init__(self, port: int, config: Optional[TransportConfig] = None):
        ok, err = validate_port(port)
        if not ok:
            raise TransportError(err)

        self.config = config or load_config()
        self._socket = bind_datagram_socket(
            socket.AF_INET, ("0.0.0.0", port), self.config.receive_timeout
        )
        logger.debug(f"Bound {self.address}")

    @property
    def address(self) -> str:
        return format_endpoint(self._socket.getsockname())

    def receive(self, cancel: threading.Event) -> None:
        receive_datagrams(self._socket, cancel, self.config.buffer_size)

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> "BroadcastReceiver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
