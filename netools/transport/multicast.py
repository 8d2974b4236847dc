"""
Multicast transport - group delivery over UDP.

The sender needs no group membership; it addresses the group directly.
The receiver binds the wildcard address on the group port and joins the
IPv4 group on the default interface. Membership is dropped by the kernel
when the socket closes.
"""

import ipaddress
import socket
import struct
import threading
from typing import Optional

from netools.config import TransportConfig, load_config
from netools.errors import TransportError
from netools.transport.datagram import bind_datagram_socket, receive_datagrams, send_datagram
from netools.utils.logger import get_logger
from netools.utils.validation import format_endpoint, parse_endpoint, parse_ip

logger = get_logger("transport.multicast")


class MulticastSender:
    """Fire-and-forget multicast sender."""

    name = "Multicast"

    def __init__(self, config: Optional[TransportConfig] = None):
        self.config = config or load_config()

    def send(self, address: str, message: str) -> None:
        """
        Send message to a multicast group address (e.g. ``224.0.0.1:8080``).

        Raises:
            AddressError: Unparseable address
            TransportError: Send failed
        """
        send_datagram(address, message, configure=self._configure)

    def _configure(self, sock: socket.socket) -> None:
        if sock.family != socket.AF_INET:
            return
        try:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, self.config.multicast_ttl)
        except OSError as e:
            raise TransportError(f"Failed to set multicast TTL: {e}") from e


class MulticastReceiver:
    """
    Receives datagrams sent to an IPv4 multicast group.

    Args:
        address: ``group:port``, group must be an IPv4 literal
        config: Transport configuration
    """

    name = "Multicast"

    def __init__(self, address: str, config: Optional[TransportConfig] = None):
        self.config = config or load_config()

        host, port = parse_endpoint(address)
        group = parse_ip(host)
        if not isinstance(group, ipaddress.IPv4Address):
            raise TransportError(f"IPv4 only, got multicast group {group}")

        self.group = group
        self._socket = bind_datagram_socket(
            socket.AF_INET, ("0.0.0.0", port), self.config.receive_timeout
        )
        try:
            membership = struct.pack("4s4s", group.packed, socket.inet_aton("0.0.0.0"))
            self._socket.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
        except OSError as e:
            self._socket.close()
            raise TransportError(f"Failed to join multicast group {group}: {e}") from e

        logger.info(f"Multicast group address: {group}")

    @property
    def address(self) -> str:
        return format_endpoint(self._socket.getsockname())

    def receive(self, cancel: threading.Event) -> None:
        receive_datagrams(self._socket, cancel, self.config.buffer_size)

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> "MulticastReceiver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
