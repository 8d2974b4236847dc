"""
Connectionless helpers shared by the broadcast, multicast and UDP transports.
"""

import socket
import threading
from typing import Callable, Optional

from netools.errors import TransportError
from netools.transport.base import InboundMessage, resolve_endpoint
from netools.utils.logger import get_logger

logger = get_logger("transport.datagram")


def send_datagram(
    address: str,
    message: str,
    configure: Optional[Callable[[socket.socket], None]] = None,
) -> None:
    """
    Send one datagram from a fresh ephemeral socket.

    Args:
        address: Target ``host:port``
        message: Text to send, encoded as UTF-8
        configure: Called with the socket before sending (socket options)

    Raises:
        AddressError: Unparseable target
        TransportError: Option or send failure
    """
    family, sockaddr = resolve_endpoint(address, socket.SOCK_DGRAM)
    with socket.socket(family, socket.SOCK_DGRAM) as sock:
        if configure is not None:
            configure(sock)
        try:
            sock.sendto(message.encode("utf-8"), sockaddr)
        except OSError as e:
            raise TransportError(f"Failed to send to {address}: {e}") from e
    logger.debug(f"Sent {len(message)} chars to {address}")


def bind_datagram_socket(family: int, sockaddr: tuple, timeout: float) -> socket.socket:
    """
    Create a datagram socket bound to sockaddr with a receive timeout.

    Raises:
        TransportError: Bind failure (the socket is closed first)
    """
    sock = socket.socket(family, socket.SOCK_DGRAM)
    try:
        sock.bind(sockaddr)
        sock.settimeout(timeout)
    except OSError as e:
        sock.close()
        raise TransportError(f"Failed to bind {sockaddr[0]}:{sockaddr[1]}: {e}") from e
    return sock


def receive_datagrams(sock: socket.socket, cancel: threading.Event, buffer_size: int) -> None:
    """
    Log every datagram arriving on sock until cancel is set.

    Timeouts are silent; any other socket error is logged and the
    loop carries on. Datagrams longer than buffer_size are truncated.
    """
    while True:
        if cancel.is_set():
            logger.info("stopping")
            return
        try:
            data, origin = sock.recvfrom(buffer_size)
        except (socket.timeout, BlockingIOError):
            continue
        except OSError as e:
            logger.error(f"Failed to receive data: {e}")
            continue
        logger.info(InboundMessage(payload=data, origin=origin).log_line())
