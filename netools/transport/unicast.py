"""
Unicast transports - point-to-point delivery over TCP or UDP.

TCP:
- Sender opens a fresh connection per message and writes it once
- Receiver polls a non-blocking listener; each accepted connection is
  handed to its own thread, which reads once and exits. All threads are
  joined before the receive loop returns.

UDP:
- Sender uses a fresh ephemeral socket per message
- Receiver binds the given address (not the wildcard)
"""

import socket
import threading
from typing import List, Optional

from netools.config import TransportConfig, load_config
from netools.errors import AddressError, TransportError
from netools.transport.base import InboundMessage, resolve_endpoint
from netools.transport.datagram import bind_datagram_socket, receive_datagrams, send_datagram
from netools.utils.logger import get_logger
from netools.utils.validation import format_endpoint, parse_endpoint

tcp_logger = get_logger("transport.tcp")
udp_logger = get_logger("transport.udp")


# =============================================================================
# TCP
# =============================================================================

class TCPSender:
    """One connection, one write."""

    name = "Unicast TCP"

    def send(self, address: str, message: str) -> None:
        """
        Connect to address and write message.

        Raises:
            AddressError: Unparseable address
            TransportError: Connect or write failed
        """
        host, port = parse_endpoint(address)
        try:
            with socket.create_connection((host, port)) as conn:
                conn.sendall(message.encode("utf-8"))
        except socket.gaierror as e:
            raise AddressError(f"failed to resolve {address!r}: {e}") from e
        except OSError as e:
            raise TransportError(f"Failed to send to {address}: {e}") from e
        tcp_logger.debug(f"Sent {len(message)} chars to {address}")


class TCPReceiver:
    """
    Accepts connections and logs the first buffer read from each.

    The listening socket is only used by the accept loop; accepted
    sockets are owned by their worker thread.
    """

    name = "Unicast TCP"

    def __init__(self, address: str, config: Optional[TransportConfig] = None):
        self.config = config or load_config()
        self._workers: List[threading.Thread] = []

        family, sockaddr = resolve_endpoint(address, socket.SOCK_STREAM)
        self._listener = socket.socket(family, socket.SOCK_STREAM)
        try:
            self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._listener.bind(sockaddr)
            self._listener.listen(self.config.listen_backlog)
            self._listener.setblocking(False)
        except OSError as e:
            self._listener.close()
            raise TransportError(f"Failed to listen on {address}: {e}") from e

    @property
    def address(self) -> str:
        return format_endpoint(self._listener.getsockname())

    def receive(self, cancel: threading.Event) -> None:
        """Accept until cancelled, then join every connection thread."""
        self._workers = []

        while not cancel.is_set():
            try:
                conn, peer = self._listener.accept()
            except BlockingIOError:
                cancel.wait(self.config.accept_backoff)
                continue
            except OSError as e:
                tcp_logger.error(f"Failed to accept connection: {e}")
                cancel.wait(self.config.accept_backoff)
                continue

            if cancel.is_set():
                conn.close()
                break

            worker = threading.Thread(
                target=self._handle_connection,
                args=(conn, peer),
                name=f"tcp-conn-{format_endpoint(peer)}",
            )
            worker.start()
            self._workers = [w for w in self._workers if w.is_alive()]
            self._workers.append(worker)

        tcp_logger.info("stopping")

        for worker in self._workers:
            worker.join()
        tcp_logger.debug(f"Joined {len(self._workers)} connection threads")

    def _handle_connection(self, conn: socket.socket, peer: tuple) -> None:
        origin = format_endpoint(peer)
        with conn:
            try:
                data = conn.recv(self.config.buffer_size)
            except BlockingIOError:
                tcp_logger.warning(f"Receive empty from {origin}")
                return
            except OSError as e:
                tcp_logger.error(f"Failed to read from connection {origin}: {e}")
                return

        if not data:
            tcp_logger.warning(f"Receive empty from {origin}")
            return
        tcp_logger.info(InboundMessage(payload=data, origin=peer).log_line())

    def close(self) -> None:
        self._listener.close()

    def __enter__(self) -> "TCPReceiver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


# =============================================================================
# UDP
# =============================================================================

class UDPSender:
    """One ephemeral socket, one datagram."""

    name = "Unicast UDP"

    def send(self, address: str, message: str) -> None:
        """
        Send message as a single datagram.

        Raises:
            AddressError: Unparseable address
            TransportError: Send failed
        """
        send_datagram(address, message)


class UDPReceiver:
    """Receives datagrams on exactly the given address."""

    name = "Unicast UDP"

    def __init__(self, address: str, config: Optional[TransportConfig] = None):
        self.config = config or load_config()

        family, sockaddr = resolve_endpoint(address, socket.SOCK_DGRAM)
        self._socket = bind_datagram_socket(family, sockaddr, self.config.receive_timeout)
        udp_logger.debug(f"Bound {self.address}")

    @property
    def address(self) -> str:
        return format_endpoint(self._socket.getsockname())

    def receive(self, cancel: threading.Event) -> None:
        receive_datagrams(self._socket, cancel, self.config.buffer_size)

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> "UDPReceiver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
