"""
Loopback end-to-end tests: a real sender talks to a real receiver.
"""

import socket
import threading
import time

import pytest

from netools.config import TransportConfig
from netools.errors import TransportError
from netools.transport import (
    BroadcastReceiver,
    BroadcastSender,
    MulticastReceiver,
    MulticastSender,
    TCPReceiver,
    TCPSender,
    UDPReceiver,
    UDPSender,
)


def received(messages, text):
    """Log lines reporting an inbound message with exactly this text."""
    return [m for m in messages if m.startswith("Receive message from ") and m.endswith(f": {text}")]


def port_of(receiver) -> int:
    return int(receiver.address.rpartition(":")[2])


# =============================================================================
# Unicast UDP
# =============================================================================


class TestUnicastUDP:
    """UDP sender -> UDP receiver on 127.0.0.1."""

    def test_message_and_origin(self, logs, wait_until, start_receiver):
        receiver = UDPReceiver("127.0.0.1:0")
        start_receiver(receiver)

        UDPSender().send(receiver.address, "hello udp")

        assert wait_until(lambda: received(logs(), "hello udp"))
        line = received(logs(), "hello udp")[0]
        origin = line[len("Receive message from "):].split(": ", 1)[0]
        host, _, port = origin.rpartition(":")
        assert host == "127.0.0.1"
        assert int(port) > 0

    def test_unicode_payload_is_identical(self, logs, wait_until, start_receiver):
        receiver = UDPReceiver("127.0.0.1:0")
        start_receiver(receiver)
        text = "héllo wörld ✓"

        UDPSender().send(receiver.address, text)

        assert wait_until(lambda: received(logs(), text))

    def test_oversized_datagram_is_truncated(self, logs, wait_until, start_receiver):
        receiver = UDPReceiver("127.0.0.1:0")
        start_receiver(receiver)

        UDPSender().send(receiver.address, "a" * 2000)

        assert wait_until(lambda: received(logs(), "a" * 1024))

    def test_cancellation_latency(self, start_receiver):
        """The loop exits within about one receive timeout of cancellation."""
        receiver = UDPReceiver("127.0.0.1:0")
        cancel, thread = start_receiver(receiver)
        time.sleep(0.25)

        started = time.monotonic()
        cancel.set()
        thread.join(timeout=2)

        assert not thread.is_alive()
        assert time.monotonic() - started < 0.5

    def test_survives_idle_timeouts(self, logs, wait_until, start_receiver):
        """Several empty timeouts in a row do not end the loop."""
        receiver = UDPReceiver("127.0.0.1:0", config=TransportConfig(receive_timeout=0.02))
        _, thread = start_receiver(receiver)
        time.sleep(0.3)
        assert thread.is_alive()

        UDPSender().send(receiver.address, "still here")

        assert wait_until(lambda: received(logs(), "still here"))
        assert "stopping" not in logs()


# =============================================================================
# Unicast TCP
# =============================================================================


class TestUnicastTCP:
    """TCP sender -> TCP receiver on 127.0.0.1."""

    def test_message_then_stopping(self, logs, wait_until, start_receiver):
        receiver = TCPReceiver("127.0.0.1:0")
        cancel, thread = start_receiver(receiver)

        TCPSender().send(receiver.address, "x")

        assert wait_until(lambda: received(logs(), "x"))
        cancel.set()
        thread.join(timeout=2)
        assert not thread.is_alive()

        messages = logs()
        assert messages.index(received(messages, "x")[0]) < messages.index("stopping")

    def test_concurrent_connections_logged_once(self, logs, wait_until, start_receiver):
        receiver = TCPReceiver("127.0.0.1:0")
        start_receiver(receiver)
        texts = [f"message-{i}" for i in range(8)]

        senders = [
            threading.Thread(target=TCPSender().send, args=(receiver.address, text))
            for text in texts
        ]
        for sender in senders:
            sender.start()
        for sender in senders:
            sender.join()

        assert wait_until(lambda: all(received(logs(), text) for text in texts))
        for text in texts:
            assert len(received(logs(), text)) == 1

    def test_zero_bytes_is_empty_receive(self, logs, wait_until, start_receiver):
        receiver = TCPReceiver("127.0.0.1:0")
        start_receiver(receiver)

        TCPSender().send(receiver.address, "")

        assert wait_until(lambda: any(m.startswith("Receive empty from 127.0.0.1:") for m in logs()))
        assert not any(m.startswith("Failed") for m in logs())

    def test_oversized_message_is_truncated(self, logs, wait_until, start_receiver):
        receiver = TCPReceiver("127.0.0.1:0", config=TransportConfig(buffer_size=16))
        start_receiver(receiver)

        TCPSender().send(receiver.address, "0123456789abcdef-overflow")

        assert wait_until(lambda: received(logs(), "0123456789abcdef"))

    def test_waits_for_connection_threads(self, logs, wait_until, start_receiver):
        """Cancellation does not abandon an accepted connection mid-read."""
        receiver = TCPReceiver("127.0.0.1:0")
        cancel, thread = start_receiver(receiver)

        client = socket.create_connection(("127.0.0.1", port_of(receiver)))
        try:
            assert wait_until(
                lambda: any(t.name.startswith("tcp-conn-") for t in threading.enumerate())
            )
            cancel.set()
            assert wait_until(lambda: "stopping" in logs())
            time.sleep(0.2)
            assert thread.is_alive()

            client.sendall(b"late")
        finally:
            client.close()

        thread.join(timeout=2)
        assert not thread.is_alive()
        assert received(logs(), "late")

    def test_finished_connection_threads_are_released(self, logs, wait_until, start_receiver):
        receiver = TCPReceiver("127.0.0.1:0")
        start_receiver(receiver)

        for i in range(5):
            TCPSender().send(receiver.address, f"seq-{i}")
            assert wait_until(lambda: received(logs(), f"seq-{i}"))

        assert len(receiver._workers) <= 2

    def test_sender_falls_back_across_resolved_addresses(self, logs, wait_until, start_receiver):
        """localhost may resolve to ::1 first; an IPv4-only listener is still reached."""
        receiver = TCPReceiver("127.0.0.1:0")
        start_receiver(receiver)

        TCPSender().send(f"localhost:{port_of(receiver)}", "via name")

        assert wait_until(lambda: received(logs(), "via name"))


# =============================================================================
# Broadcast
# =============================================================================


class TestBroadcast:
    """Broadcast sender -> wildcard-bound broadcast receiver."""

    def test_receive_on_wildcard(self, logs, wait_until, start_receiver):
        receiver = BroadcastReceiver(0)
        start_receiver(receiver)

        BroadcastSender().send(f"127.0.0.1:{port_of(receiver)}", "hi")

        assert wait_until(lambda: received(logs(), "hi"))
        assert received(logs(), "hi")[0].startswith("Receive message from 127.0.0.1:")


# =============================================================================
# Multicast
# =============================================================================


class TestMulticast:
    """Multicast sender -> group-joined receiver on this host."""

    GROUP = "239.255.42.99"

    def test_group_delivery(self, logs, wait_until, start_receiver):
        try:
            receiver = MulticastReceiver(f"{self.GROUP}:0")
        except TransportError as e:
            pytest.skip(f"multicast unavailable: {e}")
        assert f"Multicast group address: {self.GROUP}" in logs()
        start_receiver(receiver)

        try:
            MulticastSender().send(f"{self.GROUP}:{port_of(receiver)}", "group hello")
        except TransportError as e:
            pytest.skip(f"multicast route unavailable: {e}")

        assert wait_until(lambda: received(logs(), "group hello"))
