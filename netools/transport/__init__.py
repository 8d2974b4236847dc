"""
netools Transport Module - senders and receivers for each delivery mode.

All transports satisfy the Sender/Receiver protocols from
netools.transport.base and are driven by run_sender/run_receiver.
"""

from netools.transport.base import (
    Sender,
    Receiver,
    InboundMessage,
    resolve_endpoint,
    install_stop_handler,
    restore_handlers,
    run_sender,
    run_receiver,
)
from netools.transport.broadcast import BroadcastSender, BroadcastReceiver
from netools.transport.multicast import MulticastSender, MulticastReceiver
from netools.transport.unicast import TCPSender, TCPReceiver, UDPSender, UDPReceiver
from netools.errors import TransportError, AddressError

__all__ = [
    # Contract
    "Sender",
    "Receiver",
    "InboundMessage",
    "resolve_endpoint",
    # Harness
    "install_stop_handler",
    "restore_handlers",
    "run_sender",
    "run_receiver",
    # Broadcast
    "BroadcastSender",
    "BroadcastReceiver",
    # Multicast
    "MulticastSender",
    "MulticastReceiver",
    # Unicast
    "TCPSender",
    "TCPReceiver",
    "UDPSender",
    "UDPReceiver",
    # Errors
    "TransportError",
    "AddressError",
]
