"""
netools CLI - Command Line Interface for the netools transports

Main entry point for all CLI commands.
"""

import logging

import click

from netools import __version__
from netools.config import (
    DEFAULT_BROADCAST_ADDR,
    DEFAULT_BROADCAST_PORT,
    DEFAULT_MULTICAST_ADDR,
    DEFAULT_UNICAST_ADDR,
)
from netools.errors import TransportError
from netools.utils.logger import setup_logging, get_logger

logger = get_logger("cli")

PROTOCOLS = ("tcp", "udp")


def send_with(sender, addr: str, msg: str) -> None:
    """Run a one-shot sender, turning transport failures into CLI errors."""
    from netools.transport import run_sender

    try:
        run_sender(sender, addr, msg)
    except TransportError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e


def receive_with(build_receiver) -> None:
    """Construct a receiver and run it until SIGINT/SIGTERM."""
    from netools.transport import run_receiver

    try:
        receiver = build_receiver()
    except TransportError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e

    run_receiver(receiver)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-dir", default=None, help="Also write logs to this directory")
@click.version_option(version=__version__)
def cli(debug, log_dir):
    """Send and receive unicast, multicast and broadcast messages"""
    level = logging.DEBUG if debug else logging.INFO
    setup_logging(level=level, log_dir=log_dir)


# =============================================================================
# Unicast Commands
# =============================================================================


@cli.command("ucast-send")
@click.option("-a", "--addr", default=DEFAULT_UNICAST_ADDR, show_default=True, help="Server address to connect to")
@click.option("-m", "--msg", required=True, help="Message to send")
@click.option("-p", "--proto", required=True, type=click.Choice(PROTOCOLS, case_sensitive=False), help="Protocol to use")
def unicast_send(addr, msg, proto):
    """Send a unicast message"""
    from netools.transport import TCPSender, UDPSender

    sender = TCPSender() if proto.lower() == "tcp" else UDPSender()
    send_with(sender, addr, msg)


@cli.command("ucast-recv")
@click.option("-a", "--addr", default=DEFAULT_UNICAST_ADDR, show_default=True, help="Server address to bind to")
@click.option("-p", "--proto", required=True, type=click.Choice(PROTOCOLS, case_sensitive=False), help="Protocol to use")
def unicast_receive(addr, proto):
    """Receive unicast messages"""
    from netools.transport import TCPReceiver, UDPReceiver

    receiver_cls = TCPReceiver if proto.lower() == "tcp" else UDPReceiver
    receive_with(lambda: receiver_cls(addr))


# =============================================================================
# Multicast Commands
# =============================================================================


@cli.command("mcast-send")
@click.option("-a", "--addr", default=DEFAULT_MULTICAST_ADDR, show_default=True, help="Multicast group address")
@click.option("-m", "--msg", required=True, help="Message to send")
def multicast_send(addr, msg):
    """Send a multicast message"""
    from netools.transport import MulticastSender

    send_with(MulticastSender(), addr, msg)


@cli.command("mcast-recv")
@click.option("-a", "--addr", default=DEFAULT_MULTICAST_ADDR, show_default=True, help="Multicast group address")
def multicast_receive(addr):
    """Receive multicast messages"""
    from netools.transport import MulticastReceiver

    receive_with(lambda: MulticastReceiver(addr))


# =============================================================================
# Broadcast Commands
# =============================================================================


@cli.command("bcast-send")
@click.option("-a", "--addr", default=DEFAULT_BROADCAST_ADDR, show_default=True, help="Broadcast address")
@click.option("-m", "--msg", required=True, help="Message to send")
def broadcast_send(addr, msg):
    """Send a broadcast message"""
    from netools.transport import BroadcastSender

    send_with(BroadcastSender(), addr, msg)


@cli.command("bcast-recv")
@click.option("-p", "--port", default=DEFAULT_BROADCAST_PORT, show_default=True, type=click.IntRange(0, 65535), help="Port to bind to")
def broadcast_receive(port):
    """Receive broadcast messages"""
    from netools.transport import BroadcastReceiver

    receive_with(lambda: BroadcastReceiver(port))


if __name__ == "__main__":
    cli()
