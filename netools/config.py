"""
Transport configuration parameters for netools.

Defines receive buffer size, polling intervals and the default
endpoints used by the command line.
"""

from dataclasses import dataclass, replace


# Default endpoints for the CLI
DEFAULT_UNICAST_ADDR = "127.0.0.1:8080"
DEFAULT_MULTICAST_ADDR = "224.0.0.1:8080"
DEFAULT_BROADCAST_ADDR = "255.255.255.255:8080"
DEFAULT_BROADCAST_PORT = 8080


@dataclass(frozen=True)
class TransportConfig:
    """Per-receiver/sender tuning parameters"""

    # Receive side
    buffer_size: int = 1024  # Max bytes read per datagram or connection
    receive_timeout: float = 0.1  # Datagram recv timeout in seconds
    accept_backoff: float = 0.1  # Sleep between non-blocking accept attempts

    # TCP
    listen_backlog: int = 128

    # Multicast
    multicast_ttl: int = 1  # Keep group traffic on the local subnet

    def __post_init__(self):
        """Reject values the receive loops cannot work with"""
        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")
        if self.receive_timeout <= 0:
            raise ValueError(f"receive_timeout must be positive, got {self.receive_timeout}")
        if self.accept_backoff <= 0:
            raise ValueError(f"accept_backoff must be positive, got {self.accept_backoff}")
        if self.listen_backlog < 0:
            raise ValueError(f"listen_backlog must not be negative, got {self.listen_backlog}")
        if not 0 <= self.multicast_ttl <= 255:
            raise ValueError(f"multicast_ttl must be in 0..255, got {self.multicast_ttl}")


# Global config instance; transports built without a config start from it
config = TransportConfig()


def load_config(**overrides) -> TransportConfig:
    """
    Build a configuration from the defaults.

    Args:
        **overrides: Field values replacing the defaults

    Returns:
        TransportConfig instance

    Raises:
        TypeError: Unknown field name
        ValueError: Invalid field value
    """
    return replace(config, **overrides)
