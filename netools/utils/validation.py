"""
Input Validation - Endpoint parsing for command line addresses.

Addresses come in as ``host:port`` strings (IPv6 as ``[addr]:port``),
or as a bare port for the broadcast receiver.
"""

import ipaddress
from typing import Any, Tuple, Union

from netools.errors import AddressError

# =============================================================================
# Constants
# =============================================================================

MIN_PORT = 0
MAX_PORT = 65535


# =============================================================================
# Validation Functions
# =============================================================================


def validate_port(port: Any) -> Tuple[bool, str]:
    """
    Validate a port number.

    Returns:
        (is_valid, error_message)
    """
    if isinstance(port, bool) or not isinstance(port, int):
        return False, f"port must be int, got {type(port).__name__}"

    if port < MIN_PORT or port > MAX_PORT:
        return False, f"port must be in {MIN_PORT}..{MAX_PORT}, got {port}"

    return True, ""


def validate_host(host: Any) -> Tuple[bool, str]:
    """Validate a host name or literal IP address (syntax only)."""
    if not isinstance(host, str):
        return False, f"host must be str, got {type(host).__name__}"

    if not host:
        return False, "host must not be empty"

    if any(ch.isspace() for ch in host) or "/" in host:
        return False, f"invalid host: {host!r}"

    return True, ""


def parse_endpoint(address: str) -> Tuple[str, int]:
    """
    Split an address string into host and port.

    Accepts ``host:port``, ``1.2.3.4:port`` and ``[::1]:port``.

    Args:
        address: Address string

    Returns:
        (host, port) tuple

    Raises:
        AddressError: If the string is not a valid endpoint
    """
    if not isinstance(address, str):
        raise AddressError(f"invalid socket address {address!r}")

    if address.startswith("["):
        end = address.find("]")
        if end == -1 or address[end + 1:end + 2] != ":":
            raise AddressError(f"invalid socket address {address!r}")
        host = address[1:end]
        port_str = address[end + 2:]
        try:
            ipaddress.IPv6Address(host)
        except ValueError as e:
            raise AddressError(f"invalid socket address {address!r}: {e}") from e
    else:
        host, sep, port_str = address.rpartition(":")
        if not sep or ":" in host:
            raise AddressError(f"invalid socket address {address!r}")

    ok, err = validate_host(host)
    if not ok:
        raise AddressError(f"invalid socket address {address!r}: {err}")

    if not (port_str.isascii() and port_str.isdigit()):
        raise AddressError(f"invalid port in socket address {address!r}")

    port = int(port_str)
    ok, err = validate_port(port)
    if not ok:
        raise AddressError(f"invalid socket address {address!r}: {err}")

    return host, port


def parse_ip(host: str) -> Union[ipaddress.IPv4Address, ipaddress.IPv6Address]:
    """
    Parse a literal IP address.

    Raises:
        AddressError: If host is not a literal IPv4/IPv6 address
    """
    try:
        return ipaddress.ip_address(host)
    except ValueError as e:
        raise AddressError(f"invalid IP address {host!r}") from e


def format_endpoint(sockaddr: tuple) -> str:
    """
    Render a socket address tuple as ``host:port``.

    IPv6 hosts are bracketed: ``[::1]:8080``.
    """
    host, port = sockaddr[0], sockaddr[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"
