"""Exceptions raised by netools transports."""


class TransportError(Exception):
    """Fatal failure while constructing a receiver or sending a message."""


class AddressError(TransportError, ValueError):
    """An endpoint address could not be parsed or resolved."""
