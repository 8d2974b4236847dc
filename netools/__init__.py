"""
netools - unicast, multicast and broadcast messaging from the command line.

Each delivery mode has a one-shot sender and a long-running receiver:
- Unicast over TCP or UDP
- Multicast (IPv4 groups)
- Broadcast (subnet-directed UDP)
"""

__version__ = "0.1.0"
