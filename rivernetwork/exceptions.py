"""
Exception types raised by rivernetwork.

Lookups never raise; they return None or an empty list. These exceptions are
reserved for inputs that would leave the network inconsistent.
"""


class RiverNetworkError(Exception):
    """Base class for all rivernetwork errors."""


class MalformedNetworkError(RiverNetworkError, ValueError):
    """Raised when node records reference identifiers that do not exist."""


class NodeNotFoundError(RiverNetworkError, KeyError):
    """Raised when an edit requires a node that is not in the network."""

    def __str__(self):
        return str(self.args[0]) if self.args else ''
