"""
Core network data structures and management.

This module contains the node arena and the facade class that ties the
analysis and operation modules together.
"""

from .network import NodeNetwork

__all__ = ['NodeNetwork']
