"""
Network analysis modules for traversing and querying river networks.

This module contains the traversal primitives, node searches and node
inventories.
"""

from .traversal import Position, get_downstream_node, get_upstream_node, iterate_computational

__all__ = ['Position', 'get_downstream_node', 'get_upstream_node', 'iterate_computational']
