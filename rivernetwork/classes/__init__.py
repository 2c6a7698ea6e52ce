"""
Core data classes for river network representation.

This module contains the fundamental data structures used throughout
the rivernetwork library.
"""

from .node import pynode, NodeType, UpstreamOrder
from .label import pylabel

__all__ = [
    'pynode',
    'NodeType',
    'UpstreamOrder',
    'pylabel',
]
