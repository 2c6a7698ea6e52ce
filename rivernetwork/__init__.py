"""
RiverNetwork - River Basin Node Network Library

A Python library for modeling a river basin as a tree of nodes (diversions,
stream gages, reservoirs, confluences, wells and an End node) and for
traversing, editing and rebuilding that tree while keeping serial numbers,
computational order, tributary numbers and reach numbering consistent.

Main Classes:
    pyrivernetwork: Main class for a river network (facade)
    pynode: Node representation in the network
    pylabel: Free-floating diagram label
    NodeType: Node type codes
    Position: Traversal positioning modes

Example:
    >>> from rivernetwork import pyrivernetwork, NodeType
    >>> network = pyrivernetwork(aNode, iFlag_end_first=True)
    >>> network.add_node('C', NodeType.DIV, None, 'A')
    >>> [pNode.sNodeID for pNode in network.get_node_list()]
"""

__version__ = "0.1.0"
__author__ = "Chang Liao"

# Import main classes for convenient access
from rivernetwork.classes.node import pynode, NodeType, UpstreamOrder, lookup_type
from rivernetwork.classes.label import pylabel
from rivernetwork.analysis.traversal import Position
from rivernetwork.config import NetworkConfig
from rivernetwork.exceptions import RiverNetworkError, MalformedNetworkError, NodeNotFoundError
from rivernetwork.core.rivernetwork import pyrivernetwork

__all__ = [
    'pyrivernetwork',
    'pynode',
    'pylabel',
    'NodeType',
    'UpstreamOrder',
    'Position',
    'NetworkConfig',
    'lookup_type',
    'RiverNetworkError',
    'MalformedNetworkError',
    'NodeNotFoundError',
]
