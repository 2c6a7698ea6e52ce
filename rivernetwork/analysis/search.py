"""
Node search and query operations for river networks.

This module answers lookup questions used by readers, writers and
diagram code: finding nodes by identifier or type, listing nodes in
computational order, and finding the nearest node of a given kind above or
below a starting node. Lookups that fail return None or an empty list.
"""

import logging
from typing import List, Optional, Protocol, Set
from collections import deque

from ..classes.node import pynode, NodeType
from ..core.network import NodeNetwork
from .traversal import Position, get_downstream_node, get_upstream_node, iterate_computational

logger = logging.getLogger(__name__)


class UpstreamFlowNodeTarget(Protocol):
    """Decides whether a node stops an upstream flow node search."""

    def is_setprf_target(self, sNodeID: str) -> int:
        ...


class NetworkSearch:
    """
    Query methods for river networks.

    This class provides methods for:
    - Locating the End node and the most upstream node
    - Finding nodes by identifier or type
    - Listing node sequences between two nodes
    - Finding nearby natural flow, stream gage and real nodes
    - Collecting nodes upstream of a node
    """

    def __init__(self, network: NodeNetwork):
        """
        Initialize the search helper.

        Args:
            network: NodeNetwork instance to query
        """
        self.network = network

    # ------------------------------------------------------------------
    # Whole-network queries
    # ------------------------------------------------------------------

    def get_end_node(self) -> Optional[pynode]:
        pEnd = self.network.get_end_node()
        if pEnd is None:
            return None
        return get_downstream_node(self.network, pEnd, Position.ABSOLUTE)

    def get_most_upstream_node(self) -> Optional[pynode]:
        """The ABSOLUTE-upstream end of the main stem, first in computational order."""
        pEnd = self.get_end_node()
        if pEnd is None:
            return None
        return get_upstream_node(self.network, pEnd, Position.ABSOLUTE)

    def get_node_list(self) -> List[pynode]:
        """All nodes in computational order, End last."""
        return list(iterate_computational(self.network))

    def size(self) -> int:
        """Number of nodes, not counting the End node."""
        return sum(1 for pNode in iterate_computational(self.network) if pNode.lHandle_downstream is not None)

    def find_node(self, sNodeID: str) -> Optional[pynode]:
        """
        Find a node by identifier, ignoring case.

        Args:
            sNodeID: Node identifier

        Returns:
            The node, or None if no node has that identifier
        """
        if not sNodeID:
            return None
        for pNode in iterate_computational(self.network):
            if pNode.matches_id(sNodeID):
                return pNode
        logger.debug(f"No node with identifier '{sNodeID}'")
        return None

    def get_nodes_for_type(self, iType: int) -> List[pynode]:
        """
        Nodes of one type in computational order.

        Args:
            iType: NodeType value, or -1 for every physical type (stream gages,
                diversions, diversion and wells, reservoirs, instream flows,
                wells, other and plan nodes)

        Returns:
            List of matching nodes. The End node is only included when iType
            is END.
        """
        aNode = []
        for pNode in iterate_computational(self.network):
            if iType == -1:
                if pNode.is_physical():
                    aNode.append(pNode)
            elif pNode.iType == iType:
                aNode.append(pNode)
        return aNode

    def get_natural_flow_nodes(self) -> List[pynode]:
        """Nodes flagged as natural flow (baseflow) nodes."""
        return [pNode for pNode in iterate_computational(self.network) if pNode.iFlag_natural_flow]

    def get_node_sequence(self, pNode1: Optional[pynode], pNode2: Optional[pynode]) -> List[pynode]:
        """
        The inclusive run of nodes connecting two nodes.

        If one node is downstream of the other the run follows the stream
        from the upper node down to the lower one. Otherwise the run goes
        down from pNode1 to the confluence where the two paths meet and back
        up to pNode2.

        Returns:
            List of nodes, empty if either node is missing or the nodes are
            not connected
        """
        if pNode1 is None or pNode2 is None:
            return []

        aPath = self._path_to(pNode1, pNode2)
        if aPath:
            return aPath
        aPath = self._path_to(pNode2, pNode1)
        if aPath:
            return aPath

        aDown1 = self._path_to(pNode1, None)
        aDown2 = self._path_to(pNode2, None)
        aMember2 = {pNode.lHandle: i for i, pNode in enumerate(aDown2)}
        for i, pNode in enumerate(aDown1):
            if pNode.lHandle in aMember2:
                j = aMember2[pNode.lHandle]
                return aDown1[:i + 1] + list(reversed(aDown2[:j]))
        return []

    def _path_to(self, pStart: pynode, pTarget: Optional[pynode]) -> List[pynode]:
        """Nodes from pStart downstream to pTarget inclusive, or to the End node if pTarget is None."""
        aPath = [pStart]
        aSeen = {pStart.lHandle}
        pCurrent = pStart
        while pCurrent is not pTarget:
            pNext = get_downstream_node(self.network, pCurrent, Position.RELATIVE)
            if pNext is pCurrent or pNext.lHandle in aSeen:
                return aPath if pTarget is None else []
            aSeen.add(pNext.lHandle)
            aPath.append(pNext)
            pCurrent = pNext
        return aPath

    # ------------------------------------------------------------------
    # Nearest-node queries
    # ------------------------------------------------------------------

    def _is_natural_flow(self, pNode: pynode) -> bool:
        if pNode.iFlag_natural_flow:
            return True
        return self.network.iFlag_treat_dry_as_natural_flow and pNode.iFlag_dry_river

    def find_downstream_natural_flow_node_in_reach(self, pNode: pynode) -> Optional[pynode]:
        """
        Nearest natural flow node below pNode in the same reach.

        Dry-river nodes also match when the network treats dry rivers as
        natural flow.
        """
        aSeen = {pNode.lHandle}
        pCurrent = get_downstream_node(self.network, pNode, Position.REACH_NEXT)
        while pCurrent is not None and pCurrent.lHandle not in aSeen:
            if self._is_natural_flow(pCurrent):
                return pCurrent
            aSeen.add(pCurrent.lHandle)
            pCurrent = get_downstream_node(self.network, pCurrent, Position.REACH_NEXT)
        return None

    def find_upstream_natural_flow_node_in_reach(self, pNode: pynode) -> Optional[pynode]:
        """Nearest natural flow node above pNode in the same reach."""
        aSeen = {pNode.lHandle}
        pCurrent = get_upstream_node(self.network, pNode, Position.REACH_NEXT)
        while pCurrent is not None and pCurrent.lHandle not in aSeen:
            if self._is_natural_flow(pCurrent):
                return pCurrent
            aSeen.add(pCurrent.lHandle)
            pCurrent = get_upstream_node(self.network, pCurrent, Position.REACH_NEXT)
        return None

    def _find_downstream(self, pNode: pynode, fMatch) -> Optional[pynode]:
        """First node strictly below pNode for which fMatch is true."""
        aSeen = {pNode.lHandle}
        pCurrent = pNode
        while True:
            pNext = get_downstream_node(self.network, pCurrent, Position.RELATIVE)
            if pNext is pCurrent or pNext.lHandle in aSeen:
                return None
            if fMatch(pNext):
                return pNext
            aSeen.add(pNext.lHandle)
            pCurrent = pNext

    def find_downstream_flow_node(self, pNode: pynode) -> Optional[pynode]:
        """Nearest stream gage below pNode that is also a natural flow node."""
        return self._find_downstream(
            pNode, lambda p: p.iType == NodeType.FLOW and p.iFlag_natural_flow)

    def find_next_real_downstream_node(self, pNode: pynode) -> Optional[pynode]:
        """Nearest node below pNode that is not a blank, confluence, stream, label or formula node."""
        return self._find_downstream(pNode, lambda p: p.is_real())

    def find_next_real_or_xconfluence_downstream_node(self, pNode: pynode) -> Optional[pynode]:
        return self._find_downstream(
            pNode, lambda p: p.is_real() or p.iType == NodeType.XCONFLUENCE)

    def find_next_xconfluence_downstream_node(self, pNode: pynode) -> Optional[pynode]:
        return self._find_downstream(pNode, lambda p: p.iType == NodeType.XCONFLUENCE)

    def is_most_upstream_node_in_reach(self, pNode: pynode) -> bool:
        return get_upstream_node(self.network, pNode, Position.REACH_NEXT) is None

    # ------------------------------------------------------------------
    # Upstream collection
    # ------------------------------------------------------------------

    def find_upstream_nodes(self, pNode: pynode, iFlag_add_first_node: bool = True,
                            aStop_id: Optional[List[str]] = None) -> List[pynode]:
        """
        Collect pNode and every node above it, depth first.

        Args:
            pNode: Starting node
            iFlag_add_first_node: Include pNode itself in the result
            aStop_id: Identifiers where the search does not continue upstream.
                A stop node is included in the result unless its identifier
                is given with a leading '-'.

        Returns:
            List of nodes, each listed before the nodes above it
        """
        aStop_include: Set[str] = set()
        aStop_exclude: Set[str] = set()
        for sStop in aStop_id or []:
            if sStop.startswith('-'):
                aStop_exclude.add(sStop[1:].upper())
            else:
                aStop_include.add(sStop.upper())

        aFound = []
        if iFlag_add_first_node:
            aFound.append(pNode)
        aStack = list(reversed(self.network.get_upstream_nodes(pNode)))
        aSeen = {pNode.lHandle}
        while aStack:
            pCurrent = aStack.pop()
            if pCurrent.lHandle in aSeen:
                continue
            aSeen.add(pCurrent.lHandle)
            sKey = pCurrent.sNodeID.upper()
            if sKey in aStop_exclude:
                continue
            aFound.append(pCurrent)
            if sKey in aStop_include:
                continue
            aStack.extend(reversed(self.network.get_upstream_nodes(pCurrent)))
        return aFound

    def find_upstream_flow_nodes(self, pNode: pynode,
                                 pTarget: Optional[UpstreamFlowNodeTarget] = None) -> List[pynode]:
        """
        Nearest stream gages on every branch above pNode.

        The search along a branch stops at the first stream gage, or at the
        first node that pTarget reports as a target, and that node is
        returned.

        Args:
            pNode: Starting node, not itself included
            pTarget: Optional object answering is_setprf_target(node_id)

        Returns:
            List of nodes in breadth-first order
        """
        aFound = []
        queue = deque(self.network.get_upstream_nodes(pNode))
        aSeen = {pNode.lHandle}
        while queue:
            pCurrent = queue.popleft()
            if pCurrent.lHandle in aSeen:
                continue
            aSeen.add(pCurrent.lHandle)
            bStop = pCurrent.iType == NodeType.FLOW
            if not bStop and pTarget is not None:
                bStop = pTarget.is_setprf_target(pCurrent.sNodeID) != 0
            if bStop:
                aFound.append(pCurrent)
            else:
                queue.extend(self.network.get_upstream_nodes(pCurrent))
        return aFound
