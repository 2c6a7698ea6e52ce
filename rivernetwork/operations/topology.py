"""
Topology maintenance for river networks.

This module provides operations that re-derive or verify the numbering of
a built network.
"""

import logging
from typing import List, Optional
from collections import deque

from ..classes.node import pynode, NodeType
from ..core.network import NodeNetwork
from ..analysis.traversal import Position, get_downstream_node, iterate_computational

logger = logging.getLogger(__name__)


class TopologyManager:
    """
    Manages network numbering.

    This class provides methods for:
    - Resetting computational order
    - Checking that the network ends in an End node
    - Verifying serial, order, tributary and reach numbering
    """

    def __init__(self, network: NodeNetwork):
        """
        Initialize the topology manager.

        Args:
            network: NodeNetwork instance to manage
        """
        self.network = network

    def reset_computational_order(self) -> int:
        """
        Renumber computational order 1..N along a fresh computational walk.

        Serial numbers and reach data are left alone.

        Returns:
            int: Number of nodes visited
        """
        nNode = 0
        for pNode in iterate_computational(self.network):
            nNode += 1
            pNode.iComputational_order = nNode
        self.network.set_node_count(nNode)
        logger.debug(f"Reset computational order for {nNode} nodes")
        return nNode

    def check_network(self) -> List[str]:
        """
        Check that the bottom of the network is an End node.

        Returns:
            List of problem descriptions, empty if the check passes
        """
        aProblem = []
        pEnd = self.network.get_end_node()
        if pEnd is None:
            aProblem.append("Network has no End node")
            return aProblem
        pBottom = get_downstream_node(self.network, pEnd, Position.ABSOLUTE)
        if pBottom.iType != NodeType.END:
            aProblem.append(f"Most downstream node '{pBottom.sNodeID}' is not an End node")
        for sProblem in aProblem:
            logger.warning(sProblem)
        return aProblem

    def get_highest_reach_counter(self) -> int:
        return max((pNode.iReach_counter for pNode in iterate_computational(self.network)), default=0)

    def find_highest_upstream_serial(self, pNode: pynode) -> int:
        """Highest serial number of pNode and every node upstream of it."""
        iHighest = pNode.iSerial
        queue = deque([pNode])
        while queue:
            pCurrent = queue.popleft()
            for pUp in self.network.get_upstream_nodes(pCurrent):
                iHighest = max(iHighest, pUp.iSerial)
                queue.append(pUp)
        return iHighest

    def validate_invariants(self) -> List[str]:
        """
        Verify links and numbering across the whole network.

        Checks that exactly one node has no downstream node, that back-links
        match upstream lists, that serial numbers and computational order are
        each a permutation of 1..N running in opposite directions, that
        tributary numbers match list positions, and that reach positions step
        by one along each reach.

        Returns:
            List of problem descriptions, empty if the network is consistent
        """
        aProblem = []
        aNode = self.network.get_registered_nodes()
        nNode = len(aNode)
        if nNode == 0:
            return aProblem

        aHead = [pNode for pNode in aNode if pNode.lHandle_downstream is None]
        if len(aHead) != 1:
            aProblem.append(f"Expected one node without a downstream node, found {len(aHead)}")
        elif aHead[0] is not self.network.get_end_node():
            aProblem.append(f"Head record does not match node '{aHead[0].sNodeID}'")

        for pNode in aNode:
            for i, pUp in enumerate(self.network.get_upstream_nodes(pNode)):
                if pUp.lHandle_downstream != pNode.lHandle:
                    aProblem.append(f"'{pUp.sNodeID}' is upstream of '{pNode.sNodeID}' but links elsewhere")
                if pUp.iTributary_number != i + 1:
                    aProblem.append(
                        f"'{pUp.sNodeID}' has tributary number {pUp.iTributary_number}, expected {i + 1}")

            pDown = self.network.get_downstream(pNode)
            if pDown is None:
                continue
            if pDown.iReach_counter == pNode.iReach_counter:
                if pNode.iNode_in_reach != pDown.iNode_in_reach + 1:
                    aProblem.append(f"'{pNode.sNodeID}' breaks the position sequence of reach {pNode.iReach_counter}")
            elif pNode.iNode_in_reach != 1:
                aProblem.append(f"'{pNode.sNodeID}' starts reach {pNode.iReach_counter} but is not position 1")

        aExpected = list(range(1, nNode + 1))
        if sorted(pNode.iComputational_order for pNode in aNode) != aExpected:
            aProblem.append("Computational order is not a permutation of 1..N")
        if sorted(pNode.iSerial for pNode in aNode) != aExpected:
            aProblem.append("Serial numbers are not a permutation of 1..N")

        aWalk = list(iterate_computational(self.network))
        if len(aWalk) != nNode:
            aProblem.append(f"Computational walk visits {len(aWalk)} of {nNode} nodes")
        for i, pNode in enumerate(aWalk):
            if pNode.iComputational_order != i + 1 or pNode.iSerial != nNode - i:
                aProblem.append(f"'{pNode.sNodeID}' is out of computational sequence")

        pEnd: Optional[pynode] = self.network.get_end_node()
        if pEnd is not None and pEnd.iSerial != 1:
            aProblem.append(f"End node has serial {pEnd.iSerial}, expected 1")

        return aProblem
