"""
Network builder for river networks.

Reconstructs the live network and every derived number (reach counters,
tributary numbers, serial numbers, computational order) from a flat list of
nodes that carry only identifier-based links, as produced by file readers.
"""

import logging
import time
from typing import List, Dict

from ..classes.node import pynode, NodeType, UpstreamOrder
from ..core.network import NodeNetwork
from ..analysis.traversal import iterate_computational
from ..exceptions import MalformedNetworkError

logger = logging.getLogger(__name__)


class NetworkBuilder:
    """
    Network construction utilities.

    This class provides methods for building the live network from node
    records and for adopting or migrating node lists.
    """

    def __init__(self, network: NodeNetwork):
        """
        Initialize the builder.

        Args:
            network: The arena that receives the built nodes
        """
        self.network = network

    def calculate_network_node_data(self, aNode: List[pynode], iFlag_end_first: bool = True):
        """
        Build the network from node records and derive all node numbers.

        Args:
            aNode: Every node of the network, each with sNodeID_downstream and
                aNodeID_upstream filled in
            iFlag_end_first: True if aNode[0] is the End node, False if the
                End node is the last element

        Raises:
            MalformedNetworkError: If a record references an unknown node, the
                records disagree about a link, or a node is not connected to
                the End node
        """
        start_time = time.time()
        self.network.clear()
        if not aNode:
            logger.warning("No nodes supplied, network is empty")
            return

        aNode_ordered = list(aNode) if iFlag_end_first else list(reversed(aNode))
        node_index: Dict[str, int] = {}
        for i, pNode in enumerate(aNode_ordered):
            if pNode.sNodeID in node_index:
                raise MalformedNetworkError(f"Duplicate node identifier '{pNode.sNodeID}'")
            node_index[pNode.sNodeID] = i

        self._check_records(aNode_ordered, node_index)
        self._assign_reach_data(aNode_ordered, node_index)

        for pNode in aNode_ordered:
            self.network.register_node(pNode)
        self.network.relink_from_records(aNode_ordered)
        self.network.set_end_node(aNode_ordered[0])

        nNode = len(aNode_ordered)
        iOrder = 0
        for pNode in iterate_computational(self.network):
            pNode.iSerial = nNode - iOrder
            pNode.iComputational_order = iOrder + 1
            iOrder += 1
        self.network.set_node_count(nNode)

        duration = time.time() - start_time
        logger.info(f"Built network with {nNode} nodes in {duration:.3f} s")

    def _check_records(self, aNode: List[pynode], node_index: Dict[str, int]):
        """Validate identifier records before anything is changed."""
        pEnd = aNode[0]
        if pEnd.sNodeID_downstream:
            logger.error(f"First node '{pEnd.sNodeID}' has a downstream node")
            raise MalformedNetworkError(
                f"End node '{pEnd.sNodeID}' must not have a downstream node, found '{pEnd.sNodeID_downstream}'")

        for pNode in aNode:
            if pNode.sNodeID_downstream and pNode.sNodeID_downstream not in node_index:
                logger.error(f"Unresolved downstream identifier for node '{pNode.sNodeID}'")
                raise MalformedNetworkError(
                    f"Node '{pNode.sNodeID}' has unknown downstream node '{pNode.sNodeID_downstream}'")
            for sUp in pNode.aNodeID_upstream:
                if sUp not in node_index:
                    logger.error(f"Unresolved upstream identifier for node '{pNode.sNodeID}'")
                    raise MalformedNetworkError(
                        f"Node '{pNode.sNodeID}' has unknown upstream node '{sUp}'")
                pUp = aNode[node_index[sUp]]
                if not pUp.sNodeID_downstream:
                    pUp.sNodeID_downstream = pNode.sNodeID
                elif pUp.sNodeID_downstream != pNode.sNodeID:
                    raise MalformedNetworkError(
                        f"Node '{sUp}' is upstream of '{pNode.sNodeID}' but flows to '{pUp.sNodeID_downstream}'")

    def _assign_reach_data(self, aNode: List[pynode], node_index: Dict[str, int]):
        """
        Walk upstream from the End node assigning reach and tributary numbers.

        The branch on the main-stem side of each node continues the reach;
        every other branch opens a new reach. Branches are processed depth
        first in list order, so reach counters are numbered in that order.
        """
        pEnd = aNode[0]
        pEnd.iNode_in_reach = 1
        pEnd.iReach_counter = 1
        pEnd.iReach_level = 1
        pEnd.iTributary_number = 1
        iHighest_reach = 1

        aVisited = {0}
        # Entries are (parent index, branch position); pushed in reverse so
        # that branch 0 is processed first
        aStack = [(0, i) for i in reversed(range(len(pEnd.aNodeID_upstream)))]
        while aStack:
            iParent, iBranch = aStack.pop()
            pParent = aNode[iParent]
            iChild = node_index[pParent.aNodeID_upstream[iBranch]]
            if iChild in aVisited:
                raise MalformedNetworkError(f"Node '{aNode[iChild].sNodeID}' is reached twice, network has a cycle")
            aVisited.add(iChild)
            pChild = aNode[iChild]

            nBranch = len(pParent.aNodeID_upstream)
            if pParent.iUpstream_order == UpstreamOrder.TRIBS_ADDED_LAST:
                iMain = 0
            else:
                iMain = nBranch - 1
            if iBranch == iMain:
                pChild.iNode_in_reach = pParent.iNode_in_reach + 1
                pChild.iReach_counter = pParent.iReach_counter
                pChild.iReach_level = pParent.iReach_level
            else:
                iHighest_reach += 1
                pChild.iNode_in_reach = 1
                pChild.iReach_counter = iHighest_reach
                pChild.iReach_level = pParent.iReach_level + 1
            pChild.iTributary_number = iBranch + 1

            for i in reversed(range(len(pChild.aNodeID_upstream))):
                aStack.append((iChild, i))

        if len(aVisited) != len(aNode):
            aOrphan = [pNode.sNodeID for i, pNode in enumerate(aNode) if i not in aVisited]
            logger.error(f"{len(aOrphan)} nodes are not connected to the End node")
            raise MalformedNetworkError(f"Nodes not connected to the End node: {', '.join(aOrphan)}")

        logger.debug(f"Assigned {iHighest_reach} reaches")

    def set_network_from_nodes(self, aNode: List[pynode]):
        """
        Adopt nodes whose numbers are already valid.

        Links are rebuilt from the identifier records; derived numbers are
        kept as they are. The head is the node with no downstream node, or
        the first END node.
        """
        self.network.clear()
        for pNode in aNode:
            self.network.register_node(pNode)
        self.network.relink_from_records(aNode)

        pHead = None
        for pNode in aNode:
            if pNode.lHandle_downstream is None or pNode.iType == NodeType.END:
                pHead = pNode
                break
        self.network.set_end_node(pHead)
        self.network.set_node_count(len(aNode))
        if pHead is None:
            logger.warning("No End node found among adopted nodes")

    @staticmethod
    def convert_node_types(aNode: List[pynode]) -> int:
        """
        Migrate legacy node types.

        BASEFLOW nodes become OTHER nodes flagged as natural flow and IMPORT
        nodes become OTHER nodes flagged as imports.

        Returns:
            int: Number of nodes converted
        """
        nConverted = 0
        for pNode in aNode:
            if pNode.iType == NodeType.BASEFLOW:
                pNode.iType = int(NodeType.OTHER)
                pNode.iFlag_natural_flow = True
                nConverted += 1
            elif pNode.iType == NodeType.IMPORT:
                pNode.iType = int(NodeType.OTHER)
                pNode.iFlag_import = True
                nConverted += 1
        if nConverted:
            logger.info(f"Converted {nConverted} legacy node types")
        return nConverted
