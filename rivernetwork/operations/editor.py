"""
Structural edits for river networks.

This module provides operations that add nodes to or remove nodes from a
built network while keeping serial numbers, computational order, tributary
numbers and reach numbering consistent.
"""

import logging
from typing import List, Optional

import numpy as np

from ..classes.node import pynode, NodeType, UpstreamOrder
from ..core.network import NodeNetwork
from ..analysis.traversal import Position, get_downstream_node, iterate_computational
from ..exceptions import NodeNotFoundError
from .locations import place_new_node

logger = logging.getLogger(__name__)


class NetworkEditor:
    """
    Handles structural network modifications.

    This class provides methods for:
    - Adding a node as a new branch or spliced into an existing branch
    - Deleting a node and re-parenting its upstream branches
    - Making node identifiers unique
    """

    def __init__(self, network: NodeNetwork, dNew_node_offset: float = 0.001):
        """
        Initialize the network editor.

        Args:
            network: NodeNetwork to modify
            dNew_node_offset: Coordinate offset for a node added directly above
                the End node
        """
        self.network = network
        self.dNew_node_offset = dNew_node_offset

    def check_unique_id(self, sNodeID: str) -> str:
        """
        Return an identifier that no node in the network uses.

        If sNodeID is taken, the suffixes _1, _2, ... are tried in turn.
        Comparison ignores case.
        """
        aNode = list(iterate_computational(self.network))
        aID = {pNode.sNodeID.upper() for pNode in aNode}
        if sNodeID.upper() not in aID:
            return sNodeID

        iCount = 1
        while f"{sNodeID.upper()}_{iCount}" in aID:
            iCount += 1
        sUnique = f"{sNodeID}_{iCount}"
        logger.info(f"Node identifier '{sNodeID}' is in use, using '{sUnique}'")
        return sUnique

    def add_node(self, sNodeID: str, iType: int, sNodeID_upstream: Optional[str],
                 sNodeID_downstream: str, iFlag_natural_flow: bool = False,
                 iFlag_import: bool = False) -> pynode:
        """
        Add a node to the network.

        If sNodeID_upstream names a current upstream branch of the downstream
        node, the new node is spliced in between the two. Otherwise the new
        node becomes a new branch of the downstream node.

        Args:
            sNodeID: Requested identifier; made unique if already taken
            iType: NodeType of the new node
            sNodeID_upstream: Optional node to place the new node below
            sNodeID_downstream: Node to place the new node above
            iFlag_natural_flow: Natural flow flag of the new node
            iFlag_import: Import flag of the new node

        Returns:
            pynode: The new node

        Raises:
            NodeNotFoundError: If sNodeID_downstream is not in the network
        """
        aNode = list(iterate_computational(self.network))
        pDown = self._find_in(aNode, sNodeID_downstream)
        if pDown is None:
            raise NodeNotFoundError(f"Downstream node '{sNodeID_downstream}' not found")
        pUp = self._find_in(aNode, sNodeID_upstream) if sNodeID_upstream else None

        sNodeID = self.check_unique_id(sNodeID)
        pNew = pynode(sNodeID, iType, iFlag_natural_flow, iFlag_import)
        pNew.iUpstream_order = pDown.iUpstream_order
        self.network.register_node(pNew)

        nBranch_before = len(pDown.aHandle_upstream)
        iSlot = -1 if pUp is None else self.network.get_upstream_index(pDown, pUp)
        if pUp is not None and iSlot < 0:
            logger.debug(f"'{pUp.sNodeID}' is not directly upstream of '{pDown.sNodeID}', adding a new branch")
            pUp = None

        if pUp is not None:
            self.network.replace_upstream(pDown, iSlot, pNew)
            self.network.link_upstream(pNew, pUp)
            pNew.iTributary_number = iSlot + 1
            pUp.iTributary_number = 1
        else:
            self.network.link_upstream(pDown, pNew)
            pNew.iTributary_number = nBranch_before + 1

        # Open a slot in the linear order directly before the node that will
        # follow the new node
        pNext = get_downstream_node(self.network, pNew, Position.COMPUTATIONAL)
        iOrder = pNext.iComputational_order
        iSerial_threshold = pNext.iSerial
        for pNode in aNode:
            if pNode.iComputational_order >= iOrder:
                pNode.iComputational_order += 1
            if pNode.iSerial > iSerial_threshold:
                pNode.iSerial += 1
        pNew.iComputational_order = iOrder
        pNew.iSerial = iSerial_threshold + 1

        if pUp is not None:
            iReach = pUp.iReach_counter
            iPosition = pUp.iNode_in_reach
            for pNode in aNode:
                if pNode.iReach_counter == iReach and pNode.iNode_in_reach >= iPosition:
                    pNode.iNode_in_reach += 1
            pNew.iReach_counter = iReach
            pNew.iNode_in_reach = iPosition
            pNew.iReach_level = pUp.iReach_level
        elif nBranch_before == 0:
            pNew.iReach_counter = pDown.iReach_counter
            pNew.iNode_in_reach = pDown.iNode_in_reach + 1
            pNew.iReach_level = pDown.iReach_level
        else:
            pNew.iReach_counter = max(pNode.iReach_counter for pNode in aNode) + 1
            pNew.iNode_in_reach = 1
            pNew.iReach_level = pDown.iReach_level + 1

        place_new_node(self.network, pNew, pUp, pDown, self.dNew_node_offset)
        self.network.store_link_records([pDown, pNew] if pUp is None else [pDown, pNew, pUp])
        self.network.set_node_count(len(aNode) + 1)

        logger.info(f"Added node '{pNew.sNodeID}' upstream of '{pDown.sNodeID}'")
        logger.debug(self.network.describe_node(pNew))
        return pNew

    def delete_node(self, sNodeID: str) -> bool:
        """
        Delete a node, connecting its upstream branches to its downstream node.

        The upstream branches take the place the deleted node held in the
        downstream node's branch list. Deleting the End node does nothing.

        Args:
            sNodeID: Identifier of the node to delete

        Returns:
            bool: True if a node was deleted
        """
        aNode = list(iterate_computational(self.network))
        pTarget = self._find_in(aNode, sNodeID)
        if pTarget is None:
            logger.warning(f"Cannot delete '{sNodeID}', node not found")
            return False
        pDown = self.network.get_downstream(pTarget)
        if pDown is None or pTarget.iType == NodeType.END:
            logger.debug(f"Ignoring request to delete End node '{pTarget.sNodeID}'")
            return False

        aUp = self.network.get_upstream_nodes(pTarget)
        iOrder = pTarget.iComputational_order
        iSerial = pTarget.iSerial
        iReach = pTarget.iReach_counter
        iPosition = pTarget.iNode_in_reach

        aNode = [pNode for pNode in aNode if pNode is not pTarget]
        self.network.store_link_records(aNode + [pTarget])

        # New sibling set under the downstream node, ranked by serial
        aSibling = aUp + [pNode for pNode in self.network.get_upstream_nodes(pDown) if pNode is not pTarget]
        aIndex_order = np.argsort([pNode.iSerial for pNode in aSibling], kind='stable')
        if pDown.iUpstream_order == UpstreamOrder.TRIBS_ADDED_LAST:
            aIndex_order = aIndex_order[::-1]
        for iRank, k in enumerate(aIndex_order):
            aSibling[k].iTributary_number = iRank + 1

        for pNode in aNode:
            if pNode.iComputational_order > iOrder:
                pNode.iComputational_order -= 1
            if pNode.iSerial > iSerial:
                pNode.iSerial -= 1
            if pNode.iReach_counter == iReach and pNode.iNode_in_reach > iPosition:
                pNode.iNode_in_reach -= 1

        # Rewire the identifier records, then rebuild live links from them
        for pUp in aUp:
            pUp.sNodeID_downstream = pDown.sNodeID
        iSlot = pDown.aNodeID_upstream.index(pTarget.sNodeID)
        pDown.aNodeID_upstream[iSlot:iSlot + 1] = [pUp.sNodeID for pUp in aUp]

        self.network.detach(pTarget)
        self.network.relink_from_records(aNode)
        self.network.release_node(pTarget)
        self.network.set_node_count(len(aNode))

        logger.info(f"Deleted node '{pTarget.sNodeID}'")
        return True

    @staticmethod
    def _find_in(aNode: List[pynode], sNodeID: str) -> Optional[pynode]:
        for pNode in aNode:
            if pNode.matches_id(sNodeID):
                return pNode
        return None
