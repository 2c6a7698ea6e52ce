"""
Core node arena for river network representation.

This module provides the fundamental network storage without high-level
operations. Nodes are held in an arena keyed by integer handles and every
link between nodes is a handle value, so all link changes go through the
methods defined here.
"""

import logging
from typing import List, Dict, Optional

from ..classes.node import pynode, get_type_abbreviation
from ..classes.label import pylabel
from ..exceptions import MalformedNetworkError

logger = logging.getLogger(__name__)


class NodeNetwork:
    """
    Core arena for river networks.

    This class manages the fundamental network representation. It provides:
    - Node handle management
    - Upstream and downstream link maintenance
    - The head (End) node record
    - Basic queries (lookup by handle, neighbours, node count cache)
    """

    def __init__(self):
        """Initialize an empty network."""
        self.id_to_node: Dict[int, pynode] = {}
        self.lHandle_end: Optional[int] = None
        self._lHandle_next = 0

        # Best-effort count; the authoritative count comes from a traversal
        self.nNode = 0

        self.iFlag_treat_dry_as_natural_flow = False
        self.aLabel: List[pylabel] = []

        logger.debug("Initializing NodeNetwork")

    # ------------------------------------------------------------------
    # Arena management
    # ------------------------------------------------------------------

    def register_node(self, pNode: pynode) -> int:
        """
        Add a node to the arena and assign it a handle.

        Args:
            pNode: Node that is not yet part of any network

        Returns:
            int: The handle assigned to the node
        """
        pNode.lHandle = self._lHandle_next
        pNode.lHandle_downstream = None
        pNode.aHandle_upstream = []
        self.id_to_node[pNode.lHandle] = pNode
        self._lHandle_next += 1
        return pNode.lHandle

    def release_node(self, pNode: pynode):
        """Remove a node from the arena. The node must already be unlinked."""
        self.id_to_node.pop(pNode.lHandle, None)
        if self.lHandle_end == pNode.lHandle:
            self.lHandle_end = None
        pNode.lHandle = -1
        pNode.lHandle_downstream = None
        pNode.aHandle_upstream = []

    def clear(self):
        """Drop all nodes and labels."""
        for pNode in self.id_to_node.values():
            pNode.lHandle = -1
            pNode.lHandle_downstream = None
            pNode.aHandle_upstream = []
        self.id_to_node.clear()
        self.lHandle_end = None
        self.nNode = 0
        self.aLabel.clear()

    def get_node_by_handle(self, lHandle: Optional[int]) -> Optional[pynode]:
        """
        Get a node by its handle.

        Args:
            lHandle: Arena handle, may be None

        Returns:
            The node object, or None if not found
        """
        if lHandle is None:
            return None
        return self.id_to_node.get(lHandle)

    def get_registered_nodes(self) -> List[pynode]:
        """All nodes in the arena in registration order (not traversal order)."""
        return list(self.id_to_node.values())

    def contains(self, pNode: Optional[pynode]) -> bool:
        return pNode is not None and self.id_to_node.get(pNode.lHandle) is pNode

    # ------------------------------------------------------------------
    # Head node and count cache
    # ------------------------------------------------------------------

    def get_end_node(self) -> Optional[pynode]:
        """The head of the network, the node with no downstream neighbour."""
        return self.get_node_by_handle(self.lHandle_end)

    def set_end_node(self, pNode: Optional[pynode]):
        self.lHandle_end = None if pNode is None else pNode.lHandle

    def get_node_count(self) -> int:
        return self.nNode

    def set_node_count(self, nNode: int):
        self.nNode = nNode

    # ------------------------------------------------------------------
    # Neighbours
    # ------------------------------------------------------------------

    def get_downstream(self, pNode: pynode) -> Optional[pynode]:
        return self.get_node_by_handle(pNode.lHandle_downstream)

    def get_upstream_nodes(self, pNode: pynode) -> List[pynode]:
        """Upstream neighbours in list order."""
        return [self.id_to_node[lHandle] for lHandle in pNode.aHandle_upstream]

    def get_upstream(self, pNode: pynode, iIndex: int) -> pynode:
        return self.id_to_node[pNode.aHandle_upstream[iIndex]]

    def get_upstream_index(self, pDown: pynode, pUp: pynode) -> int:
        """Position of pUp in the upstream list of pDown, -1 if it is not there."""
        try:
            return pDown.aHandle_upstream.index(pUp.lHandle)
        except ValueError:
            return -1

    # ------------------------------------------------------------------
    # Link mutation
    # ------------------------------------------------------------------

    def link_upstream(self, pDown: pynode, pUp: pynode):
        """Append pUp as the newest upstream branch of pDown and set its back-link."""
        pDown.aHandle_upstream.append(pUp.lHandle)
        pUp.lHandle_downstream = pDown.lHandle

    def insert_upstream(self, pDown: pynode, iIndex: int, pUp: pynode):
        pDown.aHandle_upstream.insert(iIndex, pUp.lHandle)
        pUp.lHandle_downstream = pDown.lHandle

    def replace_upstream(self, pDown: pynode, iIndex: int, pUp: pynode) -> pynode:
        """
        Replace the upstream branch at a position.

        Returns:
            pynode: The node previously in that slot, now without a downstream link
        """
        pOld = self.id_to_node[pDown.aHandle_upstream[iIndex]]
        pOld.lHandle_downstream = None
        pDown.aHandle_upstream[iIndex] = pUp.lHandle
        pUp.lHandle_downstream = pDown.lHandle
        return pOld

    def remove_upstream(self, pDown: pynode, pUp: pynode) -> bool:
        """Remove pUp from the upstream list of pDown. Returns False if it was not there."""
        iIndex = self.get_upstream_index(pDown, pUp)
        if iIndex < 0:
            return False
        del pDown.aHandle_upstream[iIndex]
        pUp.lHandle_downstream = None
        return True

    def detach(self, pNode: pynode):
        """Clear all live links of a node without touching its neighbours."""
        pNode.lHandle_downstream = None
        pNode.aHandle_upstream = []

    def store_link_records(self, aNode: List[pynode]):
        """Copy the live links of each node into its identifier record."""
        for pNode in aNode:
            pDown = self.get_downstream(pNode)
            pNode.sNodeID_downstream = None if pDown is None else pDown.sNodeID
            pNode.aNodeID_upstream = [pUp.sNodeID for pUp in self.get_upstream_nodes(pNode)]

    def relink_from_records(self, aNode: List[pynode]):
        """
        Rebuild the live links of a set of registered nodes from their identifier records.

        This is the second half of every bulk rewire: records are edited first,
        links are then cleared and resolved here in one pass.

        Args:
            aNode: Nodes whose records reference only nodes in the same list

        Raises:
            MalformedNetworkError: If a record references an unknown identifier
        """
        node_by_id: Dict[str, pynode] = {pNode.sNodeID: pNode for pNode in aNode}

        for pNode in aNode:
            self.detach(pNode)

        for pNode in aNode:
            if pNode.sNodeID_downstream:
                pDown = node_by_id.get(pNode.sNodeID_downstream)
                if pDown is None:
                    raise MalformedNetworkError(
                        f"Node '{pNode.sNodeID}' has unknown downstream node '{pNode.sNodeID_downstream}'")
                pNode.lHandle_downstream = pDown.lHandle
            for sUp in pNode.aNodeID_upstream:
                pUp = node_by_id.get(sUp)
                if pUp is None:
                    raise MalformedNetworkError(
                        f"Node '{pNode.sNodeID}' has unknown upstream node '{sUp}'")
                pNode.aHandle_upstream.append(pUp.lHandle)

        logger.debug(f"Relinked {len(aNode)} nodes from identifier records")

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def add_label(self, pLabel: pylabel):
        self.aLabel.append(pLabel)

    def get_labels(self) -> List[pylabel]:
        return list(self.aLabel)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def describe_node(self, pNode: pynode) -> str:
        """One-line summary of a node and its links, for debug output."""
        pDown = self.get_downstream(pNode)
        aUp = self.get_upstream_nodes(pNode)
        sText = (f'"{pNode.sNodeID}" T={get_type_abbreviation(pNode.iType)}'
                 f' T#={pNode.iTributary_number} RC={pNode.iReach_counter}'
                 f' RL={pNode.iReach_level} #={pNode.iSerial}'
                 f' #inR={pNode.iNode_in_reach} CO={pNode.iComputational_order}'
                 f' DWN="{pDown.sNodeID if pDown is not None else ""}"'
                 f' #up={len(aUp)} UP=')
        sText += ' '.join(f'[{i}]:"{pUp.sNodeID}"' for i, pUp in enumerate(aUp))
        return sText
