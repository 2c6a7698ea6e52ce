"""
Node inventory for river networks.

Counts nodes by type and lists identifiers by type, for reports and for
writers that need identifiers grouped by structure type.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..classes.node import NodeType, get_type_name
from ..core.network import NodeNetwork
from .traversal import iterate_computational

logger = logging.getLogger(__name__)

# Types whose identifiers may carry a '.suffix' that is not part of the structure identifier
_SUFFIXED_TYPES = frozenset([
    NodeType.DIV, NodeType.DIV_AND_WELL, NodeType.ISF, NodeType.RES,
    NodeType.WELL, NodeType.IMPORT,
])


class NodeInventory:
    """Counts and identifier lists by node type."""

    def __init__(self, network: NodeNetwork):
        self.network = network

    def get_node_counts(self, aType: Optional[Sequence[int]] = None) -> np.ndarray:
        """
        Number of nodes of each type.

        Args:
            aType: Types to count, defaults to every NodeType in code order

        Returns:
            numpy array of counts, aligned with aType
        """
        if aType is None:
            aType = [int(eType) for eType in NodeType]
        aCount = np.zeros(len(aType), dtype=int)
        aPosition = {iType: i for i, iType in enumerate(aType)}
        for pNode in iterate_computational(self.network):
            i = aPosition.get(pNode.iType)
            if i is not None:
                aCount[i] += 1
        logger.debug(f"Counted {int(aCount.sum())} nodes over {len(aType)} types")
        return aCount

    def get_node_counts_report(self, aType: Optional[Sequence[int]] = None) -> List[str]:
        """
        One summary line per type that has at least one node.

        Lines read 'Network contains N TYPE node(s).'
        """
        if aType is None:
            aType = [int(eType) for eType in NodeType]
        aCount = self.get_node_counts(aType)
        return [f"Network contains {nCount} {get_type_name(iType)} node(s)."
                for iType, nCount in zip(aType, aCount) if nCount > 0]

    def get_node_identifiers_by_type(self, iType: int) -> List[str]:
        """
        Identifiers of every node of a type, in computational order.

        For diversions, diversion and wells, instream flows, reservoirs,
        wells and imports, any '.suffix' is removed.
        """
        aID = []
        for pNode in iterate_computational(self.network):
            if pNode.iType != iType:
                continue
            sNodeID = pNode.sNodeID
            if iType in _SUFFIXED_TYPES and '.' in sNodeID:
                sNodeID = sNodeID.split('.', 1)[0]
            aID.append(sNodeID)
        return aID
