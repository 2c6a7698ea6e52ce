"""
Traversal primitives for river networks.

Every higher-level query or edit positions itself with the two functions in
this module. They are pure: they read the network and never change it.

Positioning modes:
    ABSOLUTE       Follow the main stem to the End node or to a headwater
    RELATIVE       One hop
    COMPUTATIONAL  The linear processing order, upstream before downstream
    REACH          The boundary of the current reach
    REACH_NEXT     One hop that stays in the current reach
"""

import logging
from enum import Enum
from typing import Iterator, Optional

from ..classes.node import pynode, UpstreamOrder
from ..core.network import NodeNetwork

logger = logging.getLogger(__name__)


class Position(Enum):
    """Traversal positioning modes."""
    ABSOLUTE = "absolute"
    RELATIVE = "relative"
    COMPUTATIONAL = "computational"
    REACH = "reach"
    REACH_NEXT = "reach_next"


def _is_tribs_added_last(pNode: pynode) -> bool:
    return pNode.iUpstream_order == UpstreamOrder.TRIBS_ADDED_LAST


def _main_branch_index(pNode: pynode) -> int:
    """Index of the branch that the ABSOLUTE walk follows upstream."""
    if _is_tribs_added_last(pNode):
        return 0
    return len(pNode.aHandle_upstream) - 1


def _branch_index(network: NodeNetwork, pDown: pynode, pNode: pynode) -> int:
    iIndex = network.get_upstream_index(pDown, pNode)
    if iIndex < 0:
        # Fall back on the stored number if the link list disagrees
        iIndex = pNode.iTributary_number - 1
    return iIndex


def _reach_branch(network: NodeNetwork, pNode: pynode) -> Optional[pynode]:
    """
    The upstream neighbour that continues the reach of pNode.

    The main branch is preferred; any other branch qualifies only if it
    carries the same reach counter.
    """
    if not pNode.aHandle_upstream:
        return None
    aUp = network.get_upstream_nodes(pNode)
    iMain = _main_branch_index(pNode)
    aCandidate = [aUp[iMain]] + [pUp for i, pUp in enumerate(aUp) if i != iMain]
    for pUp in aCandidate:
        if pUp.iReach_counter == pNode.iReach_counter:
            return pUp
    return None


def get_downstream_node(network: NodeNetwork, pNode: pynode, ePosition: Position) -> Optional[pynode]:
    """
    Find a node downstream of pNode.

    Args:
        network: Network that owns the node
        pNode: Starting node
        ePosition: Positioning mode

    Returns:
        The node found. The End node returns itself for every mode except
        REACH_NEXT, which returns None when the next node is in another reach.
    """
    pDown = network.get_downstream(pNode)
    if pDown is None:
        return None if ePosition == Position.REACH_NEXT else pNode

    if ePosition == Position.RELATIVE:
        return pDown

    if ePosition == Position.REACH_NEXT:
        if pDown.iReach_counter == pNode.iReach_counter:
            return pDown
        return None

    if ePosition == Position.ABSOLUTE:
        pCurrent = pNode
        aSeen = {pCurrent.lHandle}
        while pCurrent.lHandle_downstream is not None:
            pCurrent = network.get_downstream(pCurrent)
            if pCurrent.lHandle in aSeen:
                logger.warning(f"Cycle detected below node '{pNode.sNodeID}'")
                break
            aSeen.add(pCurrent.lHandle)
        return pCurrent

    if ePosition == Position.REACH:
        pCurrent = pNode
        while pCurrent.iNode_in_reach > 1:
            pNext = network.get_downstream(pCurrent)
            if pNext is None or pNext is pCurrent:
                break
            pCurrent = pNext
        return pCurrent

    # COMPUTATIONAL
    nUp = len(pDown.aHandle_upstream)
    iIndex = _branch_index(network, pDown, pNode)
    if _is_tribs_added_last(pDown):
        if nUp == 1 or iIndex >= nUp - 1:
            return pDown
        return get_upstream_node(network, network.get_upstream(pDown, iIndex + 1), Position.ABSOLUTE)
    if nUp == 1 or iIndex <= 0:
        return pDown
    return get_upstream_node(network, network.get_upstream(pDown, iIndex - 1), Position.ABSOLUTE)


def get_upstream_node(network: NodeNetwork, pNode: pynode, ePosition: Position) -> Optional[pynode]:
    """
    Find a node upstream of pNode.

    Args:
        network: Network that owns the node
        pNode: Starting node
        ePosition: Positioning mode

    Returns:
        The node found. A headwater returns itself for ABSOLUTE, RELATIVE and
        REACH. REACH_NEXT returns None when no upstream node shares the reach.
        COMPUTATIONAL returns the node itself at the top of the system.
    """
    if ePosition == Position.REACH_NEXT:
        return _reach_branch(network, pNode)

    if ePosition == Position.COMPUTATIONAL:
        if not pNode.aHandle_upstream:
            return find_reach_confluence_next(network, pNode)
        if _is_tribs_added_last(pNode):
            return network.get_upstream(pNode, len(pNode.aHandle_upstream) - 1)
        return network.get_upstream(pNode, 0)

    if not pNode.aHandle_upstream:
        return pNode

    if ePosition == Position.RELATIVE:
        return network.get_upstream(pNode, _main_branch_index(pNode))

    if ePosition == Position.REACH:
        pCurrent = pNode
        aSeen = {pCurrent.lHandle}
        while True:
            if len(pCurrent.aHandle_upstream) == 1 and pCurrent.is_confluence():
                break
            pNext = _reach_branch(network, pCurrent)
            if pNext is None or pNext.lHandle in aSeen:
                break
            aSeen.add(pNext.lHandle)
            pCurrent = pNext
        return pCurrent

    # ABSOLUTE
    pCurrent = pNode
    aSeen = {pCurrent.lHandle}
    while pCurrent.aHandle_upstream:
        pNext = network.get_upstream(pCurrent, _main_branch_index(pCurrent))
        if pNext.lHandle in aSeen:
            logger.warning(f"Cycle detected above node '{pNode.sNodeID}'")
            break
        aSeen.add(pNext.lHandle)
        pCurrent = pNext
    return pCurrent


def find_reach_confluence_next(network: NodeNetwork, pNode: pynode) -> pynode:
    """
    Step upstream in computational order from a headwater node.

    Climbs toward the End node until some ancestor has a branch that is
    visited before the branch being climbed, and returns the root of that
    branch. If every ancestor branch has already been visited, pNode is the
    first node in computational order and is returned unchanged.
    """
    pCurrent = pNode
    aSeen = {pCurrent.lHandle}
    while True:
        pDown = network.get_downstream(pCurrent)
        if pDown is None or pDown.lHandle in aSeen:
            return pNode
        aSeen.add(pDown.lHandle)
        iIndex = _branch_index(network, pDown, pCurrent)
        if _is_tribs_added_last(pDown):
            if iIndex > 0:
                return network.get_upstream(pDown, iIndex - 1)
        elif iIndex < len(pDown.aHandle_upstream) - 1:
            return network.get_upstream(pDown, iIndex + 1)
        pCurrent = pDown


def iterate_computational(network: NodeNetwork, pStart: Optional[pynode] = None) -> Iterator[pynode]:
    """
    Walk the network in computational order.

    Args:
        network: Network to walk
        pStart: First node; defaults to the ABSOLUTE-upstream end of the network

    Yields:
        Nodes from pStart down to and including the End node
    """
    if pStart is None:
        pEnd = network.get_end_node()
        if pEnd is None:
            return
        pStart = get_upstream_node(network, pEnd, Position.ABSOLUTE)

    pCurrent = pStart
    aSeen = set()
    while True:
        if pCurrent.lHandle in aSeen:
            logger.warning(f"Computational walk revisited node '{pCurrent.sNodeID}', stopping")
            return
        aSeen.add(pCurrent.lHandle)
        yield pCurrent
        pNext = get_downstream_node(network, pCurrent, Position.COMPUTATIONAL)
        if pNext is None or pNext is pCurrent:
            return
        pCurrent = pNext
