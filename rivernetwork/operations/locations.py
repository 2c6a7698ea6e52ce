"""
Plotting coordinate placement for river networks.

Coordinates are presentation data only. A node whose x and y are both zero
is treated as having no location; missing locations are filled by linear
interpolation along each reach.
"""

import logging
from typing import List, Optional

import numpy as np

from ..classes.node import pynode
from ..core.network import NodeNetwork
from ..analysis.traversal import Position, get_upstream_node, iterate_computational

logger = logging.getLogger(__name__)


def has_location(pNode: pynode) -> bool:
    return not (pNode.dX == 0.0 and pNode.dY == 0.0)


def place_new_node(network: NodeNetwork, pNew: pynode, pUp: Optional[pynode],
                   pDown: pynode, dOffset: float = 0.001):
    """
    Give a newly added node a location next to its neighbours.

    The node goes halfway between pDown and pUp when it was spliced between
    them. Otherwise it continues the direction of the segment below pDown,
    or is offset slightly from pDown when pDown is the End node.
    """
    aDown = np.array([pDown.dX, pDown.dY])
    if pUp is not None:
        aXY = 0.5 * (aDown + np.array([pUp.dX, pUp.dY]))
    else:
        pBelow = network.get_downstream(pDown)
        if pBelow is None:
            aXY = aDown + dOffset
        else:
            aXY = aDown + (aDown - np.array([pBelow.dX, pBelow.dY]))
    pNew.dX, pNew.dY = float(aXY[0]), float(aXY[1])


def _branch_direction(iTributary_number: int) -> np.ndarray:
    """Unit vector for a reach that starts with no located node."""
    dAngle = np.deg2rad(90.0 + 45.0 * (iTributary_number - 1))
    return np.array([np.cos(dAngle), np.sin(dAngle)])


class LocationFiller:
    """
    Fills missing plotting coordinates.

    Reaches are processed in increasing reach counter order so that the node
    a tributary joins is located before the tributary itself.
    """

    def __init__(self, network: NodeNetwork, dNode_spacing: float = 1.0):
        """
        Args:
            network: Network whose nodes are filled
            dNode_spacing: Distance between extrapolated nodes
        """
        self.network = network
        self.dNode_spacing = dNode_spacing

    def fill_missing_locations(self) -> int:
        """
        Assign coordinates to every node that has none.

        Returns:
            int: Number of nodes that received coordinates
        """
        aNode = list(iterate_computational(self.network))
        aReach_bottom = {}
        for pNode in aNode:
            iReach = pNode.iReach_counter
            if iReach not in aReach_bottom or pNode.iNode_in_reach < aReach_bottom[iReach].iNode_in_reach:
                aReach_bottom[iReach] = pNode

        nFilled = 0
        for iReach in sorted(aReach_bottom):
            nFilled += self.fill_reach(aReach_bottom[iReach])

        logger.debug(f"Filled locations for {nFilled} of {len(aNode)} nodes")
        return nFilled

    def get_reach_chain(self, pBottom: pynode) -> List[pynode]:
        """Nodes of the reach that starts at pBottom, ordered upstream."""
        aChain = [pBottom]
        pNext = get_upstream_node(self.network, pBottom, Position.REACH_NEXT)
        while pNext is not None and pNext not in aChain:
            aChain.append(pNext)
            pNext = get_upstream_node(self.network, pNext, Position.REACH_NEXT)
        return aChain

    def fill_reach(self, pBottom: pynode) -> int:
        """
        Fill one reach, anchored on the node the reach flows into.

        Gaps between two located nodes are spaced evenly; gaps at either end
        are extrapolated at the configured node spacing.

        Returns:
            int: Number of nodes filled
        """
        aChain = self.get_reach_chain(pBottom)
        pAnchor = self.network.get_downstream(pBottom)
        if pAnchor is not None:
            aChain = [pAnchor] + aChain

        aXY = np.array([[pNode.dX, pNode.dY] for pNode in aChain], dtype=float)
        aLocated = np.array([has_location(pNode) for pNode in aChain])
        if aLocated.all():
            return 0

        aIndex = np.flatnonzero(aLocated)
        if aIndex.size == 0:
            aXY[0] = (0.0, 0.0)
            aLocated[0] = True
            aIndex = np.array([0])
        aFilled = ~aLocated

        # Interior gaps
        for iLow, iHigh in zip(aIndex[:-1], aIndex[1:]):
            if iHigh - iLow > 1:
                aT = np.linspace(0.0, 1.0, iHigh - iLow + 1)[1:-1]
                aXY[iLow + 1:iHigh] = aXY[iLow] + np.outer(aT, aXY[iHigh] - aXY[iLow])

        # Upstream end
        iTop = aIndex[-1]
        if iTop < len(aChain) - 1:
            aDirection = self._direction(aXY, aIndex, pBottom, bUpstream=True)
            aStep = np.arange(1, len(aChain) - iTop)
            aXY[iTop + 1:] = aXY[iTop] + np.outer(aStep * self.dNode_spacing, aDirection)

        # Downstream end, only possible on the main stem
        iBottom = aIndex[0]
        if iBottom > 0:
            aDirection = self._direction(aXY, aIndex, pBottom, bUpstream=False)
            aStep = np.arange(iBottom, 0, -1)
            aXY[:iBottom] = aXY[iBottom] + np.outer(aStep * self.dNode_spacing, aDirection)

        for pNode, aPoint, bFilled in zip(aChain, aXY, aFilled):
            if bFilled:
                pNode.dX, pNode.dY = float(aPoint[0]), float(aPoint[1])
        return int(aFilled.sum())

    def _direction(self, aXY: np.ndarray, aIndex: np.ndarray, pBottom: pynode, bUpstream: bool) -> np.ndarray:
        """Unit direction of extrapolation, from the nearest two located points."""
        if aIndex.size >= 2:
            if bUpstream:
                aDelta = aXY[aIndex[-1]] - aXY[aIndex[-2]]
            else:
                aDelta = aXY[aIndex[0]] - aXY[aIndex[1]]
            dLength = np.hypot(aDelta[0], aDelta[1])
            if dLength > 0:
                return aDelta / dLength
        aDirection = _branch_direction(pBottom.iTributary_number)
        return aDirection if bUpstream else -aDirection
