"""
Main facade class for river network modeling.

This module provides the pyrivernetwork class that exposes the node arena,
traversal, queries and edits as a single object while delegating to
specialized modules.
"""

import logging
from typing import List, Optional

from ..classes.node import pynode, NodeType
from ..classes.label import pylabel
from ..config import NetworkConfig
from .network import NodeNetwork
from ..analysis.traversal import Position, get_downstream_node, get_upstream_node
from ..analysis.search import NetworkSearch, UpstreamFlowNodeTarget
from ..analysis.inventory import NodeInventory
from ..operations.builder import NetworkBuilder
from ..operations.editor import NetworkEditor
from ..operations.topology import TopologyManager
from ..operations.locations import LocationFiller

logger = logging.getLogger(__name__)


class pyrivernetwork:
    """
    Main facade class for a river basin node network.

    Holds one network and delegates to the builder, editor, search,
    inventory, topology and location components.
    """

    def __init__(self, aNode: Optional[List[pynode]] = None, iFlag_end_first: bool = True,
                 pConfig: Optional[NetworkConfig] = None):
        """
        Initialize the network, optionally building it from node records.

        Args:
            aNode: Optional node records to build the network from
            iFlag_end_first: True if aNode starts with the End node
            pConfig: Network settings, defaults to NetworkConfig()
        """
        self.pConfig = pConfig if pConfig is not None else NetworkConfig()

        # Initialize core network
        self._network = NodeNetwork()
        self._network.iFlag_treat_dry_as_natural_flow = self.pConfig.iFlag_treat_dry_as_natural_flow

        # Initialize analysis components
        self._search = NetworkSearch(self._network)
        self._inventory = NodeInventory(self._network)

        # Initialize operation components
        self._builder = NetworkBuilder(self._network)
        self._editor = NetworkEditor(self._network, self.pConfig.dNew_node_offset)
        self._topology = TopologyManager(self._network)
        self._locations = LocationFiller(self._network, self.pConfig.dNode_spacing)

        if aNode:
            self._builder.calculate_network_node_data(aNode, iFlag_end_first)
        elif self.pConfig.iFlag_add_end_node:
            self._add_end_node()

    def _add_end_node(self):
        """Create a lone End node so that nodes can be added one at a time."""
        pEnd = pynode(self.pConfig.sEnd_node_id, NodeType.END)
        pEnd.iUpstream_order = int(self.pConfig.iUpstream_order)
        pEnd.iSerial = 1
        pEnd.iComputational_order = 1
        pEnd.iNode_in_reach = 1
        pEnd.iReach_counter = 1
        pEnd.iReach_level = 1
        self._network.register_node(pEnd)
        self._network.set_end_node(pEnd)
        self._network.set_node_count(1)
        logger.debug(f"Created End node '{pEnd.sNodeID}'")

    @property
    def network(self) -> NodeNetwork:
        return self._network

    # ========================================================================
    # NETWORK SETTINGS
    # ========================================================================

    def get_treat_dry_as_natural_flow(self) -> bool:
        return self._network.iFlag_treat_dry_as_natural_flow

    def set_treat_dry_as_natural_flow(self, iFlag: bool):
        """Make dry-river nodes count as natural flow nodes in reach searches."""
        self._network.iFlag_treat_dry_as_natural_flow = iFlag

    def get_node_count(self) -> int:
        """Cached node count, updated by builds and edits."""
        return self._network.get_node_count()

    def size(self) -> int:
        """Number of nodes by traversal, not counting the End node."""
        return self._search.size()

    # ========================================================================
    # TRAVERSAL
    # ========================================================================

    def get_downstream_node(self, pNode: pynode, ePosition: Position) -> Optional[pynode]:
        """Find a node downstream of pNode using a positioning mode."""
        return get_downstream_node(self._network, pNode, ePosition)

    def get_upstream_node(self, pNode: pynode, ePosition: Position) -> Optional[pynode]:
        """Find a node upstream of pNode using a positioning mode."""
        return get_upstream_node(self._network, pNode, ePosition)

    def get_upstream_nodes(self, pNode: pynode) -> List[pynode]:
        return self._network.get_upstream_nodes(pNode)

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get_end_node(self) -> Optional[pynode]:
        return self._search.get_end_node()

    def get_most_upstream_node(self) -> Optional[pynode]:
        return self._search.get_most_upstream_node()

    def find_node(self, sNodeID: str) -> Optional[pynode]:
        """Find a node by identifier, ignoring case."""
        return self._search.find_node(sNodeID)

    def get_node_list(self) -> List[pynode]:
        """All nodes in computational order."""
        return self._search.get_node_list()

    def get_nodes_for_type(self, iType: int) -> List[pynode]:
        """Nodes of one type, or of every physical type if iType is -1."""
        return self._search.get_nodes_for_type(iType)

    def get_natural_flow_nodes(self) -> List[pynode]:
        return self._search.get_natural_flow_nodes()

    def get_node_sequence(self, pNode1: pynode, pNode2: pynode) -> List[pynode]:
        """Inclusive run of nodes connecting two nodes."""
        return self._search.get_node_sequence(pNode1, pNode2)

    def find_downstream_natural_flow_node_in_reach(self, pNode: pynode) -> Optional[pynode]:
        return self._search.find_downstream_natural_flow_node_in_reach(pNode)

    def find_upstream_natural_flow_node_in_reach(self, pNode: pynode) -> Optional[pynode]:
        return self._search.find_upstream_natural_flow_node_in_reach(pNode)

    def find_downstream_flow_node(self, pNode: pynode) -> Optional[pynode]:
        return self._search.find_downstream_flow_node(pNode)

    def find_next_real_downstream_node(self, pNode: pynode) -> Optional[pynode]:
        return self._search.find_next_real_downstream_node(pNode)

    def find_next_real_or_xconfluence_downstream_node(self, pNode: pynode) -> Optional[pynode]:
        return self._search.find_next_real_or_xconfluence_downstream_node(pNode)

    def find_next_xconfluence_downstream_node(self, pNode: pynode) -> Optional[pynode]:
        return self._search.find_next_xconfluence_downstream_node(pNode)

    def is_most_upstream_node_in_reach(self, pNode: pynode) -> bool:
        return self._search.is_most_upstream_node_in_reach(pNode)

    def find_upstream_nodes(self, pNode: pynode, iFlag_add_first_node: bool = True,
                            aStop_id: Optional[List[str]] = None) -> List[pynode]:
        """Collect pNode and the nodes above it, stopping at the given identifiers."""
        return self._search.find_upstream_nodes(pNode, iFlag_add_first_node, aStop_id)

    def find_upstream_flow_nodes(self, pNode: pynode,
                                 pTarget: Optional[UpstreamFlowNodeTarget] = None) -> List[pynode]:
        """Nearest stream gages on every branch above pNode."""
        return self._search.find_upstream_flow_nodes(pNode, pTarget)

    def get_node_counts_report(self) -> List[str]:
        return self._inventory.get_node_counts_report()

    def get_node_identifiers_by_type(self, iType: int) -> List[str]:
        return self._inventory.get_node_identifiers_by_type(iType)

    def describe_node(self, pNode: pynode) -> str:
        return self._network.describe_node(pNode)

    # ========================================================================
    # STRUCTURAL EDITS
    # ========================================================================

    def calculate_network_node_data(self, aNode: List[pynode], iFlag_end_first: bool = True):
        """Rebuild the network from node records."""
        self._builder.calculate_network_node_data(aNode, iFlag_end_first)

    def set_network_from_nodes(self, aNode: List[pynode]):
        """Adopt nodes whose numbering is already valid."""
        self._builder.set_network_from_nodes(aNode)

    def convert_node_types(self) -> int:
        """Migrate legacy BASEFLOW and IMPORT node types in place."""
        return NetworkBuilder.convert_node_types(self.get_node_list())

    def add_node(self, sNodeID: str, iType: int, sNodeID_upstream: Optional[str],
                 sNodeID_downstream: str, iFlag_natural_flow: bool = False,
                 iFlag_import: bool = False) -> pynode:
        """Add a node above sNodeID_downstream, optionally spliced below sNodeID_upstream."""
        return self._editor.add_node(sNodeID, iType, sNodeID_upstream, sNodeID_downstream,
                                     iFlag_natural_flow, iFlag_import)

    def delete_node(self, sNodeID: str) -> bool:
        """Delete a node; its upstream branches move to its downstream node."""
        return self._editor.delete_node(sNodeID)

    def check_unique_id(self, sNodeID: str) -> str:
        return self._editor.check_unique_id(sNodeID)

    def reset_computational_order(self) -> int:
        return self._topology.reset_computational_order()

    # ========================================================================
    # VALIDATION
    # ========================================================================

    def check_network(self) -> List[str]:
        """Problems with the bottom of the network, empty if it ends in an End node."""
        return self._topology.check_network()

    def validate_invariants(self) -> List[str]:
        """Problems with links or numbering, empty if the network is consistent."""
        return self._topology.validate_invariants()

    # ========================================================================
    # PRESENTATION DATA
    # ========================================================================

    def fill_missing_locations(self) -> int:
        """Interpolate plotting coordinates for nodes that have none."""
        return self._locations.fill_missing_locations()

    def add_label(self, pLabel: pylabel):
        self._network.add_label(pLabel)

    def get_labels(self) -> List[pylabel]:
        return self._network.get_labels()
