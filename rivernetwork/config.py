"""
Network configuration.

Settings that are uniform across a network and are supplied once when the
network is created.
"""

from dataclasses import dataclass

from .classes.node import UpstreamOrder


@dataclass
class NetworkConfig:
    """
    Settings for a river network.

    Attributes:
        iUpstream_order: Tributary ordering convention applied to new nodes
        dNode_spacing: Distance used when extrapolating missing coordinates
        iFlag_add_end_node: Create an End node when the network is constructed
        iFlag_treat_dry_as_natural_flow: Dry-river nodes count as natural flow
            when searching for natural flow nodes
        dNew_node_offset: Offset applied to a node added above an End node
            that has no other coordinates to interpolate from
        sEnd_node_id: Identifier used for the End node created on construction
    """
    iUpstream_order: int = UpstreamOrder.TRIBS_ADDED_FIRST
    dNode_spacing: float = 1.0
    iFlag_add_end_node: bool = False
    iFlag_treat_dry_as_natural_flow: bool = False
    dNew_node_offset: float = 0.001
    sEnd_node_id: str = 'END'
