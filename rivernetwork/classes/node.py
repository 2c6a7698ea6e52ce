"""
Node representation for river basin networks.

A node is one vertex of the drainage tree: a diversion, a stream gage, a
reservoir, a confluence, the End node and so on. Nodes do not hold references
to each other; they carry integer handles that are resolved by the owning
network (see rivernetwork.core.network).
"""

import logging
from enum import IntEnum
from typing import List, Optional

logger = logging.getLogger(__name__)


class NodeType(IntEnum):
    """Node type codes. The integer values are stable and used in data files."""
    BLANK = 0
    DIV = 1
    FLOW = 2
    CONFLUENCE = 3
    ISF = 4
    RES = 5
    IMPORT = 6
    BASEFLOW = 7
    END = 8
    OTHER = 9
    UNKNOWN = 10
    STREAM = 11
    LABEL = 12
    FORMULA = 13
    WELL = 14
    XCONFLUENCE = 15
    DIV_AND_WELL = 16
    LABEL_NODE = 17
    PLAN = 18


class UpstreamOrder(IntEnum):
    """Which end of a node's upstream list holds the most recently added branch."""
    TRIBS_ADDED_FIRST = 1
    TRIBS_ADDED_LAST = 2


# Indexed by NodeType value
_TYPE_ABBREVIATIONS = [
    'BLK', 'DIV', 'FLO', 'CON', 'ISF', 'RES', 'IMP', 'BFL', 'END', 'OTH',
    'UNK', 'STR', 'LAB', 'FOR', 'WEL', 'XCN', 'D&W', 'LBN', 'PLN',
]

_TYPE_NAMES = [
    'BLANK', 'DIV', 'FLOW', 'CONFL', 'ISF', 'RES', 'IMPORT', 'BFL', 'END',
    'OTH', 'UNKNOWN', 'STREAM', 'LABEL', 'FORMULA', 'WELL', 'XCONFL', 'D&W',
    'LABELNODE', 'PLAN',
]

_TYPE_VERBOSE_NAMES = [
    'Blank', 'Diversion', 'Streamflow', 'Confluence', 'Instream Flow',
    'Reservoir', 'Import', 'Baseflow', 'End', 'Other', 'Unknown', 'Stream',
    'Label', 'Formula', 'Well', 'XConfluence', 'Diversion and Well',
    'LabelNode', 'Plan',
]

# Historical spellings found in older network files
_TYPE_ALIASES = {
    'CONFLUENCE': NodeType.CONFLUENCE,
    'DIVERSION': NodeType.DIV,
    'DW': NodeType.DIV_AND_WELL,
    'DIVERSIONANDWELL': NodeType.DIV_AND_WELL,
    'STREAMFLOW': NodeType.FLOW,
    'STATION': NodeType.FLOW,
    'INSTREAMFLOW': NodeType.ISF,
    'MINFLOW': NodeType.ISF,
    'OTHER': NodeType.OTHER,
    'RESERVOIR': NodeType.RES,
    'STRING': NodeType.LABEL,
    'BASEFLOW': NodeType.BASEFLOW,
    'XCONFLUENCE': NodeType.XCONFLUENCE,
}

_PHYSICAL_TYPES = frozenset([
    NodeType.FLOW, NodeType.DIV, NodeType.DIV_AND_WELL, NodeType.RES,
    NodeType.ISF, NodeType.WELL, NodeType.OTHER, NodeType.PLAN,
])

_NON_REAL_TYPES = frozenset([
    NodeType.BLANK, NodeType.CONFLUENCE, NodeType.XCONFLUENCE,
    NodeType.STREAM, NodeType.LABEL, NodeType.FORMULA,
])


def lookup_type(sType: str) -> int:
    """
    Look up a node type code from its text form.

    Accepts the abbreviation, the short name, the verbose name and a few
    historical aliases, ignoring case.

    Args:
        sType: Type text as found in a network file

    Returns:
        int: The NodeType value, or -1 if the text is not recognized
    """
    sKey = sType.strip().upper()
    for aNames in (_TYPE_ABBREVIATIONS, _TYPE_NAMES):
        if sKey in aNames:
            return int(NodeType(aNames.index(sKey)))
    for iType, sVerbose in enumerate(_TYPE_VERBOSE_NAMES):
        if sVerbose.upper() == sKey:
            return iType
    sCompact = sKey.replace(' ', '').replace('_', '')
    if sCompact in _TYPE_ALIASES:
        return int(_TYPE_ALIASES[sCompact])
    logger.warning(f"Unknown node type '{sType}'")
    return -1


def _name_from_table(aTable: List[str], iType: int) -> str:
    if 0 <= iType < len(aTable):
        return aTable[iType]
    return ''


def get_type_abbreviation(iType: int) -> str:
    """Three-letter abbreviation for a type, empty if the type is invalid."""
    return _name_from_table(_TYPE_ABBREVIATIONS, iType)


def get_type_name(iType: int) -> str:
    """Short upper-case name for a type, empty if the type is invalid."""
    return _name_from_table(_TYPE_NAMES, iType)


def get_type_verbose_name(iType: int) -> str:
    """Verbose name for a type, empty if the type is invalid."""
    return _name_from_table(_TYPE_VERBOSE_NAMES, iType)


class pynode:
    """
    A single node of a river network.

    Topology is stored two ways. The string identifiers in sNodeID_downstream
    and aNodeID_upstream are the record form produced by file readers; the
    handles are the live links maintained by the network arena.
    """

    def __init__(self, sNodeID: str = '', iType: int = NodeType.UNKNOWN,
                 iFlag_natural_flow: bool = False, iFlag_import: bool = False):
        """
        Create a node with default derived values.

        Args:
            sNodeID: Identifier, unique within a network
            iType: NodeType value
            iFlag_natural_flow: Node is a natural flow estimation point
            iFlag_import: Node is an import
        """
        self.sNodeID = sNodeID
        self.sDescription = ''
        self.sLabel = ''

        # ID-based link record
        self.sNodeID_downstream: Optional[str] = None
        self.aNodeID_upstream: List[str] = []

        # Live links, assigned by the owning network
        self.lHandle: int = -1
        self.lHandle_downstream: Optional[int] = None
        self.aHandle_upstream: List[int] = []

        self.reset(iType, iFlag_natural_flow, iFlag_import)

    def reset(self, iType: int, iFlag_natural_flow: bool = False, iFlag_import: bool = False):
        """Reinitialize type, flags, derived values and presentation fields."""
        self.iType = int(iType)
        self.iFlag_natural_flow = iFlag_natural_flow
        self.iFlag_import = iFlag_import
        self.iFlag_dry_river = False

        self.iSerial = 0
        self.iComputational_order = -1
        self.iTributary_number = 1
        self.iReach_counter = 0
        self.iReach_level = 0
        self.iNode_in_reach = 1
        self.iUpstream_order = int(UpstreamOrder.TRIBS_ADDED_FIRST)

        self.dX = 0.0
        self.dY = 0.0
        self.dX_database = 0.0
        self.dY_database = 0.0
        self.dLabel_angle = 45.0

        self.dArea = 0.0
        self.dPrecipitation = 0.0
        self.dWater = 0.0

    def get_upstream_position(self, sNodeID: str) -> int:
        """Position of an identifier in the upstream record list, ignoring case; -1 if absent."""
        sKey = sNodeID.upper()
        for i, sUpstream in enumerate(self.aNodeID_upstream):
            if sUpstream.upper() == sKey:
                return i
        return -1

    def get_upstream_count(self) -> int:
        return len(self.aHandle_upstream)

    def has_upstream(self) -> bool:
        return len(self.aHandle_upstream) > 0

    def is_end(self) -> bool:
        return self.iType == NodeType.END

    def is_physical(self) -> bool:
        """True for node types that correspond to a physical structure or gage."""
        return self.iType in _PHYSICAL_TYPES

    def is_real(self) -> bool:
        return self.iType not in _NON_REAL_TYPES

    def is_confluence(self) -> bool:
        return self.iType in (NodeType.CONFLUENCE, NodeType.XCONFLUENCE)

    def matches_id(self, sNodeID: str) -> bool:
        return self.sNodeID.upper() == sNodeID.upper()

    def parse_area_precip(self, sText: str):
        """
        Parse an area times precipitation expression such as '12.5*30'.

        The product is stored as the water value; a positive product marks the
        node as a natural flow node.

        Raises:
            ValueError: If the expression is not a product of two numbers
        """
        aPart = sText.split('*')
        if len(aPart) != 2:
            raise ValueError(f"Expected 'area*precipitation', got '{sText}'")
        self.dArea = float(aPart[0])
        self.dPrecipitation = float(aPart[1])
        self.dWater = self.dArea * self.dPrecipitation
        if self.dWater > 0:
            self.iFlag_natural_flow = True

    def __repr__(self):
        return f"pynode(sNodeID={self.sNodeID!r}, iType={get_type_abbreviation(self.iType)})"
