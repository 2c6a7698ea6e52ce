"""Tests for analysis/inventory.py - counts and identifiers by type."""

from rivernetwork import pyrivernetwork, NodeType
from rivernetwork.analysis.inventory import NodeInventory

from network_helpers import make_nodes


class TestNodeInventory:
    """Tests for NodeInventory."""

    def test_counts(self, basin):
        pInventory = NodeInventory(basin.network)
        aCount = pInventory.get_node_counts([NodeType.FLOW, NodeType.DIV, NodeType.WELL])
        assert list(aCount) == [2, 2, 0]

    def test_counts_all_types(self, basin):
        aCount = NodeInventory(basin.network).get_node_counts()
        assert len(aCount) == len(NodeType)
        assert aCount.sum() == 7
        assert aCount[NodeType.CONFLUENCE] == 1

    def test_report(self, basin):
        aLine = basin.get_node_counts_report()
        assert "Network contains 2 FLOW node(s)." in aLine
        assert "Network contains 1 CONFL node(s)." in aLine
        assert not any("WELL" in sLine for sLine in aLine)

    def test_identifiers_strip_suffix(self):
        aRecord = [
            ("END", NodeType.END, None, ["0100501.01"]),
            ("0100501.01", NodeType.DIV, "END", ["GAGE.1"]),
            ("GAGE.1", NodeType.FLOW, "0100501.01", []),
        ]
        network = pyrivernetwork(make_nodes(aRecord))
        assert network.get_node_identifiers_by_type(NodeType.DIV) == ["0100501"]
        assert network.get_node_identifiers_by_type(NodeType.FLOW) == ["GAGE.1"]
