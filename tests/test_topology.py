"""Tests for operations/topology.py - renumbering and validation."""

from rivernetwork import pyrivernetwork, NodeType
from rivernetwork.operations.topology import TopologyManager

from network_helpers import make_nodes


class TestResetComputationalOrder:
    """Tests for reset_computational_order."""

    def test_restores_order(self, basin):
        aSerial = [pNode.iSerial for pNode in basin.get_node_list()]
        for pNode in basin.get_node_list():
            pNode.iComputational_order = 0
        assert basin.reset_computational_order() == 7
        aNode = basin.get_node_list()
        assert [pNode.iComputational_order for pNode in aNode] == list(range(1, 8))
        assert [pNode.iSerial for pNode in aNode] == aSerial


class TestCheckNetwork:
    """Tests for check_network."""

    def test_end_at_bottom(self, basin):
        assert basin.check_network() == []

    def test_bottom_not_end(self):
        aRecord = [
            ("OUT", NodeType.DIV, None, ["A"]),
            ("A", NodeType.FLOW, "OUT", []),
        ]
        network = pyrivernetwork(make_nodes(aRecord))
        aProblem = network.check_network()
        assert len(aProblem) == 1
        assert "OUT" in aProblem[0]

    def test_empty_network(self):
        assert pyrivernetwork().check_network() == ["Network has no End node"]


class TestValidateInvariants:
    """Tests for validate_invariants."""

    def test_detects_duplicate_serial(self, basin):
        basin.find_node("M2").iSerial = 7
        assert any("Serial" in sProblem for sProblem in basin.validate_invariants())

    def test_detects_bad_tributary_number(self, basin):
        basin.find_node("M2").iTributary_number = 1
        assert any("tributary number" in sProblem for sProblem in basin.validate_invariants())

    def test_detects_reach_gap(self, basin):
        basin.find_node("M3").iNode_in_reach = 9
        assert any("reach 1" in sProblem for sProblem in basin.validate_invariants())


class TestTopologyHelpers:
    """Tests for reach and serial helpers."""

    def test_highest_reach_counter(self, basin):
        assert TopologyManager(basin.network).get_highest_reach_counter() == 2

    def test_highest_upstream_serial(self, basin):
        pManager = TopologyManager(basin.network)
        assert pManager.find_highest_upstream_serial(basin.find_node("CF")) == 7
        assert pManager.find_highest_upstream_serial(basin.find_node("T1")) == 5
        assert pManager.find_highest_upstream_serial(basin.find_node("T2")) == 5
