"""Tests for analysis/search.py - node queries."""

import pytest

from rivernetwork import NodeType

from network_helpers import node_ids


class SetprfTargets:
    """Reports the listed identifiers as targets."""

    def __init__(self, aID):
        self.aID = set(aID)

    def is_setprf_target(self, sNodeID):
        return 1 if sNodeID in self.aID else 0


class TestWholeNetworkQueries:
    """Tests for lookups over the whole network."""

    def test_find_node(self, basin):
        assert basin.find_node("m2").sNodeID == "M2"
        assert basin.find_node("NOWHERE") is None
        assert basin.find_node("") is None

    def test_end_and_most_upstream(self, basin):
        assert basin.get_end_node().sNodeID == "END"
        assert basin.get_most_upstream_node().sNodeID == "M3"

    def test_size_excludes_end(self, basin):
        assert basin.size() == 6

    def test_nodes_for_type(self, basin):
        assert node_ids(basin.get_nodes_for_type(NodeType.DIV)) == ["M2", "T1"]
        assert node_ids(basin.get_nodes_for_type(NodeType.END)) == ["END"]
        assert node_ids(basin.get_nodes_for_type(NodeType.WELL)) == []

    def test_physical_nodes(self, basin):
        assert node_ids(basin.get_nodes_for_type(-1)) == ["M3", "M2", "T2", "T1", "M1"]

    def test_natural_flow_nodes(self, basin):
        basin.find_node("T2").iFlag_natural_flow = True
        basin.find_node("M1").iFlag_natural_flow = True
        assert node_ids(basin.get_natural_flow_nodes()) == ["T2", "M1"]


class TestNodeSequence:
    """Tests for get_node_sequence."""

    def test_downstream_order(self, basin):
        aNode = basin.get_node_sequence(basin.find_node("M3"), basin.find_node("M1"))
        assert node_ids(aNode) == ["M3", "M2", "CF", "M1"]

    def test_reversed_arguments(self, basin):
        aNode = basin.get_node_sequence(basin.find_node("M1"), basin.find_node("M3"))
        assert node_ids(aNode) == ["M3", "M2", "CF", "M1"]

    def test_across_confluence(self, basin):
        aNode = basin.get_node_sequence(basin.find_node("T2"), basin.find_node("M3"))
        assert node_ids(aNode) == ["T2", "T1", "CF", "M2", "M3"]

    def test_same_node(self, basin):
        pNode = basin.find_node("CF")
        assert basin.get_node_sequence(pNode, pNode) == [pNode]

    def test_missing_node(self, basin):
        assert basin.get_node_sequence(None, basin.find_node("CF")) == []


class TestNaturalFlowSearch:
    """Tests for natural flow searches within a reach."""

    def test_downstream_in_reach(self, basin):
        basin.find_node("M2").iFlag_natural_flow = True
        assert basin.find_downstream_natural_flow_node_in_reach(basin.find_node("M3")).sNodeID == "M2"

    def test_downstream_none_found(self, basin):
        basin.find_node("M2").iFlag_natural_flow = True
        assert basin.find_downstream_natural_flow_node_in_reach(basin.find_node("M2")) is None

    def test_downstream_stops_at_reach_end(self, basin):
        basin.find_node("M1").iFlag_natural_flow = True
        assert basin.find_downstream_natural_flow_node_in_reach(basin.find_node("T2")) is None

    def test_dry_river_nodes(self, basin):
        basin.find_node("M1").iFlag_dry_river = True
        pM2 = basin.find_node("M2")
        assert basin.find_downstream_natural_flow_node_in_reach(pM2) is None
        basin.set_treat_dry_as_natural_flow(True)
        assert basin.get_treat_dry_as_natural_flow()
        assert basin.find_downstream_natural_flow_node_in_reach(pM2).sNodeID == "M1"

    def test_upstream_in_reach(self, basin):
        basin.find_node("M2").iFlag_natural_flow = True
        basin.find_node("M3").iFlag_natural_flow = True
        basin.find_node("T2").iFlag_natural_flow = True
        assert basin.find_upstream_natural_flow_node_in_reach(basin.find_node("END")).sNodeID == "M2"
        assert basin.find_upstream_natural_flow_node_in_reach(basin.find_node("M3")) is None


class TestDownstreamSearch:
    """Tests for nearest downstream node searches."""

    def test_flow_node(self, basin):
        pM3 = basin.find_node("M3")
        assert basin.find_downstream_flow_node(pM3) is None
        basin.find_node("M1").iFlag_natural_flow = True
        assert basin.find_downstream_flow_node(pM3).sNodeID == "M1"

    def test_real_node_skips_confluence(self, basin):
        pT1 = basin.find_node("T1")
        assert basin.find_next_real_downstream_node(pT1).sNodeID == "M1"
        assert basin.find_next_real_or_xconfluence_downstream_node(pT1).sNodeID == "M1"

    def test_xconfluence(self, basin):
        pT1 = basin.find_node("T1")
        assert basin.find_next_xconfluence_downstream_node(pT1) is None
        basin.find_node("CF").iType = int(NodeType.XCONFLUENCE)
        assert basin.find_next_xconfluence_downstream_node(pT1).sNodeID == "CF"
        assert basin.find_next_real_or_xconfluence_downstream_node(pT1).sNodeID == "CF"
        assert basin.find_next_real_downstream_node(pT1).sNodeID == "M1"

    def test_nothing_below_end(self, basin):
        assert basin.find_next_real_downstream_node(basin.find_node("END")) is None

    def test_most_upstream_in_reach(self, basin):
        assert basin.is_most_upstream_node_in_reach(basin.find_node("T2"))
        assert basin.is_most_upstream_node_in_reach(basin.find_node("M3"))
        assert not basin.is_most_upstream_node_in_reach(basin.find_node("CF"))


class TestUpstreamCollection:
    """Tests for find_upstream_nodes and find_upstream_flow_nodes."""

    def test_all_upstream(self, basin):
        aNode = basin.find_upstream_nodes(basin.find_node("CF"))
        assert node_ids(aNode) == ["CF", "T1", "T2", "M2", "M3"]

    def test_without_first_node(self, basin):
        aNode = basin.find_upstream_nodes(basin.find_node("CF"), iFlag_add_first_node=False)
        assert node_ids(aNode) == ["T1", "T2", "M2", "M3"]

    @pytest.mark.parametrize("aStop, aExpected", [
        (["T1"], ["CF", "T1", "M2", "M3"]),
        (["-t1"], ["CF", "M2", "M3"]),
        (["-T1", "M2"], ["CF", "M2"]),
    ])
    def test_stop_ids(self, basin, aStop, aExpected):
        aNode = basin.find_upstream_nodes(basin.find_node("CF"), True, aStop)
        assert node_ids(aNode) == aExpected

    def test_upstream_flow_nodes(self, basin):
        assert node_ids(basin.find_upstream_flow_nodes(basin.find_node("END"))) == ["M1"]
        assert node_ids(basin.find_upstream_flow_nodes(basin.find_node("M1"))) == ["M3"]

    def test_upstream_flow_nodes_with_targets(self, basin):
        aNode = basin.find_upstream_flow_nodes(basin.find_node("M1"), SetprfTargets(["T2"]))
        assert node_ids(aNode) == ["T2", "M3"]
