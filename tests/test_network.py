"""Tests for core/network.py and the pyrivernetwork facade."""

import pytest

from rivernetwork import pyrivernetwork, pylabel, pynode, NetworkConfig, NodeType, UpstreamOrder
from rivernetwork.core.network import NodeNetwork
from rivernetwork.exceptions import MalformedNetworkError

from network_helpers import node_ids


class TestNodeNetwork:
    """Tests for the node arena."""

    @pytest.fixture
    def network(self):
        network = NodeNetwork()
        for sNodeID in ("D", "U1", "U2"):
            network.register_node(pynode(sNodeID, NodeType.DIV))
        return network

    def nodes(self, network):
        return {pNode.sNodeID: pNode for pNode in network.get_registered_nodes()}

    def test_handles_are_unique(self, network):
        aHandle = [pNode.lHandle for pNode in network.get_registered_nodes()]
        assert len(set(aHandle)) == 3

    def test_link_and_remove(self, network):
        aNode = self.nodes(network)
        network.link_upstream(aNode["D"], aNode["U1"])
        network.insert_upstream(aNode["D"], 0, aNode["U2"])
        assert node_ids(network.get_upstream_nodes(aNode["D"])) == ["U2", "U1"]
        assert network.get_downstream(aNode["U1"]) is aNode["D"]
        assert network.remove_upstream(aNode["D"], aNode["U2"])
        assert network.get_downstream(aNode["U2"]) is None
        assert not network.remove_upstream(aNode["D"], aNode["U2"])

    def test_replace_upstream(self, network):
        aNode = self.nodes(network)
        network.link_upstream(aNode["D"], aNode["U1"])
        pOld = network.replace_upstream(aNode["D"], 0, aNode["U2"])
        assert pOld is aNode["U1"]
        assert pOld.lHandle_downstream is None
        assert network.get_upstream_index(aNode["D"], aNode["U2"]) == 0

    def test_relink_from_records(self, network):
        aNode = self.nodes(network)
        aNode["D"].aNodeID_upstream = ["U1", "U2"]
        aNode["U1"].sNodeID_downstream = "D"
        aNode["U2"].sNodeID_downstream = "D"
        network.relink_from_records(list(aNode.values()))
        assert node_ids(network.get_upstream_nodes(aNode["D"])) == ["U1", "U2"]
        assert network.get_downstream(aNode["U2"]) is aNode["D"]

    def test_relink_unknown_record(self, network):
        aNode = self.nodes(network)
        aNode["U1"].sNodeID_downstream = "MISSING"
        with pytest.raises(MalformedNetworkError):
            network.relink_from_records(list(aNode.values()))

    def test_release(self, network):
        aNode = self.nodes(network)
        network.release_node(aNode["U1"])
        assert not network.contains(aNode["U1"])
        assert aNode["U1"].lHandle == -1


class TestFacade:
    """Tests for pyrivernetwork."""

    def test_empty(self):
        network = pyrivernetwork()
        assert network.get_end_node() is None
        assert network.get_most_upstream_node() is None
        assert network.get_node_list() == []
        assert network.validate_invariants() == []

    def test_end_node_from_config(self):
        pConfig = NetworkConfig(iFlag_add_end_node=True, sEnd_node_id="OUTLET",
                                iUpstream_order=UpstreamOrder.TRIBS_ADDED_LAST)
        network = pyrivernetwork(pConfig=pConfig)
        pEnd = network.get_end_node()
        assert pEnd.sNodeID == "OUTLET"
        assert pEnd.iType == NodeType.END
        assert (pEnd.iSerial, pEnd.iComputational_order, pEnd.iReach_counter) == (1, 1, 1)
        assert pEnd.iUpstream_order == UpstreamOrder.TRIBS_ADDED_LAST
        assert network.get_node_count() == 1

    def test_treat_dry_from_config(self):
        network = pyrivernetwork(pConfig=NetworkConfig(iFlag_treat_dry_as_natural_flow=True))
        assert network.get_treat_dry_as_natural_flow()

    def test_describe_node(self, chain):
        sText = chain.describe_node(chain.find_node("A"))
        assert sText == '"A" T=FLO T#=1 RC=1 RL=1 #=2 #inR=2 CO=2 DWN="END" #up=1 UP=[0]:"B"'

    def test_labels(self, chain):
        chain.add_label(pylabel(1.0, 2.0, 12.0, 0, "Upper basin"))
        aLabel = chain.get_labels()
        assert len(aLabel) == 1
        assert aLabel[0].sText == "Upper basin"

    def test_check_unique_id(self, chain):
        assert chain.check_unique_id("Z") == "Z"
        assert chain.check_unique_id("b") == "b_1"
