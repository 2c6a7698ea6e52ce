"""Tests for classes/node.py - node records and type lookup."""

import logging

import pytest

from rivernetwork import pynode, NodeType, UpstreamOrder, lookup_type
from rivernetwork.classes.node import get_type_abbreviation, get_type_name, get_type_verbose_name


class TestLookupType:
    """Tests for node type text lookup."""

    @pytest.mark.parametrize("sText, iExpected", [
        ("CON", NodeType.CONFLUENCE),
        ("confluence", NodeType.CONFLUENCE),
        ("CONFL", NodeType.CONFLUENCE),
        ("Diversion", NodeType.DIV),
        ("div", NodeType.DIV),
        ("D&W", NodeType.DIV_AND_WELL),
        ("DW", NodeType.DIV_AND_WELL),
        ("DiversionAndWell", NodeType.DIV_AND_WELL),
        ("station", NodeType.FLOW),
        ("Streamflow", NodeType.FLOW),
        ("FLO", NodeType.FLOW),
        ("Instream Flow", NodeType.ISF),
        ("minflow", NodeType.ISF),
        ("string", NodeType.LABEL),
        ("LabelNode", NodeType.LABEL_NODE),
        ("reservoir", NodeType.RES),
        ("XCN", NodeType.XCONFLUENCE),
        ("bfl", NodeType.BASEFLOW),
        ("blank", NodeType.BLANK),
        ("END", NodeType.END),
        ("plan", NodeType.PLAN),
    ])
    def test_known_text(self, sText, iExpected):
        assert lookup_type(sText) == iExpected

    def test_unknown_text_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert lookup_type("canal") == -1
        assert "Unknown node type" in caplog.text

    def test_names(self):
        assert get_type_abbreviation(NodeType.DIV_AND_WELL) == "D&W"
        assert get_type_name(NodeType.CONFLUENCE) == "CONFL"
        assert get_type_verbose_name(NodeType.FLOW) == "Streamflow"
        assert get_type_name(99) == ""
        assert get_type_abbreviation(-1) == ""


class TestNode:
    """Tests for pynode."""

    def test_defaults(self):
        pNode = pynode("N1", NodeType.DIV)
        assert pNode.iSerial == 0
        assert pNode.iComputational_order == -1
        assert pNode.iTributary_number == 1
        assert pNode.iReach_counter == 0
        assert pNode.iNode_in_reach == 1
        assert pNode.iUpstream_order == UpstreamOrder.TRIBS_ADDED_FIRST
        assert pNode.dLabel_angle == 45.0
        assert not pNode.iFlag_natural_flow
        assert pNode.lHandle_downstream is None

    def test_reset(self):
        pNode = pynode("N1", NodeType.DIV)
        pNode.iSerial = 7
        pNode.reset(NodeType.OTHER, True, True)
        assert pNode.iType == NodeType.OTHER
        assert pNode.iFlag_natural_flow and pNode.iFlag_import
        assert pNode.iSerial == 0

    def test_upstream_position_ignores_case(self):
        pNode = pynode("N1", NodeType.DIV)
        pNode.aNodeID_upstream = ["up1", "Up2"]
        assert pNode.get_upstream_position("UP2") == 1
        assert pNode.get_upstream_position("up3") == -1

    def test_parse_area_precip(self):
        pNode = pynode("N1", NodeType.OTHER)
        pNode.parse_area_precip("2.5*4")
        assert pNode.dWater == pytest.approx(10.0)
        assert pNode.iFlag_natural_flow

    def test_parse_area_precip_zero(self):
        pNode = pynode("N1", NodeType.OTHER)
        pNode.parse_area_precip("0*4")
        assert not pNode.iFlag_natural_flow

    def test_parse_area_precip_rejects_other_operators(self):
        pNode = pynode("N1", NodeType.OTHER)
        with pytest.raises(ValueError):
            pNode.parse_area_precip("2+4")

    def test_type_groups(self):
        assert pynode("R", NodeType.RES).is_physical()
        assert not pynode("C", NodeType.CONFLUENCE).is_physical()
        assert not pynode("C", NodeType.XCONFLUENCE).is_real()
        assert pynode("E", NodeType.END).is_real()
        assert pynode("C", NodeType.XCONFLUENCE).is_confluence()
