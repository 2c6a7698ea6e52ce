"""Shared fixtures for rivernetwork tests."""

import pytest

from rivernetwork import pyrivernetwork, UpstreamOrder

from network_helpers import make_nodes, CHAIN_RECORDS, BASIN_RECORDS, BASIN_RECORDS_LAST


@pytest.fixture
def chain():
    """END <- A <- B."""
    return pyrivernetwork(make_nodes(CHAIN_RECORDS), iFlag_end_first=True)


@pytest.fixture
def basin():
    return pyrivernetwork(make_nodes(BASIN_RECORDS), iFlag_end_first=True)


@pytest.fixture
def basin_last():
    aNode = make_nodes(BASIN_RECORDS_LAST, UpstreamOrder.TRIBS_ADDED_LAST)
    return pyrivernetwork(aNode, iFlag_end_first=True)
