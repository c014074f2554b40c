"""Pytest configuration and fixtures for xpath-plugins tests."""

from collections.abc import Callable, Sequence

import pytest

from xpath_plugins.models import ConfigNode
from xpath_plugins.tree import create_tree, find_first_node

NodesetBuilder = Callable[[Sequence[Sequence[str]], str], list[ConfigNode]]


@pytest.fixture
def nodeset_at() -> NodesetBuilder:
    """Fixture building a tree and returning a single-node nodeset from it.

    Usage:
        def test_something(nodeset_at):
            ns = nodeset_at([["interfaces", "dataplane/tagnode+dp0s1"]],
                            "/interfaces/dataplane")

    Returns:
        Callable taking (config paths, start path) and returning [node]
    """

    def build(config: Sequence[Sequence[str]], start_path: str) -> list[ConfigNode]:
        root = create_tree(config)
        return [find_first_node(root, start_path)]

    return build


@pytest.fixture
def interfaces_config() -> list[list[str]]:
    """Interfaces of several types, with and without vifs.

    Returns:
        Tree paths covering tagnode, ifname and name keyed interfaces
    """
    return [
        # dataplane tagnode
        ["interfaces", "dataplane/tagnode+dp0s1", "address@1111"],
        ["interfaces", "dataplane/tagnode+dp0s2", "address@2222"],
        ["interfaces", "dataplane/tagnode+dp0s2", "address@2223"],
        ["interfaces", "dataplane/tagnode+dp0s3"],
        # dataplane tagnode + vif
        ["interfaces", "dataplane/tagnode+dp0s1", "vif/tagnode+1"],
        # switch (not L3)
        ["interfaces", "switch/name+sw1"],
        # switch vif
        ["interfaces", "switch/name+sw2", "vif/tagnode+1"],
        # erspan with ifname
        ["interfaces", "erspan/ifname+erspan4"],
        # backplane (excluded from L3)
        ["interfaces", "backplane/name+bp1"],
        # vhost
        ["interfaces", "vhost/name+vhost3"],
    ]
