"""Tests for interface reference validation."""

from collections.abc import Callable

import pytest

from tests.conftest import NodesetBuilder
from xpath_plugins.models import ConfigNode
from xpath_plugins.plugins.interface_leafref import (
    NOT_VIF_INTERFACE,
    is_interface_leafref,
    is_interface_leafref_original,
    is_l3_interface_leafref,
    parse_interface_name,
)
from xpath_plugins.tree import create_tree, find_first_node

START_PATH = "/feature/intf-ref"


class TestParseInterfaceName:
    """Tests for parse_interface_name."""

    def test_base_interface(self) -> None:
        """Test a plain interface reference."""
        assert parse_interface_name("dp0s1") == ("dp0s1", False, NOT_VIF_INTERFACE)

    def test_vif_interface(self) -> None:
        """Test a VIF reference."""
        assert parse_interface_name("dp0s1.10") == ("dp0s1", True, "10")

    def test_too_many_parts(self) -> None:
        """Test that more than one '.' is not a VIF reference."""
        assert parse_interface_name("dp0s1.10.20") == ("dp0s1", False, NOT_VIF_INTERFACE)


class TestInterfaceLeafref:
    """Tests for the three interface leafref variants."""

    @pytest.mark.parametrize(
        ("ref", "exp_all", "exp_l3", "exp_orig"),
        [
            pytest.param("dp0s2", True, True, True, id="valid-tagnode"),
            pytest.param("dp0s999", False, False, False, id="invalid-tagnode"),
            pytest.param("erspan4", True, True, True, id="valid-ifname"),
            pytest.param("erspan999", False, False, False, id="invalid-ifname"),
            pytest.param("dp0s1.1", True, True, True, id="valid-tagnode-vif"),
            pytest.param("sw1", True, False, False, id="valid-switch"),
            pytest.param("sw2.1", True, True, True, id="valid-switch-vif"),
            pytest.param("dp0s1.2", False, False, False, id="invalid-vif"),
            pytest.param("vhost3", True, True, False, id="valid-vhost"),
            pytest.param("bp1", True, False, False, id="valid-backplane"),
            pytest.param("dp0s3.1", False, False, False, id="interface-without-vifs"),
        ],
    )
    def test_reference(
        self,
        nodeset_at: NodesetBuilder,
        interfaces_config: list[list[str]],
        ref: str,
        exp_all: bool,
        exp_l3: bool,
        exp_orig: bool,
    ) -> None:
        """Test each variant against interfaces of every kind."""
        ns = nodeset_at([*interfaces_config, ["feature", f"intf-ref+{ref}"]], START_PATH)

        assert is_interface_leafref(ns) is exp_all
        assert is_l3_interface_leafref(ns) is exp_l3
        assert is_interface_leafref_original(ns) is exp_orig

    @pytest.mark.parametrize(
        "func", [is_interface_leafref, is_l3_interface_leafref, is_interface_leafref_original]
    )
    def test_excluded_types_only_restrict_base_matches(
        self,
        nodeset_at: NodesetBuilder,
        func: Callable[[list[ConfigNode]], bool],
    ) -> None:
        """Test a VIF on an excluded type is accepted like by the unrestricted variant."""
        config = [
            ["interfaces", "switch/name+sw1", "vif/tagnode+5"],
            ["interfaces", "backplane/name+bp1", "vif/tagnode+6"],
            ["interfaces", "vhost/name+vhost1", "vif/tagnode+7"],
        ]
        for ref in ("sw1.5", "bp1.6", "vhost1.7"):
            ns = nodeset_at([*config, ["feature", f"intf-ref+{ref}"]], START_PATH)
            assert func(ns) is True
            assert is_interface_leafref(ns) is True

    def test_empty_nodeset(self) -> None:
        """Test an empty nodeset is rejected."""
        assert is_interface_leafref([]) is False

    def test_multiple_nodes(self, interfaces_config: list[list[str]]) -> None:
        """Test a nodeset with more than one node is rejected."""
        root = create_tree(
            [*interfaces_config, ["feature", "intf-ref+dp0s1"], ["other", "intf-ref+dp0s1"]]
        )
        ns = [find_first_node(root, START_PATH), find_first_node(root, "/other/intf-ref")]
        assert is_interface_leafref(ns) is False

    def test_no_interfaces_container(self, nodeset_at: NodesetBuilder) -> None:
        """Test a tree without /interfaces never matches."""
        ns = nodeset_at([["feature", "intf-ref+dp0s1"]], START_PATH)
        assert is_interface_leafref(ns) is False

    def test_state_only_interface_ignored(self, nodeset_at: NodesetBuilder) -> None:
        """Test that operational-only interface entries are not references."""
        ns = nodeset_at(
            [["interfaces", "~dataplane/tagnode+dp0s9"], ["feature", "intf-ref+dp0s9"]],
            START_PATH,
        )
        assert is_interface_leafref(ns) is False

    def test_idempotent(
        self, nodeset_at: NodesetBuilder, interfaces_config: list[list[str]]
    ) -> None:
        """Test repeated calls on the same tree give the same answer."""
        ns = nodeset_at([*interfaces_config, ["feature", "intf-ref+sw2.1"]], START_PATH)
        results = {is_l3_interface_leafref(ns) for _ in range(3)}
        assert results == {True}
