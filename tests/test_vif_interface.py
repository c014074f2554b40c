"""Tests for VIF validation."""

import random

import pytest

from tests.conftest import NodesetBuilder
from xpath_plugins.models import VifData
from xpath_plugins.plugins.vif_interface import (
    check_implicit_vlan_id_unique,
    check_implicit_vlan_id_unique_internal,
    check_vlan_values_do_not_conflict,
    check_vlan_values_do_not_conflict_internal,
    get_vif_data,
    parent_interface_string_length,
    validate_vif_vlan_settings,
)
from xpath_plugins.tree import TreeNode, create_tree, find_first_node

INTF_PATH = "/interfaces/bonding"
VIF_PATH = "/interfaces/bonding/vif"


def _vif(vif: str, *leaves: str, intf: str = "dp0bond1") -> list[str]:
    return ["interfaces", f"bonding/tagnode+{intf}", f"vif/tagnode+{vif}", *leaves]


class TestParentInterfaceStringLength:
    """Tests for parent-interface-string-length."""

    @pytest.mark.parametrize(
        ("intf", "expected"),
        [
            pytest.param("bonding/tagnode+dp0bond1", 8, id="tagnode"),
            pytest.param("bonding/ifname+dp0bond1", 8, id="ifname"),
            pytest.param("bonding/name+dp0bond1", 8, id="name"),
            pytest.param("bonding/notTagnode+dp0bond1", 0, id="no-name-leaf"),
        ],
    )
    def test_parent_name_length(self, nodeset_at: NodesetBuilder, intf: str, expected: int) -> None:
        """Test each parent name leaf is recognised."""
        ns = nodeset_at([["interfaces", intf, "vif/tagnode+22"]], VIF_PATH)
        assert parent_interface_string_length(ns) == expected

    def test_tagnode_preferred(self) -> None:
        """Test tagnode wins over ifname and name."""
        root = TreeNode("")
        intf = root.add_child("bonding", "x")
        intf.add_child("name", "a-long-name")
        intf.add_child("ifname", "medium")
        intf.add_child("tagnode", "dp0")
        vif = intf.add_child("vif", "22")
        assert parent_interface_string_length([vif]) == 3

    def test_no_parent(self) -> None:
        """Test a parentless node gives 0."""
        assert parent_interface_string_length([TreeNode("vif", "22")]) == 0

    def test_bad_nodeset(self) -> None:
        """Test an empty nodeset gives 0."""
        assert parent_interface_string_length([]) == 0


class TestGetVifData:
    """Tests for get_vif_data."""

    def test_reads_vlan_settings(self) -> None:
        """Test every vif's VLAN settings are read, keyed by vif id."""
        root = create_tree(
            [
                _vif("10"),
                _vif("20", "vlan+200"),
                _vif("30", "vlan+300", "inner-vlan+301"),
            ]
        )
        vifs = get_vif_data(find_first_node(root, INTF_PATH))
        assert vifs == {
            "10": VifData(vif="10"),
            "20": VifData(vif="20", vlan="200"),
            "30": VifData(vif="30", vlan="300", inner_vlan="301"),
        }

    def test_no_vifs(self) -> None:
        """Test an interface without vifs gives an empty table."""
        root = create_tree([["interfaces", "bonding/tagnode+dp0bond1"]])
        assert get_vif_data(find_first_node(root, INTF_PATH)) == {}


# (config, expected) shared by the interface-level and vif-level checks. The
# vif-level check is called on the first configured vif.
VLAN_CONFLICT_CASES = [
    pytest.param([_vif("22")], True, id="vlan-not-set"),
    pytest.param([_vif("22", "vlan+333")], True, id="vlan-set-once"),
    pytest.param(
        [_vif("44", "vlan+555"), _vif("66", "vlan+666")],
        True,
        id="vlan-set-once-other-vlans",
    ),
    pytest.param(
        [_vif("44", "vlan+777"), _vif("66", "vlan+777")],
        False,
        id="vlan-set-twice",
    ),
    pytest.param(
        [
            _vif("44", "vlan+777"),
            _vif("44", "inner-vlan+888"),
            _vif("66", "vlan+777"),
            _vif("66", "inner-vlan+999"),
        ],
        True,
        id="vlan-and-inner-vlan-set-twice",
    ),
    pytest.param(
        [
            _vif("44", "vlan+777"),
            _vif("44", "inner-vlan+888"),
            _vif("66", "vlan+777"),
        ],
        False,
        id="vlan-set-twice-inner-once",
    ),
]

IMPLICIT_VLAN_CASES = [
    pytest.param([_vif("22", "vlan+222")], True, id="vlan-set"),
    pytest.param([_vif("22", "inner-vlan+222")], True, id="inner-vlan-set"),
    pytest.param([_vif("22"), _vif("33", "vlan+333")], True, id="implicit-vlan-unique"),
    pytest.param([_vif("44"), _vif("55", "vlan+44")], False, id="implicit-vlan-reused"),
]


class TestCheckVlanValuesDoNotConflict:
    """Tests for the outer VLAN conflict check."""

    @pytest.mark.parametrize(("config", "expected"), VLAN_CONFLICT_CASES)
    def test_interface_level(
        self, nodeset_at: NodesetBuilder, config: list[list[str]], expected: bool
    ) -> None:
        """Test validate-vif-vlan-settings on the interface."""
        assert validate_vif_vlan_settings(nodeset_at(config, INTF_PATH)) is expected

    @pytest.mark.parametrize(("config", "expected"), VLAN_CONFLICT_CASES)
    def test_vif_level(
        self, nodeset_at: NodesetBuilder, config: list[list[str]], expected: bool
    ) -> None:
        """Test check-vlan-values-do-not-conflict on the first vif."""
        assert check_vlan_values_do_not_conflict(nodeset_at(config, VIF_PATH)) is expected

    def test_inner_vlans_counted_across_all_vifs(self) -> None:
        """Test inner VLANs on vifs with other VLAN ids still count."""
        vifs = {
            "44": VifData(vif="44", vlan="777"),
            "66": VifData(vif="66", vlan="777"),
            "88": VifData(vif="88", vlan="900", inner_vlan="1"),
            "99": VifData(vif="99", vlan="901", inner_vlan="2"),
        }
        assert check_vlan_values_do_not_conflict_internal(vifs["44"], vifs) is True

    def test_vif_without_tagnode(self) -> None:
        """Test a vif node with no tagnode leaf passes."""
        vif = TreeNode("").add_child("bonding", "dp0bond1").add_child("vif", "22")
        vif.add_child("vlan", "100")
        assert check_vlan_values_do_not_conflict([vif]) is True

    def test_bad_nodeset(self) -> None:
        """Test an empty nodeset fails."""
        assert check_vlan_values_do_not_conflict([]) is False
        assert validate_vif_vlan_settings([]) is False


class TestCheckImplicitVlanIdUnique:
    """Tests for the implicit VLAN id check."""

    @pytest.mark.parametrize(("config", "expected"), IMPLICIT_VLAN_CASES)
    def test_interface_level(
        self, nodeset_at: NodesetBuilder, config: list[list[str]], expected: bool
    ) -> None:
        """Test validate-vif-vlan-settings on the interface."""
        assert validate_vif_vlan_settings(nodeset_at(config, INTF_PATH)) is expected

    @pytest.mark.parametrize(("config", "expected"), IMPLICIT_VLAN_CASES)
    def test_vif_level(
        self, nodeset_at: NodesetBuilder, config: list[list[str]], expected: bool
    ) -> None:
        """Test check-implicit-vlan-id-unique on the first vif."""
        assert check_implicit_vlan_id_unique(nodeset_at(config, VIF_PATH)) is expected

    def test_empty_vlan_never_matches(self) -> None:
        """Test vifs without an explicit vlan don't clash with each other."""
        vifs = {"": VifData(vif=""), "10": VifData(vif="10")}
        assert check_implicit_vlan_id_unique_internal(vifs[""], vifs) is True

    def test_bad_nodeset(self) -> None:
        """Test an empty nodeset fails."""
        assert check_implicit_vlan_id_unique([]) is False


class TestValidateVifVlanSettings:
    """Tests for properties of the interface-level check."""

    def test_order_independent(self) -> None:
        """Test the result doesn't depend on configuration order."""
        config = [
            _vif("10", "vlan+100", "inner-vlan+1"),
            _vif("11", "vlan+100", "inner-vlan+2"),
            _vif("12", "vlan+200"),
            _vif("13"),
            _vif("14", "vlan+14"),
        ]
        shuffled = list(config)
        random.Random(4).shuffle(shuffled)
        for paths in (config, shuffled, list(reversed(config))):
            root = create_tree(paths)
            assert validate_vif_vlan_settings([find_first_node(root, INTF_PATH)]) is True

    def test_any_bad_vif_fails_interface(self, nodeset_at: NodesetBuilder) -> None:
        """Test one conflicting vif among many fails the interface."""
        config = [_vif(str(vif), f"vlan+{vif + 100}") for vif in range(10, 20)]
        config.append(_vif("50", "vlan+110"))
        assert validate_vif_vlan_settings(nodeset_at(config, INTF_PATH)) is False

    def test_interface_without_vifs(self, nodeset_at: NodesetBuilder) -> None:
        """Test an interface with no vifs passes."""
        ns = nodeset_at([["interfaces", "bonding/tagnode+dp0bond1"]], INTF_PATH)
        assert validate_vif_vlan_settings(ns) is True

    def test_idempotent(self, nodeset_at: NodesetBuilder) -> None:
        """Test repeated calls on the same tree give the same answer."""
        ns = nodeset_at([_vif("44"), _vif("55", "vlan+44")], INTF_PATH)
        assert [validate_vif_vlan_settings(ns) for _ in range(3)] == [False] * 3
