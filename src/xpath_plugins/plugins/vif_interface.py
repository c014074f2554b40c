"""VIF (sub-interface) validation.

Replaces must statements on interface vif lists whose XPath forms loop over
every sibling vif for every vif, which gets expensive with many vifs. Here
the siblings' VLAN settings are read once into a table per call.
"""

import logging
from collections.abc import Sequence

from xpath_plugins.common import get_descendant_nodes_from_single_node, get_single_child_value
from xpath_plugins.models import ConfigNode, CustomFunctionInfo, DatumType, VifData, get_filter

logger = logging.getLogger(__name__)

# Filters never change, so create once and reuse.
IFNAME_FILTER = get_filter("ifname")
INNER_VLAN_FILTER = get_filter("inner-vlan")
NAME_FILTER = get_filter("name")
TAGNODE_FILTER = get_filter("tagnode")
VIF_FILTER = get_filter("vif")
VLAN_FILTER = get_filter("vlan")


def parent_interface_string_length(nodeset: Sequence[ConfigNode]) -> int:
    """parent-interface-string-length(<nodeset>)

    Replaces the parent-name half of::

        must "(string-length(../*[local-name(.) = 'tagnode' or
                                  local-name(.) = 'ifname' or
                                  local-name(.) = 'name'])
               + string-length(tagnode)) < 15"

    as::

        configd:must "parent-interface-string-length(.) + string-length(tagnode) < 15"

    Returns:
        Length of the parent interface's name, or 0 if it can't be found
    """
    # May be applied to any node, but only to a single one
    if len(nodeset) != 1:
        return 0
    parent = nodeset[0].parent()
    if parent is None:
        return 0

    for key_filter in (TAGNODE_FILTER, IFNAME_FILTER, NAME_FILTER):
        name, ok = get_single_child_value(parent, key_filter)
        if ok:
            return len(name)
    return 0


def get_vif_data(intf_node: ConfigNode) -> dict[str, VifData]:
    """Read the VLAN settings of every vif on an interface, keyed by vif id."""
    vifs: dict[str, VifData] = {}
    for vif_node in get_descendant_nodes_from_single_node(intf_node, [VIF_FILTER]):
        vif_id, _ = get_single_child_value(vif_node, TAGNODE_FILTER)
        vlan, _ = get_single_child_value(vif_node, VLAN_FILTER)
        inner_vlan, _ = get_single_child_value(vif_node, INNER_VLAN_FILTER)
        vifs[vif_id] = VifData(vif=vif_id, vlan=vlan, inner_vlan=inner_vlan)
    return vifs


def validate_vif_vlan_settings(nodeset: Sequence[ConfigNode]) -> bool:
    """validate-vif-vlan-settings(<nodeset>)

    Called on an interface; applies both of these to each of its vifs::

        must "not(vlan) or (count(../vif[vlan = current()/vlan]) = 1) or
              (count(../vif[vlan = current()/vlan]/inner-vlan) =
               count(../vif[vlan = current()/vlan]))"

        must "vlan or inner-vlan or not(../vif[vlan = current()/tagnode])"
    """
    # May be applied to any node, but only to a single one
    if len(nodeset) != 1:
        return False
    vifs = get_vif_data(nodeset[0])

    for vif in vifs.values():
        if not check_vlan_values_do_not_conflict_internal(vif, vifs):
            return False
        if not check_implicit_vlan_id_unique_internal(vif, vifs):
            return False
    return True


def check_vlan_values_do_not_conflict_internal(
    current_vif: VifData,
    vifs: dict[str, VifData],
) -> bool:
    """Check one vif's outer VLAN against its siblings.

    A VLAN id used by several vifs is only acceptable when inner VLANs are
    used to tell them apart: the number of vifs with an inner VLAN must equal
    the number sharing this VLAN id.
    """
    # 'not(vlan)'
    if not current_vif.vlan:
        return True

    matching_vlan_count = 0
    inner_vlan_count = 0
    for vif in vifs.values():
        if vif.vlan == current_vif.vlan:
            matching_vlan_count += 1
        if vif.inner_vlan:
            inner_vlan_count += 1

    if matching_vlan_count == 1:
        return True
    if matching_vlan_count == inner_vlan_count:
        return True

    logger.debug(
        "vif %s: vlan %s used by %d vifs but %d have inner-vlan",
        current_vif.vif,
        current_vif.vlan,
        matching_vlan_count,
        inner_vlan_count,
    )
    return False


def check_vlan_values_do_not_conflict(nodeset: Sequence[ConfigNode]) -> bool:
    """check-vlan-values-do-not-conflict(<nodeset>)

    Per-vif form of the VLAN conflict check in validate-vif-vlan-settings.
    """
    # May be applied to any node, but only to a single one
    if len(nodeset) != 1:
        return False
    vif_node = nodeset[0]

    # 'not(vlan)', checked here first to avoid building the vif table
    _, ok = get_single_child_value(vif_node, VLAN_FILTER)
    if not ok:
        return True

    current_vif_id, ok = get_single_child_value(vif_node, TAGNODE_FILTER)
    if not ok:
        return True

    intf_node = vif_node.parent()
    if intf_node is None:
        return True
    vifs = get_vif_data(intf_node)

    current_vif = vifs.get(current_vif_id, VifData(vif=current_vif_id))
    return check_vlan_values_do_not_conflict_internal(current_vif, vifs)


def check_implicit_vlan_id_unique_internal(
    current_vif: VifData,
    vifs: dict[str, VifData],
) -> bool:
    """Check that a vif's implicit VLAN id isn't another vif's explicit one.

    With neither vlan nor inner-vlan set, a vif's id is its VLAN id.
    """
    # 'vlan or inner-vlan'
    if current_vif.vlan or current_vif.inner_vlan:
        return True

    # 'not(../vif[vlan = current()/tagnode])'
    for vif in vifs.values():
        if vif.vlan and vif.vlan == current_vif.vif:
            logger.debug(
                "vif %s: implicit vlan is explicit vlan of vif %s", current_vif.vif, vif.vif
            )
            return False
    return True


def check_implicit_vlan_id_unique(nodeset: Sequence[ConfigNode]) -> bool:
    """check-implicit-vlan-id-unique(<nodeset>)

    Per-vif form of the implicit VLAN check in validate-vif-vlan-settings.
    """
    # May be applied to any node, but only to a single one
    if len(nodeset) != 1:
        return False
    vif_node = nodeset[0]

    # 'vlan or inner-vlan'
    for xfilter in (VLAN_FILTER, INNER_VLAN_FILTER):
        _, ok = get_single_child_value(vif_node, xfilter)
        if ok:
            return True

    current_vif_id, ok = get_single_child_value(vif_node, TAGNODE_FILTER)
    if not ok:
        return True

    intf_node = vif_node.parent()
    if intf_node is None:
        return True
    vifs = get_vif_data(intf_node)

    current_vif = vifs.get(current_vif_id, VifData(vif=current_vif_id))
    return check_implicit_vlan_id_unique_internal(current_vif, vifs)


REGISTRATION_DATA = [
    CustomFunctionInfo(
        name="parent-interface-string-length",
        fn=parent_interface_string_length,
        args=(DatumType.NODESET,),
        ret_type=DatumType.NUMBER,
        default=0,
    ),
    CustomFunctionInfo(
        name="validate-vif-vlan-settings",
        fn=validate_vif_vlan_settings,
        args=(DatumType.NODESET,),
        ret_type=DatumType.BOOL,
        default=False,
    ),
    CustomFunctionInfo(
        name="check-vlan-values-do-not-conflict",
        fn=check_vlan_values_do_not_conflict,
        args=(DatumType.NODESET,),
        ret_type=DatumType.BOOL,
        default=False,
    ),
    CustomFunctionInfo(
        name="check-implicit-vlan-id-unique",
        fn=check_implicit_vlan_id_unique,
        args=(DatumType.NODESET,),
        ret_type=DatumType.BOOL,
        default=False,
    ),
]
