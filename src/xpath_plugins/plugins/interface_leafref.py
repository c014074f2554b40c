"""Interface reference validation.

Replaces the 'interface leafref' must statements used across YANG modules:
the referencing leaf's value must name a configured interface, written as
either ``<ifname>`` or ``<ifname>.<vif-id>``.

Every interface list entry sits directly under /interfaces and reports its
key as its value, so one wildcard lookup covers all interface types without
caring whether a type is keyed by 'tagnode', 'ifname' or 'name'.
"""

import logging
from collections.abc import Collection, Sequence

from xpath_plugins.models import ConfigNode, CustomFunctionInfo, DatumType, get_filter

logger = logging.getLogger(__name__)

# Filters never change, so create once and reuse.
INTF_FILTER = get_filter("interfaces")
INTF_TYPES_FILTER = get_filter("*")
VIF_FILTER = get_filter("vif")

NOT_VIF_INTERFACE = "not-VIF-interface"

# Interface types excluded from non-VIF matches by each variant
L2_INTERFACE_TYPES = ("switch", "backplane")
ORIGINAL_EXCLUDED_TYPES = ("switch", "vhost", "backplane")


def parse_interface_name(intf_name: str) -> tuple[str, bool, str]:
    """Split an interface reference into base name and VIF id.

    Args:
        intf_name: Reference value (e.g., "dp0s1" or "dp0s1.10")

    Returns:
        (base name, is VIF reference, VIF id)
    """
    parts = intf_name.split(".")
    if len(parts) == 2:
        return parts[0], True, parts[1]
    return parts[0], False, NOT_VIF_INTERFACE


def is_interface_leafref(nodeset: Sequence[ConfigNode]) -> bool:
    """is-interface-leafref(<nodeset>): match any interface, including VIFs."""
    return _is_interface_leafref_internal(nodeset, ())


def is_l3_interface_leafref(nodeset: Sequence[ConfigNode]) -> bool:
    """is-l3-interface-leafref(<nodeset>): any VIF, and any base interface
    except switch and backplane.

    NB: unlike the must statement it replaces, this allows vhost interfaces.
    """
    return _is_interface_leafref_internal(nodeset, L2_INTERFACE_TYPES)


def is_interface_leafref_original(nodeset: Sequence[ConfigNode]) -> bool:
    """is-interface-leafref-original(<nodeset>): any VIF, and any base
    interface except switch, vhost and backplane.

    Matches the 'interface leafref' must statement it replaces exactly.
    """
    return _is_interface_leafref_internal(nodeset, ORIGINAL_EXCLUDED_TYPES)


def _is_interface_leafref_internal(
    nodeset: Sequence[ConfigNode],
    excluded_types: Collection[str],
) -> bool:
    # May be applied to any node, but only to a single one
    if len(nodeset) != 1:
        logger.debug("Interface leafref called on %d nodes; expected 1", len(nodeset))
        return False
    src_node = nodeset[0]
    intf_val, is_vif, vif_val = parse_interface_name(src_node.value())

    intf_nodes = src_node.root().children(INTF_FILTER, sort=True)
    if len(intf_nodes) != 1:
        logger.debug("Expected one 'interfaces' container, found %d", len(intf_nodes))
        return False

    for intf in intf_nodes[0].children(INTF_TYPES_FILTER, sort=True):
        if intf.value() != intf_val:
            continue

        if not is_vif:
            # Excluded types are skipped for base matches only; VIFs on
            # them are still valid references.
            if intf.name() in excluded_types:
                continue
            return True

        # All VIFs are L3.
        for vif in intf.children(VIF_FILTER, sort=True):
            if vif.value() == vif_val:
                return True

        # Matched the base interface, so no matching VIF means no match.
        logger.debug("Interface %s has no vif %s", intf_val, vif_val)
        return False

    logger.debug("No interface matches reference %r", src_node.value())
    return False


REGISTRATION_DATA = [
    CustomFunctionInfo(
        name="is-interface-leafref",
        fn=is_interface_leafref,
        args=(DatumType.NODESET,),
        ret_type=DatumType.BOOL,
        default=False,
    ),
    CustomFunctionInfo(
        name="is-l3-interface-leafref",
        fn=is_l3_interface_leafref,
        args=(DatumType.NODESET,),
        ret_type=DatumType.BOOL,
        default=False,
    ),
    CustomFunctionInfo(
        name="is-interface-leafref-original",
        fn=is_interface_leafref_original,
        args=(DatumType.NODESET,),
        ret_type=DatumType.BOOL,
        default=False,
    ),
]
