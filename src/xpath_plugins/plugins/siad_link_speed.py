"""Link speed consistency across a range of dp0xe interfaces.

On this platform a block of dp0xe ports shares one speed setting in
hardware, so fixed speeds set on enabled ports in the same block must agree.

This check is deliberately permissive: on an internal lookup failure it
passes, so a configuration is only rejected when something is definitely
wrong.
"""

import logging
import math
import re
from collections.abc import Sequence

from xpath_plugins.common import get_single_child_value
from xpath_plugins.models import ConfigNode, CustomFunctionInfo, DatumType, get_filter

logger = logging.getLogger(__name__)

INVALID_INTF_ID = -1
DP0XE_NAME = "dp0xe"

# Interface numbers are optionally signed decimal integers
_INTF_ID_RE = re.compile(r"[+-]?[0-9]+")

SPEED_AUTO = "auto"
RANGE_SPEEDS = ("10g", "25g")

# Filters never change, so create once and reuse.
INTF_FILTER = get_filter("interfaces")
DATAPLANE_FILTER = get_filter("dataplane")
TAGNODE_FILTER = get_filter("tagnode")
DISABLE_FILTER = get_filter("disable")
SPEED_FILTER = get_filter("speed")


def get_intf_name_and_id_for_type(
    intf_node: ConfigNode,
    intf_prefix: str,
) -> tuple[str, int, bool]:
    """Get an interface's name and numeric suffix for a name prefix.

    Args:
        intf_node: Interface list entry node
        intf_prefix: Required name prefix (e.g., "dp0xe")

    Returns:
        (name, id, True), or ("", INVALID_INTF_ID, False) if the interface
        has no single name or its name isn't prefix + number
    """
    intf_name, ok = get_single_child_value(intf_node, TAGNODE_FILTER)
    if not ok:
        return "", INVALID_INTF_ID, False
    if not intf_name.startswith(intf_prefix):
        return "", INVALID_INTF_ID, False

    suffix = intf_name[len(intf_prefix) :]
    if not _INTF_ID_RE.fullmatch(suffix):
        return "", INVALID_INTF_ID, False

    return intf_name, int(suffix), True


def _is_disabled(intf_node: ConfigNode) -> bool:
    # 'disable' is an empty leaf: present means disabled
    _, disabled = get_single_child_value(intf_node, DISABLE_FILTER)
    return disabled


def verify_siad_link_speed(
    start_intf_id: float,
    end_intf_id: float,
    nodeset: Sequence[ConfigNode],
) -> bool:
    """verify-siad-link-speed(<start>, <end>, <nodeset>)

    Generic form of the following must statement, shown for dp0xe20-23 and
    called on an interface's speed leaf::

        must "not(../tagnode = 'dp0xe20' or ... or ../tagnode = 'dp0xe23')
              or ../disable
              or current() = 'auto'
              or ((current() = '10g' or current() = '25g')
                  and (not(../../dataplane[tagnode = 'dp0xe20'])
                       or ../../dataplane[tagnode = 'dp0xe20']/disable
                       or ../../dataplane[tagnode = 'dp0xe20']/speed = current()
                       or ../../dataplane[tagnode = 'dp0xe20']/speed = 'auto')
                  and ... (same for dp0xe21-23))"

    Args:
        start_intf_id: First dp0xe index in the range (inclusive)
        end_intf_id: Last dp0xe index in the range (inclusive)
        nodeset: The speed leaf being validated

    Returns:
        False only if the speed definitely conflicts; True otherwise
    """
    # NaN and infinite bounds describe no interface range
    if not (math.isfinite(start_intf_id) and math.isfinite(end_intf_id)):
        logger.debug("Non-finite range bounds %r-%r", start_intf_id, end_intf_id)
        return True

    start_id = int(start_intf_id)
    end_id = int(end_intf_id)

    # Only one interface in range
    if end_id <= start_id:
        return True

    # May be applied to any node, but only to a single one
    if len(nodeset) != 1:
        return False
    cur_speed_node = nodeset[0]
    cur_dp_entry_node = cur_speed_node.parent()
    if cur_dp_entry_node is None:
        return True

    cur_intf_name, cur_intf_id, ok = get_intf_name_and_id_for_type(cur_dp_entry_node, DP0XE_NAME)
    if not ok:
        return True
    if cur_intf_id < start_id or cur_intf_id > end_id:
        return True

    if _is_disabled(cur_dp_entry_node):
        return True

    cur_speed = cur_speed_node.value()
    if cur_speed == SPEED_AUTO:
        return True

    if cur_speed not in RANGE_SPEEDS:
        logger.debug(
            "%s: speed %s not allowed in dp0xe%d-%d", cur_intf_name, cur_speed, start_id, end_id
        )
        return False

    intf_nodes = cur_speed_node.root().children(INTF_FILTER, sort=True)
    if len(intf_nodes) != 1:
        return True

    for other_intf_node in intf_nodes[0].children(DATAPLANE_FILTER, sort=True):
        other_name, intf_id, ok = get_intf_name_and_id_for_type(other_intf_node, DP0XE_NAME)
        if not ok:
            continue
        if intf_id < start_id or intf_id > end_id or intf_id == cur_intf_id:
            continue

        # One disabled peer exempts the whole range.
        if _is_disabled(other_intf_node):
            return True

        other_speed, ok = get_single_child_value(other_intf_node, SPEED_FILTER)
        if not ok:
            return True
        if other_speed not in (SPEED_AUTO, cur_speed):
            logger.debug(
                "%s speed %s conflicts with %s speed %s",
                cur_intf_name,
                cur_speed,
                other_name,
                other_speed,
            )
            return False

    return True


REGISTRATION_DATA = [
    CustomFunctionInfo(
        name="verify-siad-link-speed",
        fn=verify_siad_link_speed,
        args=(DatumType.NUMBER, DatumType.NUMBER, DatumType.NODESET),
        ret_type=DatumType.BOOL,
        default=False,
    ),
]
