"""QoS profile consistency validation.

Both predicates replace must statements of the form::

    count(<local elements>) + count(<global elements>)
      = count(<local elements>/<child>[k1 = current()/k1 and k2 = current()/k2])
      + count(<global elements>/<child>[k1 = current()/k1 and k2 = current()/k2])

with paths rebased onto /policy/qos. Local profiles live under a named
policy (name/shaper/profile), global ones directly under qos (profile). The
counts only balance if every element has exactly one child matching the
current node's key fields, so a profile with no match (or with two) fails.
"""

import logging
from collections.abc import Sequence

from xpath_plugins.common import (
    get_count_of_child_nodes_with_required_values,
    get_descendant_nodes,
    get_descendant_nodes_from_single_node,
    get_single_child_value,
)
from xpath_plugins.models import ConfigNode, CustomFunctionInfo, DatumType, XFilter, get_filter

logger = logging.getLogger(__name__)

# Filters never change, so create once and reuse.
ID_FILTER = get_filter("id")
TRAFFIC_CLASS_FILTER = get_filter("traffic-class")
GROUP_NAME_FILTER = get_filter("group-name")
TO_FILTER = get_filter("to")

POLICY_QOS_PATH = ("policy", "qos")
INGRESS_MAP_PATH = ("policy", "ingress-map")
LOCAL_PROFILE_PATH = ("name", "shaper", "profile")
GLOBAL_PROFILE_PATH = ("profile",)
LOCAL_MAP_PATH = (*LOCAL_PROFILE_PATH, "map")
GLOBAL_MAP_PATH = (*GLOBAL_PROFILE_PATH, "map")


def _get_qos_node(root: ConfigNode) -> ConfigNode | None:
    """Return the unique /policy/qos node, or None if absent or duplicated."""
    qos_nodes = get_descendant_nodes_from_single_node(root, POLICY_QOS_PATH)
    if len(qos_nodes) != 1:
        logger.debug("Expected one /policy/qos node, found %d", len(qos_nodes))
        return None
    return qos_nodes[0]


def _counts_balance(
    qos_node: ConfigNode,
    local_path: Sequence[str],
    global_path: Sequence[str],
    child_name: str,
    req_values: dict[XFilter, str],
) -> bool:
    """Check that local and global elements each have exactly one matching child.

    Args:
        qos_node: The /policy/qos node
        local_path: Path from qos_node to the local elements
        global_path: Path from qos_node to the global elements
        child_name: Name of the children compared against req_values
        req_values: Required child values, keyed by filter

    Returns:
        True if the element count equals the matching child count
    """
    local_nodes = get_descendant_nodes_from_single_node(qos_node, local_path)
    local_matches = get_count_of_child_nodes_with_required_values(
        get_descendant_nodes(local_nodes, [child_name]), req_values
    )

    global_nodes = get_descendant_nodes_from_single_node(qos_node, global_path)
    global_matches = get_count_of_child_nodes_with_required_values(
        get_descendant_nodes(global_nodes, [child_name]), req_values
    )

    element_count = len(local_nodes) + len(global_nodes)
    match_count = local_matches + global_matches
    if element_count != match_count:
        logger.debug(
            "%d local/global elements but %d matching '%s' entries",
            element_count,
            match_count,
            child_name,
        )
        return False
    return True


def verify_queue_id_and_traffic_class(nodeset: Sequence[ConfigNode]) -> bool:
    """verify-queue-id-and-traffic-class(<nodeset>)

    Implements::

        must "/policy/ingress-map or
              (count(name/shaper/profile) + count(profile)
               = count(name/shaper/profile/queue[id = current()/id]
                         [traffic-class = current()/traffic-class])
               + count(profile/queue[id = current()/id]
                         [traffic-class = current()/traffic-class]))"

    The restriction doesn't apply when the newer ingress-map style of
    classification is in use, so any ingress-map passes immediately.
    """
    # May be applied to any node, but only to a single one
    if len(nodeset) != 1:
        return False
    src_node = nodeset[0]
    root = src_node.root()

    if get_descendant_nodes_from_single_node(root, INGRESS_MAP_PATH):
        logger.debug("ingress-map configured; queue/traffic-class check bypassed")
        return True

    queue_id, ok = get_single_child_value(src_node, ID_FILTER)
    if not ok:
        return False
    traffic_class, ok = get_single_child_value(src_node, TRAFFIC_CLASS_FILTER)
    if not ok:
        return False

    qos_node = _get_qos_node(root)
    if qos_node is None:
        return False

    req_values = {
        ID_FILTER: queue_id,
        TRAFFIC_CLASS_FILTER: traffic_class,
    }
    return _counts_balance(
        qos_node, LOCAL_PROFILE_PATH, GLOBAL_PROFILE_PATH, "queue", req_values
    )


def verify_dscp_group_to_queue_mappings(nodeset: Sequence[ConfigNode]) -> bool:
    """verify-dscp-group-to-queue-mappings(<nodeset>)

    DSCP-group to queue mappings must be identical everywhere: for the
    dscp-group this is called on, every local and global profile map needs
    an equivalent entry. Implements::

        must "count(name/shaper/profile/map) + count(profile/map)
              = count(name/shaper/profile/map/dscp-group
                        [group-name = current()/group-name and to = current()/to])
              + count(profile/map/dscp-group
                        [group-name = current()/group-name and to = current()/to])"
    """
    # May be applied to any node, but only to a single one
    if len(nodeset) != 1:
        return False
    src_node = nodeset[0]

    group_name, ok = get_single_child_value(src_node, GROUP_NAME_FILTER)
    if not ok:
        return False
    to, ok = get_single_child_value(src_node, TO_FILTER)
    if not ok:
        return False

    qos_node = _get_qos_node(src_node.root())
    if qos_node is None:
        return False

    req_values = {
        GROUP_NAME_FILTER: group_name,
        TO_FILTER: to,
    }
    return _counts_balance(qos_node, LOCAL_MAP_PATH, GLOBAL_MAP_PATH, "dscp-group", req_values)


REGISTRATION_DATA = [
    CustomFunctionInfo(
        name="verify-queue-id-and-traffic-class",
        fn=verify_queue_id_and_traffic_class,
        args=(DatumType.NODESET,),
        ret_type=DatumType.BOOL,
        default=False,
    ),
    CustomFunctionInfo(
        name="verify-dscp-group-to-queue-mappings",
        fn=verify_dscp_group_to_queue_mappings,
        args=(DatumType.NODESET,),
        ret_type=DatumType.BOOL,
        default=False,
    ),
]
