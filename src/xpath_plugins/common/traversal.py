"""Tree query helpers shared by all plugins.

Every helper is read-only. Where a single child is expected, more than one
match is treated the same as no match: ambiguous configuration never resolves
to a value.
"""

from collections.abc import Iterable, Mapping, Sequence

from xpath_plugins.models import ConfigNode, XFilter, get_filter


def get_single_child_value(node: ConfigNode, xfilter: XFilter) -> tuple[str, bool]:
    """Return the value of the only child matching a filter.

    Args:
        node: Node whose children are searched
        xfilter: Filter selecting the child

    Returns:
        (value, True) if exactly one child matches, otherwise ("", False)
    """
    children = node.children(xfilter)
    if len(children) != 1:
        return "", False
    return children[0].value(), True


def get_descendant_nodes(
    nodes: Iterable[ConfigNode],
    path: Sequence[str | XFilter],
) -> list[ConfigNode]:
    """Walk a fixed-depth path from every starting node.

    At each level the current node list is replaced by the matching children
    of every node in it, in order. An empty path returns the starting nodes.

    Args:
        nodes: Starting nodes
        path: Filters (or local names) for each level, outermost first

    Returns:
        All nodes reached at the end of the path
    """
    cur_nodes = list(nodes)
    for step in path:
        xfilter = step if isinstance(step, XFilter) else get_filter(step)
        filtered_nodes: list[ConfigNode] = []
        for node in cur_nodes:
            filtered_nodes.extend(node.children(xfilter))
        cur_nodes = filtered_nodes
    return cur_nodes


def get_descendant_nodes_from_single_node(
    node: ConfigNode,
    path: Sequence[str | XFilter],
) -> list[ConfigNode]:
    """Walk a fixed-depth path from one starting node."""
    return get_descendant_nodes([node], path)


def get_count_of_child_nodes_with_required_values(
    nodes: Iterable[ConfigNode],
    filter_value_map: Mapping[XFilter, str],
) -> int:
    """Count nodes whose children carry every required value.

    A node counts only if, for each (filter, value) entry, it has exactly one
    child matching the filter and that child's value is the expected value.
    A missing or duplicated child excludes the node.

    Args:
        nodes: Candidate nodes
        filter_value_map: Required child values, keyed by filter

    Returns:
        Number of matching nodes
    """
    count = 0
    for node in nodes:
        for xfilter, value in filter_value_map.items():
            child_value, ok = get_single_child_value(node, xfilter)
            if not ok or child_value != value:
                break
        else:
            count += 1
    return count
