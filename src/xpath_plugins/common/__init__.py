"""Helpers shared across plugins."""

from xpath_plugins.common.traversal import (
    get_count_of_child_nodes_with_required_values,
    get_descendant_nodes,
    get_descendant_nodes_from_single_node,
    get_single_child_value,
)

__all__ = [
    "get_count_of_child_nodes_with_required_values",
    "get_descendant_nodes",
    "get_descendant_nodes_from_single_node",
    "get_single_child_value",
]
