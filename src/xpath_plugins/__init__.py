"""Custom XPath validation functions for YANG configuration trees."""

from xpath_plugins.models import ConfigNode, XFilter, get_filter
from xpath_plugins.plugins import REGISTRATION_DATA, call_function, get_function_info
from xpath_plugins.tree import TreeNode, create_tree, find_first_node

__version__ = "0.1.0"

__all__ = [
    "ConfigNode",
    "REGISTRATION_DATA",
    "TreeNode",
    "XFilter",
    "call_function",
    "create_tree",
    "find_first_node",
    "get_filter",
    "get_function_info",
    "__version__",
]
