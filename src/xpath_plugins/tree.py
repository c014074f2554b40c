"""In-memory configuration trees.

Provides a concrete ConfigNode implementation and a builder that creates a
tree from path specifications, one per configured item. Each path is a list
of elements from the root:

    name              container
    name/key+value    list entry 'name' keyed by leaf 'key' = value
    name+value        leaf
    name@value        leaf-list entry
    name%             empty (presence) leaf
    ~...              any of the above, as a state-only node

For example::

    create_tree([
        ["interfaces", "dataplane/tagnode+dp0s1", "vif/tagnode+10", "vlan+100"],
        ["interfaces", "dataplane/tagnode+dp0s1", "disable%"],
    ])

Paths that share a prefix share nodes: containers merge by name; list
entries, leaves and leaf-list entries merge by name and value.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from xpath_plugins.errors import NodeNotFoundError, TreeSpecError
from xpath_plugins.models import ConfigNode, XFilter

_ELEMENT_RE = re.compile(
    r"(?P<state>~)?(?P<name>[A-Za-z_][\w.-]*)"
    r"(?:/(?P<key>[A-Za-z_][\w.-]*)\+(?P<key_value>.+)"
    r"|(?P<kind>[+@])(?P<value>.+)"
    r"|(?P<empty>%))?"
)


class ElementKind(str, Enum):
    """Kind of node created by a path element."""

    CONTAINER = "container"
    LIST_ENTRY = "list-entry"
    LEAF = "leaf"
    LEAF_LIST = "leaf-list"
    EMPTY = "empty"


@dataclass(frozen=True)
class PathElement:
    """One parsed element of a tree path specification."""

    kind: ElementKind
    name: str
    value: str = ""
    key: str = ""
    config: bool = True


def parse_path_element(element: str) -> PathElement:
    """Parse a single path element.

    Args:
        element: Element text (e.g., "dataplane/tagnode+dp0s1")

    Returns:
        Parsed element

    Raises:
        TreeSpecError: If the element is malformed
    """
    match = _ELEMENT_RE.fullmatch(element)
    if not match:
        raise TreeSpecError(f"Malformed path element: {element!r}")

    config = match.group("state") is None
    name = match.group("name")

    if match.group("key") is not None:
        return PathElement(
            kind=ElementKind.LIST_ENTRY,
            name=name,
            value=match.group("key_value"),
            key=match.group("key"),
            config=config,
        )
    if match.group("kind") == "+":
        return PathElement(ElementKind.LEAF, name, match.group("value"), config=config)
    if match.group("kind") == "@":
        return PathElement(ElementKind.LEAF_LIST, name, match.group("value"), config=config)
    if match.group("empty") is not None:
        return PathElement(ElementKind.EMPTY, name, config=config)
    return PathElement(ElementKind.CONTAINER, name, config=config)


class TreeNode(ConfigNode):
    """Mutable-while-building, in-memory configuration node."""

    def __init__(
        self,
        name: str,
        value: str = "",
        config: bool = True,
        parent: Optional["TreeNode"] = None,
    ) -> None:
        """Initialize a node.

        Args:
            name: Local name
            value: Scalar value (list entries use their key value)
            config: False for state-only (operational) nodes
            parent: Parent node, None for a root
        """
        self._name = name
        self._value = value
        self._config = config
        self._parent = parent
        self._children: list[TreeNode] = []

    def __repr__(self) -> str:
        return f"TreeNode({self.path()!r}, value={self._value!r})"

    def name(self) -> str:
        return self._name

    def value(self) -> str:
        return self._value

    def is_config(self) -> bool:
        return self._config

    def parent(self) -> Optional["TreeNode"]:
        return self._parent

    def root(self) -> "TreeNode":
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def children(self, xfilter: XFilter, sort: bool = False) -> list["TreeNode"]:
        selected = [c for c in self._children if xfilter.matches(c._name, c._config)]
        if sort:
            selected.sort(key=lambda c: (c._name, c._value))
        return selected

    def add_child(self, name: str, value: str = "", config: bool = True) -> "TreeNode":
        """Append a new child node and return it."""
        child = TreeNode(name, value, config, parent=self)
        self._children.append(child)
        return child

    def get_or_add_child(self, name: str, value: str = "", config: bool = True) -> "TreeNode":
        """Return the existing child with this name, value and scope, or add one."""
        for child in self._children:
            if (child._name, child._value, child._config) == (name, value, config):
                return child
        return self.add_child(name, value, config)

    def path(self) -> str:
        """Absolute path of local names from the root (the root itself is "/")."""
        names: list[str] = []
        node: TreeNode | None = self
        while node is not None and node._parent is not None:
            names.append(node._name)
            node = node._parent
        return "/" + "/".join(reversed(names))


def add_path(root: TreeNode, path: Sequence[str]) -> TreeNode:
    """Add one path specification to a tree.

    All elements are parsed before the tree is touched, so a malformed path
    leaves the tree unchanged.

    Args:
        root: Tree root
        path: Path elements, outermost first

    Returns:
        The node created (or reused) for the last element

    Raises:
        TreeSpecError: If the path is empty or any element is malformed
    """
    if not path:
        raise TreeSpecError("Path specification cannot be empty")
    elements = [parse_path_element(element) for element in path]

    current = root
    for element in elements:
        current = current.get_or_add_child(element.name, element.value, element.config)
        if element.kind == ElementKind.LIST_ENTRY:
            current.get_or_add_child(element.key, element.value, element.config)
    return current


def create_tree(paths: Iterable[Sequence[str]]) -> TreeNode:
    """Build a tree from path specifications.

    Args:
        paths: One path (list of elements) per configured item

    Returns:
        Root node of the new tree

    Raises:
        TreeSpecError: If any path is malformed
    """
    root = TreeNode("")
    for path in paths:
        add_path(root, path)
    return root


def find_first_node(root: ConfigNode, path: str) -> ConfigNode:
    """Follow the first matching child, in configured order, for each element.

    Args:
        root: Node to start from
        path: Slash-separated local names (e.g., "/interfaces/dataplane/speed")

    Returns:
        The node reached

    Raises:
        NodeNotFoundError: If some element has no matching child
    """
    node = root
    for name in (part for part in path.split("/") if part):
        matches = node.children(XFilter(name=name, config_only=False))
        if not matches:
            raise NodeNotFoundError(f"No node found at '{name}' while resolving {path}")
        node = matches[0]
    return node
