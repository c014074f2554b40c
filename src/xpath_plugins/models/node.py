"""Configuration tree node capability contract."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from xpath_plugins.models.filter import XFilter


class ConfigNode(ABC):
    """A node in a rooted, ordered configuration tree.

    This is everything the predicates need from the configuration engine's
    node representation. Implementations are treated as read-only snapshots:
    nothing in this package mutates a node.
    """

    @abstractmethod
    def name(self) -> str:
        """Local name of the node (for list entries, the list name)."""
        pass

    @abstractmethod
    def value(self) -> str:
        """Scalar value of the node; empty string if it has none.

        List entries report their key value.
        """
        pass

    @abstractmethod
    def parent(self) -> Optional["ConfigNode"]:
        """Parent node, or None at the root."""
        pass

    @abstractmethod
    def root(self) -> "ConfigNode":
        """Root of the tree this node belongs to (itself at the root)."""
        pass

    @abstractmethod
    def children(self, xfilter: "XFilter", sort: bool = False) -> Sequence["ConfigNode"]:
        """Children selected by a filter.

        Args:
            xfilter: Filter selecting children by local name
            sort: If True, return children ordered by (name, value) rather
                  than configured order

        Returns:
            Matching children (possibly empty)
        """
        pass
