"""Child selection filters."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

WILDCARD = "*"


class XFilter(BaseModel):
    """Selects children of a node by local name.

    Filters are immutable and hashable so they can be created once at module
    level, shared between calls and used as mapping keys. Two filters are
    equal when their name and scope are equal.
    """

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, Field(description="Local name to match, or '*' for any child")]
    config_only: Annotated[
        bool, Field(True, description="Ignore state-only (non-configuration) nodes")
    ]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that the name is a single non-empty path element."""
        if not v:
            raise ValueError("Filter name cannot be empty")
        if "/" in v:
            raise ValueError("Filter name must be a single path element (no '/')")
        return v

    @property
    def is_wildcard(self) -> bool:
        return self.name == WILDCARD

    def matches(self, name: str, is_config: bool = True) -> bool:
        """Check whether a node with this name and scope is selected.

        Args:
            name: Local name of the candidate node
            is_config: Whether the candidate is configuration data

        Returns:
            True if the filter selects the node
        """
        if self.config_only and not is_config:
            return False
        return self.is_wildcard or self.name == name


def get_filter(name: str) -> XFilter:
    """Return a configuration-only filter for the given local name."""
    return XFilter(name=name)
