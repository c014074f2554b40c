"""Custom function registration models."""

from collections.abc import Callable
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from xpath_plugins.models.node import ConfigNode


class DatumType(str, Enum):
    """XPath datum types used in custom function signatures."""

    NODESET = "nodeset"
    NUMBER = "number"
    BOOL = "bool"

    def accepts(self, value: Any) -> bool:
        """Check whether a Python value is a datum of this type.

        Args:
            value: Candidate argument or return value

        Returns:
            True if the value can be passed as (or returned as) this type
        """
        if self is DatumType.NODESET:
            return isinstance(value, (list, tuple)) and all(
                isinstance(node, ConfigNode) for node in value
            )
        if self is DatumType.NUMBER:
            # bool is an int subclass but is not an XPath number
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        return isinstance(value, bool)


class CustomFunctionInfo(BaseModel):
    """Registration entry for one custom XPath function.

    The evaluation engine discovers functions by name, checks arguments
    against ``args`` and falls back to ``default`` when the function cannot
    be invoked.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(description="Function name as used in XPath expressions")
    fn: Callable[..., Any] = Field(description="Implementation")
    args: Annotated[
        tuple[DatumType, ...], Field(description="Argument types, in call order")
    ]
    ret_type: DatumType = Field(description="Return type")
    default: Annotated[bool | int | float, Field(description="Value used if invocation fails")]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate function name is non-empty and has no whitespace."""
        if not v or any(ch.isspace() for ch in v):
            raise ValueError("Function name must be non-empty and contain no whitespace")
        return v

    @model_validator(mode="after")
    def validate_default(self) -> "CustomFunctionInfo":
        """Validate that the default value matches the return type."""
        if not self.ret_type.accepts(self.default):
            raise ValueError(
                f"Default value {self.default!r} does not match return type "
                f"'{self.ret_type.value}'"
            )
        return self

    def signature(self) -> str:
        """Human-readable signature (e.g., "f(number, nodeset) -> bool")."""
        arg_list = ", ".join(arg.value for arg in self.args)
        return f"{self.name}({arg_list}) -> {self.ret_type.value}"
