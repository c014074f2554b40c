"""Command-line evaluation request model."""

from typing import Annotated

from pydantic import BaseModel, Field, field_validator


class EvaluationRequest(BaseModel):
    """A single predicate evaluation requested from the command line."""

    function: str = Field(description="Registered custom function name")
    path: Annotated[str, Field(description="Absolute path of the node to evaluate on")]
    numbers: Annotated[
        list[float], Field(default_factory=list, description="Leading numeric arguments")
    ]

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Validate that the path is absolute and names at least one element."""
        if not v.startswith("/"):
            raise ValueError("Node path must be absolute (start with '/')")
        if not v.strip("/"):
            raise ValueError("Node path must name at least one element")
        return v
