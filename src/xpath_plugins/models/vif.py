"""Per-call VIF records."""

from typing import Annotated

from pydantic import BaseModel, Field


class VifData(BaseModel):
    """VLAN settings of one sub-interface (vif).

    Built fresh from the tree on every call and discarded afterwards. Empty
    strings mean "not configured".
    """

    vif: Annotated[str, Field("", description="VIF id (tagnode)")]
    vlan: Annotated[str, Field("", description="Explicit outer VLAN id")]
    inner_vlan: Annotated[str, Field("", description="Explicit inner VLAN id")]
