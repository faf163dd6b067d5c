from pydantic import BaseModel
from pydantic import ConfigDict


class MolecularDB(BaseModel):
    """An entry of the molecular database registry."""

    model_config = ConfigDict(extra="allow")

    name: str
    version: str | None = None
    deprecated: bool = False
