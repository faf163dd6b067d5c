"""Structural patch operations produced by the diff engine."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class PatchOp(StrEnum):
    """Kinds of patch operations the diff engine emits."""

    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"


class PatchOperation(BaseModel):
    """A single path-addressed change between two trees.

    `path` is a JSON pointer (slash-delimited); `from_path` is only set
        for `move` operations.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    op: PatchOp
    path: str
    value: Any = None
    from_path: str | None = Field(default=None, alias="from")

    def as_dict(self) -> dict[str, Any]:
        """JSON-patch style representation, as shown to users."""
        data: dict[str, Any] = {"op": self.op.value, "path": self.path}
        if self.op in {PatchOp.ADD, PatchOp.REPLACE}:
            data["value"] = self.value
        if self.op is PatchOp.MOVE:
            data["from"] = self.from_path
        return data
