from pydantic import BaseModel
from pydantic import ConfigDict


class SMModel(BaseModel):
    """Base class for most models in the mutation workflow.

    Fields accept both their python names and the camelCase aliases used by
        the web clients (e.g. `input_path` and `inputPath`).
    """

    model_config = ConfigDict(populate_by_name=True)

    def __repr_name__(self) -> str:
        """Get the name to use in the representation of the model."""
        return self.__class__.__name__
