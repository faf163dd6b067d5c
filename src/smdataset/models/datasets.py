"""Dataset models."""

from typing import Any

from pydantic import Field

from .base import SMModel


class Dataset(SMModel):
    """An imaging mass-spectrometry dataset as known to the dataset store.

    `config` is derived from `metadata`, `mol_dbs` and `adducts` by the
        processing config deriver and never authored by users.
    """

    id: str | None = None
    name: str | None = None
    input_path: str | None = Field(default=None, alias="inputPath")
    upload_dt: str | None = Field(default=None, alias="uploadDT")
    metadata: dict[str, Any] = Field(default_factory=dict)
    config: dict[str, Any] = Field(default_factory=dict)
    is_public: bool = Field(default=True, alias="isPublic")
    mol_dbs: list[str] = Field(default_factory=list, alias="molDBs")
    adducts: list[str] = Field(default_factory=list)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id} name={self.name}>"


class DatasetInput(SMModel):
    """Fields submitted by a caller to create or edit a dataset.

    Only fields explicitly set are applied on top of the stored dataset when
        editing. Metadata may be given parsed or as a JSON string.
    """

    id: str | None = None
    name: str | None = None
    input_path: str | None = Field(default=None, alias="inputPath")
    upload_dt: str | None = Field(default=None, alias="uploadDT")
    metadata: dict[str, Any] | None = None
    metadata_json: str | None = Field(default=None, alias="metadataJson")
    is_public: bool | None = Field(default=None, alias="isPublic")
    mol_dbs: list[str] | None = Field(default=None, alias="molDBs")
    adducts: list[str] | None = None

    def changes(self) -> dict[str, Any]:
        """Explicitly set, non-null fields by python name, without the metadata JSON.

        A null field leaves the stored value as it is.
        """
        fields = self.model_dump(exclude_unset=True, exclude={"metadata_json"})
        return {name: value for name, value in fields.items() if value is not None}


__all__ = [
    "Dataset",
    "DatasetInput",
]
