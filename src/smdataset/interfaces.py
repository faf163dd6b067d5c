"""Collaborators the mutation workflow consumes but does not own."""

from typing import Protocol

from smdataset.models.databases import MolecularDB
from smdataset.models.datasets import Dataset
from smdataset.models.users import User


class DatasetStore(Protocol):
    """Read access to persisted datasets. Writes go through the engine."""

    def fetch(self, dataset_id: str) -> Dataset | None: ...


class Authorizer(Protocol):
    def assert_can_edit(self, dataset_id: str, user: User) -> None:
        """Raises Forbidden (or NotFound) unless `user` may edit the dataset."""
        ...


class ConfigDeriver(Protocol):
    def __call__(self, dataset: Dataset) -> None:
        """Sets `dataset.config` from its metadata, databases and adducts."""
        ...


class MolecularDBRegistry(Protocol):
    def list(self, *, hide_deprecated: bool) -> list[MolecularDB]: ...
