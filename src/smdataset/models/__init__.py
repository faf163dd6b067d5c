"""Data models for the dataset mutation workflow."""

from .base import SMModel
from .databases import MolecularDB
from .datasets import Dataset
from .datasets import DatasetInput
from .patches import PatchOp
from .patches import PatchOperation
from .users import User

__all__ = [
    "Dataset",
    "DatasetInput",
    "MolecularDB",
    "PatchOp",
    "PatchOperation",
    "SMModel",
    "User",
]
