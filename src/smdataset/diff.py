"""Structural diff between two JSON-like trees."""

import copy
from collections.abc import Sequence
from typing import Any

import jsonpatch
from jsonpointer import resolve_pointer

from smdataset.models.patches import PatchOperation


def _parent(pointer: str) -> str:
    return pointer.rsplit("/", 1)[0]


def _is_reorder(doc: Any, from_path: str, path: str) -> bool:
    """True when a move only changes an element's position in its array."""
    parent = _parent(from_path)
    return parent == _parent(path) and isinstance(resolve_pointer(doc, parent), list)


def _split_relocations(old_tree: Any, patch: jsonpatch.JsonPatch) -> list[dict]:
    """Rewrites moves across keys or arrays into a remove and an add.

    Operations are replayed on a copy of `old_tree`, since each one addresses
        the document as left by the previous ones.
    """
    doc = copy.deepcopy(old_tree)
    operations: list[dict] = []
    for operation in patch:
        step = [operation]
        if operation["op"] == "move" and not _is_reorder(
            doc, operation["from"], operation["path"]
        ):
            value = resolve_pointer(doc, operation["from"])
            step = [
                {"op": "remove", "path": operation["from"]},
                {"op": "add", "path": operation["path"], "value": copy.deepcopy(value)},
            ]
        doc = jsonpatch.apply_patch(doc, step, in_place=True)
        operations.extend(step)
    return operations


def diff(old_tree: Any, new_tree: Any) -> list[PatchOperation]:
    """Patch operations turning `old_tree` into `new_tree`.

    Array elements are compared by index. An element reordered inside its
        array comes out as a single `move`; values relocated to another key or
        another array come out as a `remove` followed by an `add`.
    """
    old_tree = old_tree or {}
    patch = jsonpatch.make_patch(old_tree, new_tree or {})
    return [
        PatchOperation.model_validate(operation)
        for operation in _split_relocations(old_tree, patch)
    ]


def as_dicts(operations: Sequence[PatchOperation]) -> list[dict[str, Any]]:
    """Plain dict form of patch operations, as shown to users."""
    return [operation.as_dict() for operation in operations]
