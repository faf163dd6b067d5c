"""Tests for the structural diff."""

import jsonpatch
from smdataset.classifier import ChangeImpact
from smdataset.classifier import classify_config_diff
from smdataset.diff import as_dicts
from smdataset.diff import diff
from smdataset.models import PatchOp
from smdataset.models import PatchOperation


def test_identical_trees_have_no_diff() -> None:
    tree = {"a": 1, "b": {"c": [1, 2, 3]}}
    assert diff(tree, {"a": 1, "b": {"c": [1, 2, 3]}}) == []


def test_nested_replace() -> None:
    old = {"isotope_generation": {"isocalc_sigma": 0.001}}
    new = {"isotope_generation": {"isocalc_sigma": 0.002}}
    assert diff(old, new) == [
        PatchOperation(
            op=PatchOp.REPLACE,
            path="/isotope_generation/isocalc_sigma",
            value=0.002,
        )
    ]


def test_array_append_is_index_addressed() -> None:
    old = {"databases": ["HMDB"]}
    new = {"databases": ["HMDB", "ChEBI"]}
    assert as_dicts(diff(old, new)) == [
        {"op": "add", "path": "/databases/1", "value": "ChEBI"}
    ]


def test_added_and_removed_keys() -> None:
    old = {"keep": 1, "gone": 2}
    new = {"keep": 1, "new": 3}
    operations = {(op.op, op.path) for op in diff(old, new)}
    assert operations == {(PatchOp.REMOVE, "/gone"), (PatchOp.ADD, "/new")}


def test_array_changes_follow_index_order() -> None:
    old = {"a": {"x": 1, "y": [1, 2]}}
    new = {"a": {"x": 1, "y": [1, 3, 4]}}
    assert as_dicts(diff(old, new)) == [
        {"op": "replace", "path": "/a/y/1", "value": 3},
        {"op": "add", "path": "/a/y/2", "value": 4},
    ]


def test_value_relocated_to_another_key() -> None:
    """Relocations between keys are a removal plus an addition, not a move."""
    old = {"isotope_generation": {"ppm": 3.0}, "image_generation": {}}
    new = {"isotope_generation": {}, "image_generation": {"ppm": 3.0}}

    operations = diff(old, new)

    assert as_dicts(operations) == [
        {"op": "remove", "path": "/isotope_generation/ppm"},
        {"op": "add", "path": "/image_generation/ppm", "value": 3.0},
    ]
    assert classify_config_diff(operations) is ChangeImpact.PROCESSING_SETTINGS_UPDATE


def test_value_relocated_to_another_array() -> None:
    old = {"databases": ["X", "HMDB"], "extra": []}
    new = {"databases": ["HMDB"], "extra": ["X"]}

    operations = diff(old, new)

    assert all(operation.op is not PatchOp.MOVE for operation in operations)
    assert {"op": "add", "path": "/extra/0", "value": "X"} in as_dicts(operations)
    assert jsonpatch.apply_patch(old, as_dicts(operations)) == new
    assert classify_config_diff(operations) is ChangeImpact.PROCESSING_SETTINGS_UPDATE


def test_missing_trees_compare_as_empty() -> None:
    assert diff(None, {}) == []
    assert as_dicts(diff(None, {"a": 1})) == [{"op": "add", "path": "/a", "value": 1}]


def test_move_as_dict_carries_source() -> None:
    operation = PatchOperation.model_validate(
        {"op": "move", "from": "/databases/0", "path": "/databases/1"}
    )
    assert operation.as_dict() == {
        "op": "move",
        "path": "/databases/1",
        "from": "/databases/0",
    }
