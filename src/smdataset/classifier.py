"""Decides what the processing engine must do for a proposed dataset edit.

Processing settings changes invalidate everything the engine computed, so the
dataset has to be dropped and submitted again. Changes limited to the molecular
databases only need the dataset to be submitted again. Anything else (metadata
edits that do not reach the config, reordering) needs no engine reprocessing.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger as log

from smdataset.diff import as_dicts
from smdataset.diff import diff
from smdataset.errors import ReprocessingRequired
from smdataset.errors import ResubmissionRequired
from smdataset.models.datasets import Dataset
from smdataset.models.patches import PatchOp
from smdataset.models.patches import PatchOperation

DATABASES_PATH: str = "/databases"


class ChangeImpact(StrEnum):
    NO_CHANGE = "NoChange"
    DATABASE_UPDATE = "DatabaseUpdate"
    PROCESSING_SETTINGS_UPDATE = "ProcessingSettingsUpdate"


@dataclass(frozen=True)
class ImpactReport:
    """Classification of an edit, with the diffs that led to it."""

    impact: ChangeImpact
    config_diff: list[PatchOperation]
    metadata_diff: list[PatchOperation]

    @property
    def reprocessing_needed(self) -> bool:
        return self.impact is not ChangeImpact.NO_CHANGE


def classify_config_diff(config_diff: Sequence[PatchOperation]) -> ChangeImpact:
    """Impact of a config diff; moves are reordering and never count."""
    database_update = False
    processing_settings_update = False
    for operation in config_diff:
        if operation.op is PatchOp.MOVE:
            continue
        if operation.path.startswith(DATABASES_PATH):
            database_update = True
        else:
            processing_settings_update = True

    if processing_settings_update:
        return ChangeImpact.PROCESSING_SETTINGS_UPDATE
    if database_update:
        return ChangeImpact.DATABASE_UPDATE
    return ChangeImpact.NO_CHANGE


def classify(old_dataset: Dataset, new_dataset: Dataset) -> ImpactReport:
    """Compares config and metadata of two versions of a dataset."""
    config_diff = diff(old_dataset.config, new_dataset.config)
    metadata_diff = diff(old_dataset.metadata, new_dataset.metadata)
    impact = classify_config_diff(config_diff)
    log.debug(
        f"{new_dataset!r}: {impact} ({len(config_diff)} config and "
        f"{len(metadata_diff)} metadata operations)"
    )
    return ImpactReport(
        impact=impact,
        config_diff=config_diff,
        metadata_diff=metadata_diff,
    )


def raise_for_impact(report: ImpactReport) -> None:
    """Turns a classification needing reprocessing into the matching error."""
    diffs = {
        "metadata_diff": as_dicts(report.metadata_diff),
        "config_diff": as_dicts(report.config_diff),
    }
    if report.impact is ChangeImpact.PROCESSING_SETTINGS_UPDATE:
        raise ResubmissionRequired(**diffs)
    if report.impact is ChangeImpact.DATABASE_UPDATE:
        raise ReprocessingRequired(**diffs)


def evaluate(old_dataset: Dataset, new_dataset: Dataset) -> ImpactReport:
    """Classifies an edit, raising when the engine must reprocess the dataset.

    Raises:
        ResubmissionRequired: processing settings changed.
        ReprocessingRequired: only the molecular databases changed.
    """
    report = classify(old_dataset, new_dataset)
    raise_for_impact(report)
    return report


__all__ = [
    "ChangeImpact",
    "ImpactReport",
    "classify",
    "classify_config_diff",
    "evaluate",
    "raise_for_impact",
]
