"""Common test fixtures and utilities for the dataset mutation workflow."""

import copy
from typing import Any

import pytest
from loguru import logger as log
from smdataset import enable_logging
from smdataset.api.datasets import DatasetMutationAPI
from smdataset.auth import SubmitterAuthorizer
from smdataset.gateway import EngineGateway
from smdataset.models import Dataset
from smdataset.models import MolecularDB
from smdataset.models import User
from smdataset.ops.locks import DatasetLocks
from smdataset.processing import add_processing_config
from smdataset.registry import StaticRegistry

log.trace("Placeholder log avoid reimporting or resolving unused import warnings.")

enable_logging()

ENGINE_HOST = "sm-engine.test:5123"
ENGINE_URL = f"http://{ENGINE_HOST}"
SUBMITTER_EMAIL = "jane.doe@example.org"
DATASET_ID = "2024-01-15_10h30m00s"

SAMPLE_METADATA: dict[str, Any] = {
    "Sample_Information": {
        "Organism": "Mus musculus",
        "Organism_Part": "Brain",
        "Condition": "Wildtype",
        "Sample_Growth_Conditions": "",
    },
    "Sample_Preparation": {
        "Sample_Stabilisation": "Fresh frozen",
        "Tissue_Modification": "N/A",
        "MALDI_Matrix": "2,5-dihydroxybenzoic acid (DHB)",
        "MALDI_Matrix_Application": "TM sprayer",
        "Solvent": "",
    },
    "MS_Analysis": {
        "Polarity": "Positive",
        "Ionisation_Source": "MALDI",
        "Analyzer": "Orbitrap",
        "Detector_Resolving_Power": {"mz": 200, "Resolving_Power": 140000},
        "Pixel_Size": {"Xaxis": None, "Yaxis": None},
    },
    "Submitted_By": {
        "Institution": "EMBL",
        "Submitter": {
            "First_Name": "Jane",
            "Surname": "Doe",
            "Email": SUBMITTER_EMAIL,
        },
        "Principal_Investigator": {"First_Name": "", "Surname": "", "Email": ""},
    },
    "Additional_Information": {"Publication_DOI": ""},
}


class InMemoryStore:
    """Dataset store keeping datasets in a dict."""

    def __init__(self, *datasets: Dataset) -> None:
        self.datasets = {dataset.id: dataset for dataset in datasets}

    def fetch(self, dataset_id: str) -> Dataset | None:
        dataset = self.datasets.get(dataset_id)
        return dataset.model_copy(deep=True) if dataset is not None else None


def engine_url(route: str) -> str:
    """Full URL of an engine route, e.g. /v1/datasets/add."""
    return ENGINE_URL + route


# ==== fixtures


@pytest.fixture
def metadata() -> dict[str, Any]:
    """A valid metadata document, with empty optional fields."""
    return copy.deepcopy(SAMPLE_METADATA)


@pytest.fixture
def stored_dataset(metadata: dict[str, Any]) -> Dataset:
    """A dataset as persisted after a successful submission."""
    dataset = Dataset(
        id=DATASET_ID,
        name="ds1",
        input_path="s3a://sm-datasets/ds1",
        upload_dt="2024-01-15T10:30:00",
        metadata=copy.deepcopy(metadata),
        mol_dbs=["HMDB"],
        is_public=True,
    )
    add_processing_config(dataset)
    return dataset


@pytest.fixture
def store(stored_dataset: Dataset) -> InMemoryStore:
    return InMemoryStore(stored_dataset)


@pytest.fixture
def registry() -> StaticRegistry:
    return StaticRegistry(
        [
            MolecularDB(name="HMDB", version="v4"),
            MolecularDB(name="ChEBI", version="2018-01"),
            MolecularDB(name="LipidMaps", version="2017-12-12", deprecated=True),
        ]
    )


@pytest.fixture
def gateway() -> EngineGateway:
    return EngineGateway(host=ENGINE_HOST, timeout=5)


@pytest.fixture
def submitter() -> User:
    return User(email=SUBMITTER_EMAIL)


@pytest.fixture
def admin() -> User:
    return User(email="admin@example.org", role="admin")


@pytest.fixture
def stranger() -> User:
    return User(email="someone.else@example.org")


@pytest.fixture
def mutations(
    gateway: EngineGateway,
    store: InMemoryStore,
    registry: StaticRegistry,
) -> DatasetMutationAPI:
    """Mutation API over the in-memory store, with its own locks."""
    return DatasetMutationAPI(
        gateway=gateway,
        store=store,
        authorizer=SubmitterAuthorizer(store),
        registry=registry,
        img_storage_url="http://img-storage.test:4201",
        locks=DatasetLocks(),
    )
