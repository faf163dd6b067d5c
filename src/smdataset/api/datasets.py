"""Dataset mutations: submit, update, delete and optical image management.

Every workflow checks edit rights before anything else, then runs its steps in
order, each one able to abort the mutation. Failures are logged and re-raised
to the caller; the only tolerated failure is the optical image removal that
precedes a dataset deletion.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from loguru import logger as log

from smdataset.classifier import ImpactReport
from smdataset.classifier import classify
from smdataset.classifier import evaluate
from smdataset.errors import NotFound
from smdataset.errors import Result
from smdataset.errors import SMError
from smdataset.metadata import assign_submitter_email
from smdataset.metadata import parse_metadata_json
from smdataset.metadata import validate_metadata
from smdataset.models.datasets import Dataset
from smdataset.models.datasets import DatasetInput
from smdataset.ops.locks import DatasetLocks
from smdataset.processing import add_processing_config
from smdataset.registry import check_databases_exist
from smdataset.utils import log_user
from smdataset.utils import log_user_error
from smdataset.utils import resolve_image_url

if TYPE_CHECKING:
    from smdataset.gateway import EngineGateway
    from smdataset.interfaces import Authorizer
    from smdataset.interfaces import ConfigDeriver
    from smdataset.interfaces import DatasetStore
    from smdataset.interfaces import MolecularDBRegistry
    from smdataset.models.users import User

_process_locks = DatasetLocks()


class DatasetMutationAPI:
    gateway: EngineGateway
    verbose: bool = False

    def __init__(
        self,
        *,
        gateway: EngineGateway,
        store: DatasetStore,
        authorizer: Authorizer,
        registry: MolecularDBRegistry,
        config_deriver: ConfigDeriver = add_processing_config,
        img_storage_url: str = "http://localhost:4201",
        locks: DatasetLocks | None = None,
        verbose: bool = False,
    ) -> None:
        """Initializes the DatasetMutationAPI."""
        self.gateway = gateway
        self.store = store
        self.authorizer = authorizer
        self.registry = registry
        self.config_deriver = config_deriver
        self.img_storage_url = img_storage_url
        self.locks = locks if locks is not None else _process_locks
        self.verbose = verbose

    def _fetch(self, dataset_id: str) -> Dataset:
        dataset = self.store.fetch(dataset_id)
        if dataset is None:
            msg = f"Dataset does not exist: {dataset_id}"
            raise NotFound(msg)
        return dataset

    def _edited(self, dataset: Dataset, ds_input: DatasetInput) -> Dataset:
        """The stored dataset with the input's fields applied on top."""
        changes = ds_input.changes()
        if ds_input.metadata_json is not None:
            changes["metadata"] = parse_metadata_json(ds_input.metadata_json)
        changes.pop("id", None)
        return dataset.model_copy(deep=True, update=changes)

    def _prepare_edit(
        self,
        ds_input: DatasetInput,
        user: User,
    ) -> tuple[Dataset, Dataset]:
        """Checks rights, then builds and validates the edited dataset."""
        if ds_input.id is None:
            msg = "Dataset id is required to edit a dataset"
            raise NotFound(msg)
        self.authorizer.assert_can_edit(ds_input.id, user)
        dataset = self._fetch(ds_input.id)
        upd_dataset = self._edited(dataset, ds_input)
        assign_submitter_email(dataset.metadata, upd_dataset.metadata, user.email)
        validate_metadata(upd_dataset.metadata)
        self.config_deriver(upd_dataset)
        return dataset, upd_dataset

    # ===========
    # SUBMISSIONS

    def submit(
        self,
        ds_input: DatasetInput,
        user: User,
        *,
        priority: int = 0,
        del_first: bool = False,
    ) -> str:
        """Submits a new dataset, or resubmits an existing one when it has an id.

        Returns:
            The raw response of the processing engine.
        """
        with self.locks.hold(ds_input.id):
            try:
                if ds_input.id is not None:
                    self.authorizer.assert_can_edit(ds_input.id, user)

                dataset = Dataset.model_validate(ds_input.changes())
                if ds_input.metadata_json is not None:
                    dataset.metadata = parse_metadata_json(ds_input.metadata_json)
                assign_submitter_email(None, dataset.metadata, user.email)
                validate_metadata(dataset.metadata)
                check_databases_exist(self.registry, dataset.mol_dbs)
                self.config_deriver(dataset)
                if self.verbose:
                    log_user(
                        f"Submitting dataset '{dataset.name}' against "
                        f"databases {dataset.mol_dbs}"
                    )

                payload: dict[str, Any] = {
                    "name": dataset.name,
                    "input_path": dataset.input_path,
                    "upload_dt": dataset.upload_dt,
                    "metadata": dataset.metadata,
                    "config": dataset.config,
                    "priority": priority,
                    "del_first": del_first,
                    "is_public": dataset.is_public,
                    "mol_dbs": dataset.mol_dbs,
                    "adducts": dataset.adducts,
                }
                if dataset.id is not None:
                    payload["id"] = dataset.id
                return self.gateway.add_dataset(payload)
            except SMError as err:
                log_user_error(f"Dataset submission failed: {err}")
                raise

    def update(
        self,
        ds_input: DatasetInput,
        user: User,
        *,
        priority: int = 0,
    ) -> str:
        """Applies an edit that needs no reprocessing of the dataset.

        Raises:
            ResubmissionRequired: the edit changes processing settings.
            ReprocessingRequired: the edit changes the molecular databases.
        """
        with self.locks.hold(ds_input.id):
            try:
                dataset, upd_dataset = self._prepare_edit(ds_input, user)
                report = evaluate(dataset, upd_dataset)
                if self.verbose:
                    log_user(f"Edit of dataset {dataset.id}: {report.impact}")

                payload = {
                    "metadata": upd_dataset.metadata,
                    "config": upd_dataset.config,
                    "name": upd_dataset.name,
                    "upload_dt": upd_dataset.upload_dt,
                    "priority": priority,
                    "is_public": upd_dataset.is_public,
                }
                return self.gateway.update_dataset(dataset.id, payload)
            except SMError as err:
                log_user_error(f"Dataset update failed: {err}")
                raise

    def impact_of(self, ds_input: DatasetInput, user: User) -> ImpactReport:
        """Classifies an edit without applying it."""
        dataset, upd_dataset = self._prepare_edit(ds_input, user)
        return classify(dataset, upd_dataset)

    def check_reprocessing_needed(self, ds_input: DatasetInput, user: User) -> bool:
        """True when applying the edit would need the dataset to be resubmitted."""
        return self.impact_of(ds_input, user).reprocessing_needed

    # ========
    # DELETION

    def _try_delete_optical_image(self, dataset_id: str) -> Result[str]:
        try:
            return Result(value=self.gateway.delete_optical_image(dataset_id))
        except SMError as err:
            return Result(exception=err, error_info={"dataset_id": dataset_id})

    def delete(self, dataset_id: str, user: User) -> str:
        """Deletes a dataset and, when there is one, its optical image.

        Returns:
            The raw engine response to the dataset deletion.
        """
        with self.locks.hold(dataset_id):
            try:
                self.authorizer.assert_can_edit(dataset_id, user)

                image_removal = self._try_delete_optical_image(dataset_id)
                if not image_removal:
                    log.warning(
                        f"Optical image removal failed for dataset {dataset_id}: "
                        f"{image_removal.exception_or(None)}"
                    )

                return self.gateway.delete_dataset(dataset_id)
            except SMError as err:
                log_user_error(f"Dataset deletion failed: {err}")
                raise

    # ==============
    # OPTICAL IMAGES

    def add_optical_image(
        self,
        dataset_id: str,
        image_url: str,
        transform: Any,
        user: User,
    ) -> str:
        """Attaches an optical image; host-relative URLs use the image storage."""
        log.info(f"Adding optical image {image_url} to dataset {dataset_id}")
        with self.locks.hold(dataset_id):
            try:
                self.authorizer.assert_can_edit(dataset_id, user)
                url = resolve_image_url(image_url, self.img_storage_url)
                return self.gateway.add_optical_image(
                    dataset_id, url=url, transform=transform
                )
            except SMError as err:
                log_user_error(f"Adding optical image failed: {err}")
                raise

    def delete_optical_image(self, dataset_id: str, user: User) -> str:
        with self.locks.hold(dataset_id):
            self.authorizer.assert_can_edit(dataset_id, user)
            return self.gateway.delete_optical_image(dataset_id)


__all__ = ["DatasetMutationAPI"]
