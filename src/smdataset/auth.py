"""Default edit-rights check for datasets."""

from loguru import logger as log

from smdataset.errors import Forbidden
from smdataset.errors import NotFound
from smdataset.interfaces import DatasetStore
from smdataset.metadata import SUBMITTER_EMAIL_PATH
from smdataset.models.users import User
from smdataset.utils import get_in


class SubmitterAuthorizer:
    """Admins may edit any dataset, other users only the ones they submitted."""

    def __init__(self, store: DatasetStore) -> None:
        self.store = store

    def assert_can_edit(self, dataset_id: str, user: User) -> None:
        dataset = self.store.fetch(dataset_id)
        if dataset is None:
            msg = f"Dataset does not exist: {dataset_id}"
            raise NotFound(msg)
        if user.is_admin:
            return
        if get_in(dataset.metadata, SUBMITTER_EMAIL_PATH) != user.email:
            log.warning(f"{user.email} denied edit access to dataset {dataset_id}")
            msg = f"Access denied to dataset {dataset_id}"
            raise Forbidden(msg)
