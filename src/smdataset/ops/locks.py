"""Per-dataset serialization of mutations within one process."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger as log


class DatasetLocks:
    """Hands out one re-entrant lock per dataset id.

    Two mutations of the same dataset never interleave inside this process,
        so neither acts on a dataset version the other is replacing. There are
        no guarantees across processes.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # dataset id -> (lock, number of mutations holding or waiting on it)
        self._locks: dict[str, tuple[threading.RLock, int]] = {}

    def _check_out(self, dataset_id: str) -> threading.RLock:
        with self._guard:
            lock, users = self._locks.get(dataset_id, (None, 0))
            if lock is None:
                lock = threading.RLock()
            self._locks[dataset_id] = (lock, users + 1)
            return lock

    def _check_in(self, dataset_id: str) -> None:
        """Forgets the dataset's lock once nobody holds or waits on it."""
        with self._guard:
            lock, users = self._locks[dataset_id]
            if users == 1:
                del self._locks[dataset_id]
            else:
                self._locks[dataset_id] = (lock, users - 1)

    @contextmanager
    def hold(self, dataset_id: str | None) -> Iterator[None]:
        """Holds the dataset's lock; a None id (new dataset) takes no lock."""
        if dataset_id is None:
            yield
            return
        lock = self._check_out(dataset_id)
        try:
            if not lock.acquire(blocking=False):
                log.debug(f"Waiting for concurrent mutation of dataset {dataset_id}")
                lock.acquire()
            try:
                yield
            finally:
                lock.release()
        finally:
            self._check_in(dataset_id)
