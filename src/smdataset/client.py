"""Entry point wiring configuration, engine, registry and dataset mutations."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from loguru import logger as log

from smdataset.api.datasets import DatasetMutationAPI
from smdataset.errors import Unset
from smdataset.interfaces import Authorizer
from smdataset.interfaces import ConfigDeriver
from smdataset.interfaces import DatasetStore
from smdataset.interfaces import MolecularDBRegistry
from smdataset.processing import add_processing_config

from .auth import SubmitterAuthorizer
from .config import SMConfig
from .gateway import EngineGateway
from .registry import MolDBServiceRegistry


class Client:
    """Instantiates the dataset mutation workflow against a processing engine.

    The dataset store is supplied by the host application; edit rights default
        to `SubmitterAuthorizer` over that store and molecular databases to the
        registry service configured by `MOLDB_API_HOST`.
    """

    datasets: DatasetMutationAPI

    _verbose: bool = False
    _gateway: EngineGateway
    _config: SMConfig

    def __init__(
        self,
        *,
        store: DatasetStore,
        authorizer: Authorizer | None = None,
        registry: MolecularDBRegistry | None = None,
        config_deriver: ConfigDeriver = add_processing_config,
        env_file: Path | None | type[Unset] = Unset,
        env_config: Mapping[str, Any] | None = None,
        verbose: bool = False,
    ) -> None:
        self._verbose = verbose
        self._config = SMConfig(
            env_file=env_file,
            env_config=env_config,
            verbose=verbose,
        )
        self._gateway = EngineGateway(
            host=self._config.sm_engine_api_host,
            timeout=self._config.timeout,
            verbose=verbose,
        )
        if registry is None:
            registry = MolDBServiceRegistry(
                host=self._config.registry_host,
                timeout=self._config.timeout,
            )
        self.datasets = DatasetMutationAPI(
            gateway=self._gateway,
            store=store,
            authorizer=authorizer or SubmitterAuthorizer(store),
            registry=registry,
            config_deriver=config_deriver,
            img_storage_url=self._config.img_storage_url,
            verbose=verbose,
        )
        log.debug(f"Initialized {self}")

    def __str__(self) -> str:
        return f"Client(engine={self.base_url})"

    @property
    def verbose(self) -> bool:
        """When True, shows verbose output."""
        return self._verbose

    @verbose.setter
    def verbose(self, value: bool) -> None:
        """Sets the verbose mode for the client and internal API instances."""
        self._verbose = bool(value)
        self._gateway.verbose = self._verbose
        self.datasets.verbose = self._verbose

    @property
    def base_url(self) -> str:
        """Base URL of the processing engine."""
        return self._gateway.base_url

    @property
    def config(self) -> SMConfig:
        return self._config
