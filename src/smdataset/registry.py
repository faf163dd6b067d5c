"""Molecular database registry access and name checks."""

from collections.abc import Iterable
from typing import Any

import pydantic
import requests
from loguru import logger as log

from smdataset.errors import RegistryError
from smdataset.errors import UnknownDatabase
from smdataset.interfaces import MolecularDBRegistry
from smdataset.models.databases import MolecularDB

DATABASES_ROUTE: str = "/v1/databases"


class MolDBServiceRegistry:
    """Lists molecular databases from the registry HTTP service."""

    def __init__(
        self,
        *,
        host: str,
        protocol: str = "http",
        timeout: int = 30,
    ) -> None:
        self.host = host
        self.protocol = protocol
        self.timeout = timeout

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}"

    def list(self, *, hide_deprecated: bool) -> list[MolecularDB]:
        """Fetches registry entries, deprecated ones included unless hidden."""
        url = f"{self.base_url}{DATABASES_ROUTE}"
        try:
            response = requests.get(
                url,
                params={"hide_deprecated": str(hide_deprecated).lower()},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as err:
            msg = f"Molecular database registry unreachable: {err}"
            raise RegistryError(msg) from err
        if not response.ok:
            msg = (
                f"Molecular database registry answered {response.status_code}: "
                f"{response.text}"
            )
            raise RegistryError(msg)
        try:
            entries: list[dict[str, Any]] = response.json()["data"]
            return [MolecularDB.model_validate(entry) for entry in entries]
        except (ValueError, KeyError, TypeError, pydantic.ValidationError) as err:
            msg = (
                "Unexpected molecular database registry response: "
                f"{response.text[:200]}"
            )
            raise RegistryError(msg) from err


class StaticRegistry:
    """In-memory registry, for fixed deployments and tests."""

    def __init__(self, databases: Iterable[MolecularDB]) -> None:
        self.databases = list(databases)

    def list(self, *, hide_deprecated: bool) -> list[MolecularDB]:
        if hide_deprecated:
            return [mol_db for mol_db in self.databases if not mol_db.deprecated]
        return list(self.databases)


def check_databases_exist(
    registry: MolecularDBRegistry,
    requested_names: Iterable[str],
) -> None:
    """Raises UnknownDatabase for the first requested name not in the registry.

    Deprecated databases are valid targets.
    """
    existing = {mol_db.name for mol_db in registry.list(hide_deprecated=False)}
    for name in requested_names:
        if name not in existing:
            log.info(f"Unknown molecular database requested: {name}")
            raise UnknownDatabase(name)
