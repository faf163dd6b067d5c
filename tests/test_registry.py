"""Tests for the molecular database registry."""

import pytest
import responses
from responses import matchers
from smdataset.errors import RegistryError
from smdataset.errors import UnknownDatabase
from smdataset.models import MolecularDB
from smdataset.registry import MolDBServiceRegistry
from smdataset.registry import StaticRegistry
from smdataset.registry import check_databases_exist

REGISTRY_URL = "http://moldb.test:5001/v1/databases"


def test_unknown_database_is_reported_by_name() -> None:
    registry = StaticRegistry([MolecularDB(name="A"), MolecularDB(name="B")])
    with pytest.raises(UnknownDatabase) as exc_info:
        check_databases_exist(registry, ["A", "C"])
    assert exc_info.value.name == "C"
    assert exc_info.value.to_payload() == {
        "type": "wrong_moldb_name",
        "moldb_name": "C",
    }


def test_first_unknown_database_wins() -> None:
    registry = StaticRegistry([MolecularDB(name="A")])
    with pytest.raises(UnknownDatabase, match="X"):
        check_databases_exist(registry, ["X", "Y"])


def test_deprecated_databases_are_accepted(registry: StaticRegistry) -> None:
    check_databases_exist(registry, ["HMDB", "LipidMaps"])


def test_no_databases_requested(registry: StaticRegistry) -> None:
    check_databases_exist(registry, [])


def test_static_registry_hides_deprecated(registry: StaticRegistry) -> None:
    names = {mol_db.name for mol_db in registry.list(hide_deprecated=True)}
    assert names == {"HMDB", "ChEBI"}


def test_service_registry_lists_deprecated(
    responses: responses.RequestsMock,
) -> None:
    """Deprecated entries are requested from the registry service too."""
    responses.get(
        url=REGISTRY_URL,
        match=[matchers.query_param_matcher({"hide_deprecated": "false"})],
        json={
            "data": [
                {"name": "HMDB", "version": "v4", "deprecated": False, "id": 1},
                {"name": "LipidMaps", "deprecated": True},
            ]
        },
    )
    registry = MolDBServiceRegistry(host="moldb.test:5001")

    mol_dbs = registry.list(hide_deprecated=False)

    assert [mol_db.name for mol_db in mol_dbs] == ["HMDB", "LipidMaps"]
    assert mol_dbs[1].deprecated
    check_databases_exist(registry, ["LipidMaps"])


def test_service_registry_failure(responses: responses.RequestsMock) -> None:
    responses.get(url=REGISTRY_URL, status=503, body="maintenance")
    registry = MolDBServiceRegistry(host="moldb.test:5001")
    with pytest.raises(RegistryError, match="maintenance"):
        registry.list(hide_deprecated=False)


def test_service_registry_unexpected_body(responses: responses.RequestsMock) -> None:
    responses.get(url=REGISTRY_URL, json={"items": []})
    registry = MolDBServiceRegistry(host="moldb.test:5001")
    with pytest.raises(RegistryError, match="Unexpected"):
        registry.list(hide_deprecated=True)
