"""Tests for the gateway module."""

import json

import pytest
import requests
import responses
from smdataset.errors import EngineRequestFailed
from smdataset.gateway import Endpoints
from smdataset.gateway import EngineGateway

from tests.conftest import ENGINE_URL
from tests.conftest import engine_url


def test_endpoints() -> None:
    """All endpoints must start with a slash."""
    assert all(
        endpoint.startswith("/") for endpoint in Endpoints.__members__.values()
    ), "All endpoints must start with a slash."


def test_base_url(gateway: EngineGateway) -> None:
    assert gateway.base_url == ENGINE_URL


def test_route_formatting(gateway: EngineGateway) -> None:
    assert gateway.route(Endpoints.ADD_DATASET) == "/v1/datasets/add"
    assert (
        gateway.route(Endpoints.DEL_OPTICAL_IMAGE, {"ds_id": "ds-1"})
        == "/v1/datasets/ds-1/del-optical-image"
    )


def test_route_missing_arguments(gateway: EngineGateway) -> None:
    with pytest.raises(ValueError, match="missing arguments"):
        gateway.route(Endpoints.UPDATE_DATASET)


def test_success_returns_raw_body(
    gateway: EngineGateway, responses: responses.RequestsMock
) -> None:
    """The engine response is handed back unparsed."""
    raw_body = '{"status": "ok", "ds_id": "ds-1"}'
    responses.post(url=engine_url("/v1/datasets/ds-1/delete"), body=raw_body)

    assert gateway.delete_dataset("ds-1") == raw_body
    assert json.loads(responses.calls[0].request.body) == {}


def test_failed_add_keeps_body_verbatim(
    gateway: EngineGateway, responses: responses.RequestsMock
) -> None:
    raw_body = "Traceback (most recent call last):\n  KeyError: 'config'"
    responses.post(url=engine_url("/v1/datasets/add"), status=500, body=raw_body)

    with pytest.raises(EngineRequestFailed) as exc_info:
        gateway.add_dataset({"name": "ds1"})

    assert exc_info.value.route == "/v1/datasets/add"
    assert exc_info.value.body == raw_body
    assert exc_info.value.to_payload() == {
        "type": "engine_request_failed",
        "route": "/v1/datasets/add",
        "body": raw_body,
    }


def test_nonstandard_status_is_engine_failure(
    gateway: EngineGateway, responses: responses.RequestsMock
) -> None:
    """Statuses outside the registered HTTP codes are failures too."""
    responses.post(url=engine_url("/v1/datasets/add"), status=520, body="origin error")

    with pytest.raises(EngineRequestFailed) as exc_info:
        gateway.add_dataset({"name": "ds1"})

    assert exc_info.value.body == "origin error"


def test_unreachable_engine(
    gateway: EngineGateway, responses: responses.RequestsMock
) -> None:
    responses.post(
        url=engine_url("/v1/datasets/ds-1/update"),
        body=requests.exceptions.ConnectionError("connection refused"),
    )
    with pytest.raises(EngineRequestFailed, match="connection refused"):
        gateway.update_dataset("ds-1", {"name": "ds1"})


def test_optical_image_payload(
    gateway: EngineGateway, responses: responses.RequestsMock
) -> None:
    responses.post(url=engine_url("/v1/datasets/ds-1/add-optical-image"), body="ok")
    transform = [[1, 0, 0], [0, 1, 0], [0, 0, 1]]

    gateway.add_optical_image("ds-1", url="http://img/1", transform=transform)

    assert json.loads(responses.calls[0].request.body) == {
        "url": "http://img/1",
        "transform": transform,
    }
