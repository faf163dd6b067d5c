"""Lower level module for interaction with the processing engine API."""

from enum import StrEnum
from typing import Any

from loguru import logger as log

from .ops import network

API_TARGET_VERSION: str = "v1"


class Endpoints(StrEnum):
    """Contains the routes of the processing engine API. All are POSTed to."""

    ADD_DATASET = "/datasets/add"
    UPDATE_DATASET = "/datasets/{ds_id}/update"
    DELETE_DATASET = "/datasets/{ds_id}/delete"
    ADD_OPTICAL_IMAGE = "/datasets/{ds_id}/add-optical-image"
    DEL_OPTICAL_IMAGE = "/datasets/{ds_id}/del-optical-image"


class EngineGateway:
    """Sends dataset requests to the processing engine.

    Responses are opaque: a success returns the raw body, anything else raises
        EngineRequestFailed. Requests are never retried.
    """

    host: str
    protocol: str
    timeout: int
    verbose: bool = False

    def __init__(
        self,
        *,
        host: str,
        protocol: str = "http",
        timeout: int = 30,
        verbose: bool = False,
    ) -> None:
        self.host = host
        self.protocol = protocol
        self.timeout = timeout
        self.verbose = verbose

    @property
    def base_url(self) -> str:
        """Returns the base URL for the engine API."""
        return f"{self.protocol}://{self.host}"

    def route(
        self,
        endpoint: Endpoints,
        endpoint_args: None | dict[str, Any] = None,
    ) -> str:
        """Formats an endpoint into the versioned route, e.g. /v1/datasets/add."""
        endpoint_fmt = (
            endpoint.value.format(**endpoint_args) if endpoint_args else endpoint.value
        )
        if "{" in endpoint_fmt:
            msg = f"Endpoint '{endpoint}' has missing arguments in '{endpoint_args}'"
            raise ValueError(msg)
        assert API_TARGET_VERSION.startswith("v"), "API version must start with 'v'."
        return f"/{API_TARGET_VERSION}{endpoint_fmt}"

    def send_to_engine(
        self,
        dataset_id: str | None,
        route: str,
        payload: dict[str, Any],
    ) -> str:
        """POSTs a payload to an engine route.

        Args:
            dataset_id: The dataset the request is about, for logging.
            route:      The versioned route, see `route()`.
            payload:    JSON body of the request.
        Returns:
            The raw response body.
        Raises:
            EngineRequestFailed: on a non-success status or transport error.
        """
        url = f"{self.base_url}{route}"
        if self.verbose:
            log.opt(depth=1).debug(f"Engine req: POST {url}")
        body = network.post_json(url, payload, route=route, timeout=self.timeout)
        log.info(f"Successful {route}: {dataset_id}")
        log.debug(f"Body: {payload}")
        return body

    # ===============
    # DATASET METHODS

    def add_dataset(self, payload: dict[str, Any]) -> str:
        """Creates, or replaces when `payload` has an id, a dataset in the engine."""
        route = self.route(Endpoints.ADD_DATASET)
        return self.send_to_engine(payload.get("id"), route, payload)

    def update_dataset(self, dataset_id: str, payload: dict[str, Any]) -> str:
        route = self.route(Endpoints.UPDATE_DATASET, {"ds_id": dataset_id})
        return self.send_to_engine(dataset_id, route, payload)

    def delete_dataset(self, dataset_id: str) -> str:
        route = self.route(Endpoints.DELETE_DATASET, {"ds_id": dataset_id})
        return self.send_to_engine(dataset_id, route, {})

    # =====================
    # OPTICAL IMAGE METHODS

    def add_optical_image(
        self,
        dataset_id: str,
        *,
        url: str,
        transform: Any,
    ) -> str:
        route = self.route(Endpoints.ADD_OPTICAL_IMAGE, {"ds_id": dataset_id})
        return self.send_to_engine(
            dataset_id, route, {"url": url, "transform": transform}
        )

    def delete_optical_image(self, dataset_id: str) -> str:
        route = self.route(Endpoints.DEL_OPTICAL_IMAGE, {"ds_id": dataset_id})
        return self.send_to_engine(dataset_id, route, {})
