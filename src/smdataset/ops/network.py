"""Network operations shared by the engine gateway and registry client."""

import requests
from loguru import logger as log

from smdataset import errors


def success_or_raise(response: requests.Response, *, route: str) -> str:
    """Returns the raw body of a successful response, raising otherwise.

    The body is kept verbatim in both cases: callers get it unparsed.
    """
    body = response.text
    if 200 <= response.status_code <= 299:  # noqa: PLR2004
        return body

    log.opt(depth=1).error(f"{route} answered {response.status_code}: {body}")
    raise errors.EngineRequestFailed(route=route, body=body)


def post_json(
    url: str,
    payload: dict,
    *,
    route: str,
    timeout: int,
) -> str:
    """POSTs a JSON payload; transport failures become EngineRequestFailed."""
    try:
        response = requests.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except requests.exceptions.RequestException as err:
        log.opt(depth=1).error(f"{route} unreachable: {err}")
        raise errors.EngineRequestFailed(route=route, body=str(err)) from err
    return success_or_raise(response, route=route)
