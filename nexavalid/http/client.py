"""
NexaValid HTTP Helper
=====================

One-call JSON requests whose response body can be bound straight
into a record and handed to the validator.

Example:
    body, status = make_request(
        "https://api.example.com/users/42",
        "GET",
        headers={"Authorization": "Bearer ..."},
        response_type=UserRecord,
    )
    errors = validate(body)
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import httpx
import orjson

from nexavalid.core.config import get_config
from nexavalid.utils.logger import get_logger
from nexavalid.validation.errors import NexaValidError, RecordTypeError
from nexavalid.validation.record import bind

logger = get_logger("nexavalid.http")


class RequestError(NexaValidError):
    """The request could not be sent or no response was received."""

    def __init__(self, url: str, method: str, cause: Exception) -> None:
        self.url = url
        self.method = method
        self.cause = cause
        super().__init__(f"{method} {url} failed: {cause}")


class ResponseDecodeError(NexaValidError):
    """The response body is not JSON of the expected shape."""

    def __init__(self, url: str, status_code: int, reason: str) -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Cannot decode response from {url} (status {status_code}): {reason}")


def make_request(
    url: str,
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    body: Optional[bytes] = None,
    response_type: Optional[type] = None,
    client: Optional[httpx.Client] = None,
) -> Tuple[Any, int]:
    """
    Send one HTTP request and decode the JSON response.

    Args:
        url: Target URL
        method: HTTP method
        headers: Request headers
        body: Raw request body
        response_type: Record type to bind the decoded object into
        client: Client to send with (a short-lived one if None)

    Returns:
        (decoded body, status code)

    Raises:
        RequestError: transport failure
        ResponseDecodeError: body is not JSON, or not an object when
            response_type is given
    """
    method = method.upper()
    log = logger.with_context(method=method, url=url)

    request_kwargs: Dict[str, Any] = {"headers": headers or {}}
    if body is not None:
        request_kwargs["content"] = body

    try:
        if client is not None:
            response = client.request(method, url, **request_kwargs)
        else:
            timeout = get_config().get_float("http.timeout", 10.0)
            with httpx.Client(timeout=timeout) as own_client:
                response = own_client.request(method, url, **request_kwargs)
    except httpx.HTTPError as e:
        log.error("Request failed", exception=e)
        raise RequestError(url, method, e) from e

    status = response.status_code
    log.debug("Response received", status=status, size=len(response.content))

    try:
        decoded = orjson.loads(response.content)
    except orjson.JSONDecodeError as e:
        log.error("Response is not JSON", status=status)
        raise ResponseDecodeError(url, status, str(e)) from e

    if response_type is None:
        return decoded, status

    try:
        return bind(response_type, decoded), status
    except RecordTypeError:
        raise
    except TypeError as e:
        log.error("Response does not match record", status=status, record=response_type.__name__)
        raise ResponseDecodeError(url, status, str(e)) from e
