"""HTTP response helpers shared by adapters."""

import json
from typing import Any
from urllib.parse import parse_qsl

import httpx


def parse_response_body(body: str) -> Any:
    """Parse a provider response body.

    Token endpoints answer with JSON, but some older ones still send
    application/x-www-form-urlencoded bodies, so fall back to that.

    Args:
        body: Raw response text

    Returns:
        Decoded JSON value, or the form fields as a dict
    """
    if not body:
        return {}

    try:
        data = json.loads(body)
    except ValueError:
        return dict(parse_qsl(body))

    return data


def is_success(response: httpx.Response) -> bool:
    """Whether the status code is in the 2xx range."""
    return 200 <= response.status_code <= 299
