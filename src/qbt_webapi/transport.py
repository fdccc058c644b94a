"""
HTTP transport helpers

GET endpoints return JSON or plain text, commands are multipart POSTs. A 403
from the daemon becomes a RequestError; everything else is left to requests.
"""

import os
from typing import Any, Dict, Mapping, Optional, Union

import requests
from requests_toolbelt import MultipartEncoder

from qbt_webapi.errors import RequestError
from qbt_webapi.logging import get_logger

logger = get_logger(__name__)


def _check_forbidden(response: requests.Response):
    if response.status_code == 403:
        raise RequestError(response.status_code, response.reason or 'Forbidden', response.url, response.text)


def _get(session: requests.Session, url: str, params: Optional[Dict[str, Any]]) -> requests.Response:
    response = session.get(url, params=params)
    logger.debug(f"GET {url} -> {response.status_code}")

    _check_forbidden(response)
    response.raise_for_status()
    return response


def fetch_json(session: requests.Session, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
    """
    GET a JSON resource

    Args:
        session: HTTP session to send the request with
        url: Absolute endpoint URL
        params: Query string parameters

    Returns:
        Decoded JSON body, or None when the body is empty

    Raises:
        RequestError: If the daemon answers 403 Forbidden
        requests.HTTPError: For any other non-success status
    """
    response = _get(session, url, params)

    if not response.content:
        return None

    return response.json()


def fetch_text(session: requests.Session, url: str, params: Optional[Dict[str, Any]] = None) -> str:
    """GET a plain-text resource (versions, limits)"""
    return _get(session, url, params).text


def _multipart_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Map form fields to multipart parts

    Strings become plain form parts; streams (or (filename, stream) pairs)
    become file parts.
    """
    parts = {}
    for name, value in fields.items():
        if isinstance(value, str):
            parts[name] = (None, value)
        elif isinstance(value, tuple):
            parts[name] = value
        else:
            filename = os.path.basename(getattr(value, 'name', name))
            parts[name] = (filename, value)
    return parts


def multipart_body(fields: Mapping[str, Any]) -> MultipartEncoder:
    """
    Build a streaming multipart/form-data body

    File parts are read from their streams while the request is sent, and
    the body size is known up front from the size of each part.

    Returns:
        Encoder with `content_type` and the exact body length in `len`
    """
    return MultipartEncoder(fields=_multipart_fields(fields))


def submit_form(session: requests.Session, url: str, fields: Union[Mapping[str, Any], MultipartEncoder],
                headers: Optional[Dict[str, str]] = None):
    """
    POST a command as multipart/form-data

    The daemon does not acknowledge commands, so apart from a 403 the
    response is not inspected.

    Args:
        session: HTTP session to send the request with
        url: Absolute endpoint URL
        fields: Field name to text, binary stream or (filename, stream),
                or a body prepared by multipart_body()
        headers: Extra request headers

    Raises:
        RequestError: If the daemon answers 403 Forbidden
    """
    if isinstance(fields, MultipartEncoder):
        response = session.post(url, data=fields, headers=headers)
    elif fields:
        response = session.post(url, files=_multipart_fields(fields), headers=headers)
    else:
        response = session.post(url, headers=headers)
    logger.debug(f"POST {url} -> {response.status_code}")

    _check_forbidden(response)
