"""Normalize thrown values into a uniform ``ErrorInfo``.

Failed calls surface in many shapes: response objects raised directly,
fetch-style errors with a ``status``, wrappers exposing ``.response`` (as
``requests.HTTPError`` and ``httpx.HTTPStatusError`` do), errors carrying a
``status_code`` and plain exceptions whose message embeds ``status: NNN``.
Everything downstream works on the normalized triple only.
"""

import re
from typing import Any, Mapping, Optional

from mend.core.models import ErrorInfo

from .backoff import parse_retry_after_header

STATUS_IN_MESSAGE = re.compile(r"status:\s*(\d+)", re.IGNORECASE)

DEFAULT_MESSAGE = "Request failed"


def _get(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _get_int(obj: Any, name: str) -> Optional[int]:
    value = _get(obj, name)
    # bool is an int subclass but never a status
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _get_headers(obj: Any) -> Optional[Mapping[str, Any]]:
    headers = _get(obj, "headers")
    if isinstance(headers, Mapping):
        return headers
    # requests/httpx header containers expose .get but are not always Mappings
    if headers is not None and callable(getattr(headers, "get", None)):
        return headers
    return None


def _get_message(error: Any) -> str:
    if isinstance(error, BaseException):
        return str(error)
    message = _get(error, "message")
    if isinstance(message, str):
        return message
    return ""


def status_from_message(message: str) -> Optional[int]:
    """Extract a ``status: NNN`` code embedded in free text."""
    match = STATUS_IN_MESSAGE.search(message)
    if match:
        return int(match.group(1))
    return None


def extract_error_info(error: Any) -> ErrorInfo:
    """Extract status, Retry-After hint and message from any error shape.

    Args:
        error: Raised exception, response object or error mapping

    Returns:
        Normalized error info; status is 0 when none can be found
    """
    if error is None:
        return ErrorInfo(message="None")

    message = _get_message(error)

    # Response objects raised or returned as errors
    if not isinstance(error, (BaseException, Mapping)):
        status = _get_int(error, "status_code")
        if status is None:
            status = _get_int(error, "status")
        headers = _get_headers(error)
        if status is not None and headers is not None:
            reason = _get(error, "reason_phrase") or _get(error, "reason")
            return ErrorInfo(
                status=status,
                retry_after_ms=parse_retry_after_header(headers),
                message=reason or message or DEFAULT_MESSAGE,
            )

    # Fetch-style errors carrying a status
    status = _get_int(error, "status")
    if status is not None:
        return ErrorInfo(
            status=status,
            retry_after_ms=parse_retry_after_header(_get_headers(error)),
            message=message or DEFAULT_MESSAGE,
        )

    # Wrapped errors exposing the failed response
    response = _get(error, "response")
    if response is not None and not isinstance(response, (str, bytes)):
        status = _get_int(response, "status_code")
        if status is None:
            status = _get_int(response, "status")
        return ErrorInfo(
            status=status or 0,
            retry_after_ms=parse_retry_after_header(_get_headers(response)),
            message=message or DEFAULT_MESSAGE,
        )

    status = _get_int(error, "status_code")
    if status is not None:
        return ErrorInfo(status=status, message=message or DEFAULT_MESSAGE)

    status = status_from_message(message)
    if status is not None:
        return ErrorInfo(status=status, message=message)

    return ErrorInfo(status=0, message=message or str(error))
