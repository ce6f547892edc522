"""
Utility functions for request signing

This module provides URL parsing, timestamp handling, header normalization
and credential validation helpers used across the signing pipeline.
"""

import re
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from ..exceptions import MalformedRequestError, MissingCredentialsError
from .types import (
    AMZ_DATE_FORMAT,
    DATE_STAMP_LENGTH,
    AccessInfo,
    SigningErrorCodes,
)

_WHITESPACE_RUN = re.compile(r"\s+")


def generate_timestamp() -> datetime:
    """
    Capture the current time in UTC.

    Returns:
        datetime: Timezone-aware current UTC time
    """
    return datetime.now(timezone.utc)


def format_amz_date(moment: datetime) -> Tuple[str, str]:
    """
    Format a moment as the x-amz-date timestamp and its date stamp.

    Naive datetimes are taken to be UTC already. Sub-second precision is
    dropped.

    Args:
        moment: Time of signing

    Returns:
        tuple: (timestamp "YYYYMMDDThhmmssZ", date stamp "YYYYMMDD")
    """
    if not isinstance(moment, datetime):
        raise MalformedRequestError(
            f"Signing time must be a datetime, got {type(moment).__name__}",
            SigningErrorCodes.INVALID_TIMESTAMP,
            {"timestamp": repr(moment)}
        )

    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)

    timestamp = moment.strftime(AMZ_DATE_FORMAT)
    return timestamp, timestamp[:DATE_STAMP_LENGTH]


def parse_url(url: str) -> Dict[str, str]:
    """
    Parse URL to extract components needed for signing.

    Args:
        url: URL string to parse

    Returns:
        dict: Dictionary with parsed URL components:
            - host: host as sent in the Host header (port kept, userinfo dropped)
            - hostname: lowercase host name without port
            - pathname: path component ("/" when empty)
            - query: raw query string without "?"

    Raises:
        MalformedRequestError: If URL format is invalid or has no host
    """
    try:
        parsed = urlsplit(url)
    except (TypeError, ValueError) as e:
        raise MalformedRequestError(
            f"Failed to parse URL: {e}",
            SigningErrorCodes.INVALID_URL,
            {"url": url, "original_error": str(e)}
        )

    if parsed.scheme not in ('http', 'https'):
        raise MalformedRequestError(
            f"Unsupported URL scheme: {parsed.scheme!r}",
            SigningErrorCodes.INVALID_URL,
            {"url": url, "scheme": parsed.scheme}
        )

    host = parsed.netloc.rpartition('@')[2]
    if not host or not parsed.hostname:
        raise MalformedRequestError(
            f"URL has no host: {url}",
            SigningErrorCodes.MISSING_HOST,
            {"url": url}
        )

    return {
        "host": host,
        "hostname": parsed.hostname.lower(),
        "pathname": parsed.path or "/",
        "query": parsed.query,
    }


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for consistent processing.

    Args:
        name: Header name to normalize

    Returns:
        str: Lowercase header name
    """
    return str(name).strip().lower()


def normalize_header_value(value) -> str:
    """
    Collapse whitespace runs to one space and trim both ends.

    Args:
        value: Header value (non-strings are converted with str, None is empty)

    Returns:
        str: Normalized header value
    """
    if value is None:
        return ""
    return _WHITESPACE_RUN.sub(" ", str(value)).strip()


def find_header(headers: Dict[str, str], name: str) -> Optional[str]:
    """
    Look up a header case-insensitively.

    Returns:
        str or None: Value of the first matching header
    """
    wanted = normalize_header_name(name)
    for key, value in headers.items():
        if normalize_header_name(key) == wanted:
            return value
    return None


def remove_header(headers: Dict[str, str], name: str) -> List[str]:
    """
    Remove every case-variant of a header.

    Returns:
        list: Names of the removed keys
    """
    wanted = normalize_header_name(name)
    removed = [key for key in headers if normalize_header_name(key) == wanted]
    for key in removed:
        del headers[key]
    return removed


def set_header(headers: Dict[str, str], name: str, value: str) -> None:
    """
    Set a header, replacing any existing case-variant of its name.
    """
    remove_header(headers, name)
    headers[name] = value


def validate_access_info(access_info: Optional[AccessInfo]) -> AccessInfo:
    """
    Check that credentials carry both an access key and a secret key.

    Args:
        access_info: Credentials to validate

    Returns:
        AccessInfo: The same credentials

    Raises:
        MissingCredentialsError: If credentials are absent or incomplete
    """
    if access_info is None:
        raise MissingCredentialsError(
            "Access info is required for signing",
            SigningErrorCodes.MISSING_CREDENTIALS
        )

    missing = [
        field_name for field_name in ("access_key", "secret_key")
        if not getattr(access_info, field_name, None)
    ]
    if missing:
        raise MissingCredentialsError(
            f"Missing credentials: {', '.join(missing)}",
            SigningErrorCodes.MISSING_CREDENTIALS,
            {"missing_fields": missing}
        )

    return access_info
