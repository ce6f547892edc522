"""
Type definitions for SigV4 request signing

This module provides the data classes and constants shared by the signing
pipeline: the request being signed, the credentials, the service scope and
the per-call signing context.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Union
from datetime import datetime

from ..exceptions import MalformedRequestError

ALGORITHM = "AWS4-HMAC-SHA256"

# Header names set by the signer
HOST_HEADER = "host"
AMZ_DATE_HEADER = "x-amz-date"
SECURITY_TOKEN_HEADER = "x-amz-security-token"
AUTHORIZATION_HEADER = "Authorization"

# strftime format of the x-amz-date header, e.g. 20150830T123600Z
AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
DATE_STAMP_LENGTH = 8

DEFAULT_METHOD = "GET"


class HttpMethod(str, Enum):
    """HTTP methods commonly signed"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class DuplicateHeaderPolicy(str, Enum):
    """How header names that collide after lowercasing are canonicalized"""
    MERGE = "merge"
    REJECT = "reject"


RequestBody = Union[str, bytes, bytearray, memoryview, None]


@dataclass
class SignableRequest:
    """
    Request to be signed with SigV4

    The signer takes exclusive ownership of the request for the duration of
    a signing call and adds headers to it in place.

    Attributes:
        url: Complete request URL
        method: HTTP method (GET, POST, etc.), defaults to GET when absent
        headers: Request headers, original casing preserved
        body: Optional request body (string or bytes)
        service: Optional per-request service name override
        region: Optional per-request region override
    """
    url: str
    method: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: RequestBody = None
    service: Optional[str] = None
    region: Optional[str] = None

    def __post_init__(self):
        """Validate request after initialization"""
        if not self.url or not isinstance(self.url, str):
            raise MalformedRequestError("Request URL cannot be empty", details={"url": self.url})

        if self.headers is None:
            self.headers = {}
        elif not isinstance(self.headers, dict) and isinstance(self.headers, Mapping):
            self.headers = dict(self.headers)

        if not isinstance(self.headers, dict):
            raise MalformedRequestError(
                "Headers must be a dictionary",
                details={"headers_type": type(self.headers).__name__}
            )

        if isinstance(self.method, HttpMethod):
            self.method = self.method.value


@dataclass(frozen=True)
class AccessInfo:
    """
    Credentials used to sign a request. Never persisted.

    Attributes:
        access_key: Access key ID, embedded in the credential scope
        secret_key: Secret access key, seed of the derivation chain
        session_token: Optional session token for temporary credentials
    """
    access_key: str
    secret_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class ServiceInfo:
    """
    Target service and region of a request

    Either field may be None when the instance is used as an override; a
    resolved ServiceInfo always carries both.
    """
    service: Optional[str] = None
    region: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.service) and bool(self.region)


@dataclass(frozen=True)
class SigningContext:
    """
    Values derived during one signing call

    Attributes:
        algorithm: Signing algorithm identifier
        timestamp: Full timestamp (YYYYMMDDThhmmssZ)
        date_stamp: First eight characters of the timestamp
        service_info: Resolved service and region
        credential_scope: date/region/service/aws4_request
        canonical_request: Canonical request string
        signed_headers: Semicolon separated signed header names
        string_to_sign: String that was signed
        signing_key: Derived signing key
        signature: Hex signature
        authorization: Authorization header value
    """
    algorithm: str
    timestamp: str
    date_stamp: str
    service_info: ServiceInfo
    credential_scope: str
    canonical_request: str
    signed_headers: str
    string_to_sign: str
    signing_key: bytes = field(repr=False)
    signature: str
    authorization: str


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    INVALID_URL = "INVALID_URL"
    MISSING_HOST = "MISSING_HOST"
    DUPLICATE_HEADER = "DUPLICATE_HEADER"
    INVALID_BODY = "INVALID_BODY"

    UNRESOLVABLE_SERVICE_INFO = "UNRESOLVABLE_SERVICE_INFO"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"

    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"

    VERIFICATION_FAILED = "VERIFICATION_FAILED"
    INVALID_AUTHORIZATION = "INVALID_AUTHORIZATION"
    MISSING_SIGNED_HEADER = "MISSING_SIGNED_HEADER"


# Type aliases for convenience
TimestampGenerator = Callable[[], datetime]
HeaderDict = Dict[str, str]
