"""
Canonical request construction for SigV4

Refer to
https://docs.aws.amazon.com/general/latest/gr/sigv4-create-canonical-request.html

    CanonicalRequest =
        HTTPRequestMethod + '\\n' +
        CanonicalURI + '\\n' +
        CanonicalQueryString + '\\n' +
        CanonicalHeaders + '\\n' +
        SignedHeaders + '\\n' +
        HexEncode(Hash(RequestPayload))

    CanonicalHeadersEntry =
        Lowercase(HeaderName) + ':' + Trimall(HeaderValue) + '\\n'
"""

from typing import Dict, List, Optional, Tuple

from ..crypto.primitives import sha256_hex
from ..exceptions import MalformedRequestError
from .types import (
    DEFAULT_METHOD,
    DuplicateHeaderPolicy,
    SignableRequest,
    SigningErrorCodes,
)
from .utils import normalize_header_name, normalize_header_value, parse_url


def collect_headers(
    headers: Optional[Dict[str, str]],
    policy: DuplicateHeaderPolicy = DuplicateHeaderPolicy.MERGE
) -> List[Tuple[str, str]]:
    """
    Lowercase, normalize and sort request headers.

    Names that collide after lowercasing are comma-joined under MERGE, with
    values in ordinal order, and rejected under REJECT.

    Args:
        headers: Request headers
        policy: Duplicate header policy

    Returns:
        list: (name, value) pairs sorted by name

    Raises:
        MalformedRequestError: If a duplicate name is found under REJECT
    """
    if not headers:
        return []

    grouped: Dict[str, List[str]] = {}
    for name, value in headers.items():
        key = normalize_header_name(name)
        if key in grouped and policy == DuplicateHeaderPolicy.REJECT:
            raise MalformedRequestError(
                f"Duplicate header after lowercasing: {key}",
                SigningErrorCodes.DUPLICATE_HEADER,
                {"header": key, "names": [n for n in headers if normalize_header_name(n) == key]}
            )
        grouped.setdefault(key, []).append(normalize_header_value(value))

    return sorted(
        ((key, ",".join(sorted(values))) for key, values in grouped.items()),
        key=lambda entry: entry[0]
    )


def canonical_headers(
    headers: Optional[Dict[str, str]],
    policy: DuplicateHeaderPolicy = DuplicateHeaderPolicy.MERGE
) -> str:
    """
    Build the CanonicalHeaders block.

    Returns:
        str: One "name:value\\n" line per header, or "" for no headers
    """
    return "".join(f"{name}:{value}\n" for name, value in collect_headers(headers, policy))


def signed_headers(
    headers: Optional[Dict[str, str]],
    policy: DuplicateHeaderPolicy = DuplicateHeaderPolicy.MERGE
) -> str:
    """
    List of header names included in the canonical headers.

    Returns:
        str: Sorted lowercase names joined with ";"
    """
    return ";".join(name for name, _ in collect_headers(headers, policy))


def canonical_query_string(query: Optional[str]) -> str:
    """
    Sort raw query tokens as whole "key=value" strings.

    Args:
        query: Raw query string without "?"

    Returns:
        str: Sorted tokens joined with "&", or "" when there is no query
    """
    if not query:
        return ""
    return "&".join(sorted(query.split("&")))


def canonical_method(method: Optional[str]) -> str:
    """Uppercase HTTP method, GET when absent."""
    if not method:
        return DEFAULT_METHOD
    return str(method).strip().upper()


class CanonicalRequestBuilder:
    """
    Canonical request builder for SigV4 signatures
    """

    def __init__(
        self,
        request: SignableRequest,
        policy: DuplicateHeaderPolicy = DuplicateHeaderPolicy.MERGE
    ):
        """
        Initialize canonical request builder.

        Args:
            request: Request to canonicalize
            policy: Duplicate header policy
        """
        self.request = request
        self.policy = policy
        self._headers = collect_headers(request.headers, policy)

    @property
    def canonical_headers(self) -> str:
        return "".join(f"{name}:{value}\n" for name, value in self._headers)

    @property
    def signed_headers(self) -> str:
        return ";".join(name for name, _ in self._headers)

    def build(self) -> str:
        """
        Build the canonical request string.

        Returns:
            str: Canonical request

        Raises:
            MalformedRequestError: If the URL or body cannot be used
        """
        url_parts = parse_url(self.request.url)

        return "\n".join([
            canonical_method(self.request.method),
            url_parts["pathname"],
            canonical_query_string(url_parts["query"]),
            self.canonical_headers,
            self.signed_headers,
            sha256_hex(self.request.body),
        ])


def canonical_request(
    request: SignableRequest,
    policy: DuplicateHeaderPolicy = DuplicateHeaderPolicy.MERGE
) -> str:
    """
    Build the canonical request for signing.

    Args:
        request: Request to canonicalize
        policy: Duplicate header policy

    Returns:
        str: Canonical request string
    """
    return CanonicalRequestBuilder(request, policy).build()
