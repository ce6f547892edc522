"""
Signature calculation and Authorization header formatting
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from ..crypto.primitives import HEX_ENCODING, hmac_sha256

_AUTHORIZATION_RE = re.compile(
    r"^(?P<algorithm>\S+)\s+"
    r"Credential=(?P<access_key>[^/,\s]+)/(?P<scope>[^,\s]+),\s*"
    r"SignedHeaders=(?P<signed_headers>[^,\s]+),\s*"
    r"Signature=(?P<signature>[0-9a-f]{64})$"
)


def calculate_signature(signing_key: bytes, string_to_sign: str) -> str:
    """
    Sign the string-to-sign with the derived key.

    Returns:
        str: 64 lowercase hex characters
    """
    return hmac_sha256(signing_key, string_to_sign, HEX_ENCODING)


def build_authorization_header(
    algorithm: str,
    access_key: str,
    scope: str,
    signed_headers: str,
    signature: str
) -> str:
    """
    Format the Authorization header value.

    Returns:
        str: "<alg> Credential=<key>/<scope>, SignedHeaders=<list>, Signature=<sig>"
    """
    return (
        f"{algorithm} Credential={access_key}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )


@dataclass(frozen=True)
class ParsedAuthorization:
    """Parsed SigV4 Authorization header."""
    algorithm: str
    access_key: str
    scope: str
    signed_headers: str
    signature: str

    @property
    def scope_parts(self) -> List[str]:
        """date/region/service/aws4_request split into parts."""
        return self.scope.split("/")

    @property
    def signed_header_names(self) -> List[str]:
        return self.signed_headers.split(";")


def parse_authorization_header(value: str) -> Optional[ParsedAuthorization]:
    """
    Parse a SigV4 Authorization header.

    Args:
        value: Full Authorization header value

    Returns:
        ParsedAuthorization if the value is well formed, None otherwise
    """
    if not value:
        return None

    match = _AUTHORIZATION_RE.match(value.strip())
    if not match:
        return None

    return ParsedAuthorization(
        algorithm=match.group("algorithm"),
        access_key=match.group("access_key"),
        scope=match.group("scope"),
        signed_headers=match.group("signed_headers"),
        signature=match.group("signature"),
    )
