"""
Credential scope and string-to-sign construction

Refer to
https://docs.aws.amazon.com/general/latest/gr/sigv4-create-string-to-sign.html

    StringToSign =
        Algorithm + \\n +
        RequestDateTime + \\n +
        CredentialScope + \\n +
        HashedCanonicalRequest
"""

from ..crypto.derivation import SCOPE_TERMINATOR
from ..crypto.primitives import sha256_hex


def credential_scope(date_stamp: str, region: str, service: str) -> str:
    """
    Build the credential scope limiting where a signing key is valid.

    Args:
        date_stamp: Date in YYYYMMDD form
        region: Region name
        service: Service name

    Returns:
        str: "date/region/service/aws4_request"
    """
    return "/".join([date_stamp, region, service, SCOPE_TERMINATOR])


def string_to_sign(algorithm: str, canonical_request: str, timestamp: str, scope: str) -> str:
    """
    Build the string that gets signed.

    Args:
        algorithm: Signing algorithm identifier
        canonical_request: Canonical request string
        timestamp: Full x-amz-date timestamp
        scope: Credential scope

    Returns:
        str: String-to-sign binding algorithm, time, scope and request hash
    """
    return "\n".join([
        algorithm,
        timestamp,
        scope,
        sha256_hex(canonical_request),
    ])
