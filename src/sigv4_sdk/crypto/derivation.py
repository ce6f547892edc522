"""
Signing key derivation for SigV4

The signing key is produced by a strictly ordered HMAC-SHA256 chain:

    kSecret  = "AWS4" + secret access key
    kDate    = HMAC(kSecret, date stamp)
    kRegion  = HMAC(kDate, region)
    kService = HMAC(kRegion, service)
    kSigning = HMAC(kService, "aws4_request")

Each step is keyed by the raw output of the previous one, so the chain cannot
be parallelised. The resulting key is bound to one date, region and service.
"""

from dataclasses import dataclass
from typing import Tuple

from ..exceptions import MissingCredentialsError, UnresolvableServiceInfoError
from .primitives import hmac_sha256

SECRET_KEY_PREFIX = "AWS4"
SCOPE_TERMINATOR = "aws4_request"


@dataclass(frozen=True)
class DerivationSteps:
    """
    Intermediate keys of the derivation chain, in order.

    Attributes:
        k_date: HMAC of the date stamp
        k_region: HMAC of the region
        k_service: HMAC of the service name
        k_signing: Final signing key
    """
    k_date: bytes
    k_region: bytes
    k_service: bytes
    k_signing: bytes

    def __repr__(self) -> str:
        return "DerivationSteps(<redacted>)"

    def as_tuple(self) -> Tuple[bytes, bytes, bytes, bytes]:
        return (self.k_date, self.k_region, self.k_service, self.k_signing)


def derive_signing_key_steps(secret_key: str, date_stamp: str, region: str, service: str) -> DerivationSteps:
    """
    Run the derivation chain and keep every intermediate key.

    Args:
        secret_key: Secret access key
        date_stamp: Date in YYYYMMDD form
        region: Region name (e.g. "us-east-1")
        service: Service name (e.g. "dynamodb")

    Returns:
        DerivationSteps: All chain outputs

    Raises:
        MissingCredentialsError: If the secret key is empty
        UnresolvableServiceInfoError: If region or service is empty
    """
    if not secret_key:
        raise MissingCredentialsError(
            "Secret key is required to derive a signing key",
            details={"field": "secret_key"}
        )

    if not region or not service:
        raise UnresolvableServiceInfoError(
            "Region and service are required to derive a signing key",
            details={"region": region, "service": service}
        )

    k_date = hmac_sha256((SECRET_KEY_PREFIX + secret_key).encode("utf-8"), date_stamp)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    k_signing = hmac_sha256(k_service, SCOPE_TERMINATOR)

    return DerivationSteps(
        k_date=k_date,
        k_region=k_region,
        k_service=k_service,
        k_signing=k_signing
    )


def derive_signing_key(secret_key: str, date_stamp: str, region: str, service: str) -> bytes:
    """
    Derive the per-request signing key.

    Args:
        secret_key: Secret access key
        date_stamp: Date in YYYYMMDD form
        region: Region name
        service: Service name

    Returns:
        bytes: 32-byte signing key
    """
    return derive_signing_key_steps(secret_key, date_stamp, region, service).k_signing
