"""
Type definitions for SigV4 signature verification
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..signing.types import ServiceInfo


class VerificationStatus(str, Enum):
    """Outcome of a verification"""
    VALID = "valid"
    INVALID_SIGNATURE = "invalid_signature"
    ACCESS_KEY_MISMATCH = "access_key_mismatch"
    SCOPE_MISMATCH = "scope_mismatch"
    SIGNED_HEADERS_MISMATCH = "signed_headers_mismatch"
    CLOCK_SKEW = "clock_skew"


@dataclass
class VerificationResult:
    """
    Result of verifying a signed request

    Attributes:
        status: Verification outcome
        access_key: Access key named in the credential scope
        service_info: Service and region named in the credential scope
        timestamp: x-amz-date value of the request
        canonical_request: Canonical request rebuilt from the received request
        expected_signature: Signature computed locally (None if not computed)
        provided_signature: Signature carried by the request
        messages: Human readable diagnostics
    """
    status: VerificationStatus
    access_key: str
    service_info: ServiceInfo
    timestamp: str
    provided_signature: str
    canonical_request: Optional[str] = None
    expected_signature: Optional[str] = None
    messages: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.status == VerificationStatus.VALID
