"""
SigV4 Python SDK - Signature Verification Module

Server-side counterpart of the signer: checks that a received request was
signed with a known shared secret.
"""

from .types import (
    VerificationResult,
    VerificationStatus,
)

from .verifier import (
    DEFAULT_MAX_CLOCK_SKEW_SECONDS,
    SigV4Verifier,
    verify_request,
)

__all__ = [
    'VerificationResult',
    'VerificationStatus',
    'DEFAULT_MAX_CLOCK_SKEW_SECONDS',
    'SigV4Verifier',
    'verify_request',
]
