"""
Cryptographic building blocks for SigV4 signing
"""

from .primitives import (
    EMPTY_PAYLOAD_HASH,
    HEX_ENCODING,
    sha256_hex,
    hmac_sha256,
    to_bytes,
)
from .derivation import (
    SECRET_KEY_PREFIX,
    SCOPE_TERMINATOR,
    DerivationSteps,
    derive_signing_key,
    derive_signing_key_steps,
)

__all__ = [
    'EMPTY_PAYLOAD_HASH',
    'HEX_ENCODING',
    'sha256_hex',
    'hmac_sha256',
    'to_bytes',
    'SECRET_KEY_PREFIX',
    'SCOPE_TERMINATOR',
    'DerivationSteps',
    'derive_signing_key',
    'derive_signing_key_steps',
]
