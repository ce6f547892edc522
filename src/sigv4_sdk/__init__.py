"""
SigV4 Python SDK
AWS Signature Version 4 request signing with HMAC-SHA256
"""

import logging

from .version import __version__
from .exceptions import (
    SigV4SDKError,
    MalformedRequestError,
    UnresolvableServiceInfoError,
    MissingCredentialsError,
    ConfigurationError,
    SignatureVerificationError,
)
from .crypto import (
    EMPTY_PAYLOAD_HASH,
    sha256_hex,
    hmac_sha256,
    derive_signing_key,
)
from .signing import (
    ALGORITHM,
    AccessInfo,
    ServiceInfo,
    SignableRequest,
    SigningContext,
    DuplicateHeaderPolicy,
    HttpMethod,
    SigV4Signer,
    create_signer,
    sign_request,
    SigningConfig,
    SigningConfigBuilder,
    create_signing_config,
    canonical_headers,
    signed_headers,
    canonical_request,
    credential_scope,
    string_to_sign,
    resolve_service_info,
    build_authorization_header,
    parse_authorization_header,
    SigV4Auth,
    create_signing_session,
)
from .verification import (
    SigV4Verifier,
    VerificationResult,
    VerificationStatus,
    verify_request,
)
from .config import (
    SignerSettings,
    load_settings_from_env,
    load_settings_from_file,
    load_settings_from_json,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    '__version__',
    # Exceptions
    'SigV4SDKError',
    'MalformedRequestError',
    'UnresolvableServiceInfoError',
    'MissingCredentialsError',
    'ConfigurationError',
    'SignatureVerificationError',
    # Primitives
    'EMPTY_PAYLOAD_HASH',
    'sha256_hex',
    'hmac_sha256',
    'derive_signing_key',
    # Signing
    'ALGORITHM',
    'AccessInfo',
    'ServiceInfo',
    'SignableRequest',
    'SigningContext',
    'DuplicateHeaderPolicy',
    'HttpMethod',
    'SigV4Signer',
    'create_signer',
    'sign_request',
    'SigningConfig',
    'SigningConfigBuilder',
    'create_signing_config',
    'canonical_headers',
    'signed_headers',
    'canonical_request',
    'credential_scope',
    'string_to_sign',
    'resolve_service_info',
    'build_authorization_header',
    'parse_authorization_header',
    'SigV4Auth',
    'create_signing_session',
    # Verification
    'SigV4Verifier',
    'VerificationResult',
    'VerificationStatus',
    'verify_request',
    # Configuration
    'SignerSettings',
    'load_settings_from_env',
    'load_settings_from_file',
    'load_settings_from_json',
]
