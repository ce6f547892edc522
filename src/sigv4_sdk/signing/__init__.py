"""
SigV4 Python SDK - Request Signing Module

AWS Signature Version 4 (HMAC-SHA256) request signing: canonical request
construction, credential scoping, signing key derivation and Authorization
header assembly.
"""

from .types import (
    ALGORITHM,
    AMZ_DATE_HEADER,
    AUTHORIZATION_HEADER,
    HOST_HEADER,
    SECURITY_TOKEN_HEADER,
    AccessInfo,
    DuplicateHeaderPolicy,
    HttpMethod,
    ServiceInfo,
    SignableRequest,
    SigningContext,
    SigningErrorCodes,
)

from .canonical_request import (
    CanonicalRequestBuilder,
    canonical_headers,
    canonical_query_string,
    canonical_request,
    signed_headers,
)

from .service_resolver import (
    DEFAULT_DOMAIN_SUFFIXES,
    HOST_RULES,
    HostRule,
    ServiceInfoResolver,
    parse_service_info,
    resolve_service_info,
    split_host_labels,
)

from .string_to_sign import (
    credential_scope,
    string_to_sign,
)

from .authorization import (
    ParsedAuthorization,
    build_authorization_header,
    calculate_signature,
    parse_authorization_header,
)

from .sigv4_signer import (
    SigV4Signer,
    create_signer,
    sign_request,
)

from .signing_config import (
    SigningConfig,
    SigningConfigBuilder,
    create_signing_config,
    validate_signing_config,
)

from .utils import (
    format_amz_date,
    generate_timestamp,
    normalize_header_name,
    normalize_header_value,
    parse_url,
)

from .integration import (
    SigV4Auth,
    create_signing_session,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'SigV4Signer',
    'create_signer',
    'sign_request',
    # Types
    'ALGORITHM',
    'AMZ_DATE_HEADER',
    'AUTHORIZATION_HEADER',
    'HOST_HEADER',
    'SECURITY_TOKEN_HEADER',
    'AccessInfo',
    'DuplicateHeaderPolicy',
    'HttpMethod',
    'ServiceInfo',
    'SignableRequest',
    'SigningContext',
    'SigningErrorCodes',
    # Canonicalization
    'CanonicalRequestBuilder',
    'canonical_headers',
    'canonical_query_string',
    'canonical_request',
    'signed_headers',
    # Service resolution
    'DEFAULT_DOMAIN_SUFFIXES',
    'HOST_RULES',
    'HostRule',
    'ServiceInfoResolver',
    'parse_service_info',
    'resolve_service_info',
    'split_host_labels',
    # Scope and string to sign
    'credential_scope',
    'string_to_sign',
    # Authorization header
    'ParsedAuthorization',
    'build_authorization_header',
    'calculate_signature',
    'parse_authorization_header',
    # Configuration
    'SigningConfig',
    'SigningConfigBuilder',
    'create_signing_config',
    'validate_signing_config',
    # Utilities
    'format_amz_date',
    'generate_timestamp',
    'normalize_header_name',
    'normalize_header_value',
    'parse_url',
    # HTTP Integration
    'SigV4Auth',
    'create_signing_session',
]
