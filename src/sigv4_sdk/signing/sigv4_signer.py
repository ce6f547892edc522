"""
AWS Signature Version 4 request signer

Refer to https://docs.aws.amazon.com/general/latest/gr/sigv4_signing.html

The signer runs the four SigV4 tasks in order:

1. create a canonical request
2. create a string to sign
3. calculate the signature with a derived signing key
4. add the signing information to the request

Signing mutates the caller's request in place and returns the same object.
The caller must not share the request with other threads while it is being
signed. Signer instances hold only configuration and may be shared.
"""

import dataclasses
import logging
from typing import Optional, Tuple

from ..crypto.derivation import derive_signing_key
from ..exceptions import MalformedRequestError
from .authorization import build_authorization_header, calculate_signature
from .canonical_request import CanonicalRequestBuilder, canonical_method
from .service_resolver import ServiceInfoResolver
from .signing_config import SigningConfig, validate_signing_config
from .string_to_sign import credential_scope, string_to_sign
from .types import (
    ALGORITHM,
    AMZ_DATE_HEADER,
    AUTHORIZATION_HEADER,
    HOST_HEADER,
    SECURITY_TOKEN_HEADER,
    AccessInfo,
    ServiceInfo,
    SignableRequest,
    SigningContext,
    SigningErrorCodes,
    TimestampGenerator,
)
from .utils import (
    format_amz_date,
    generate_timestamp,
    parse_url,
    remove_header,
    set_header,
    validate_access_info,
)

logger = logging.getLogger(__name__)


class SigV4Signer:
    """
    SigV4 request signer

    This class signs HTTP requests with HMAC-SHA256 using a signing key
    derived from the configured credentials, date, region and service.
    """

    def __init__(self, config: SigningConfig):
        """
        Initialize the signer with configuration.

        Args:
            config: Signing configuration

        Raises:
            MissingCredentialsError: If credentials are incomplete
            ConfigurationError: If configuration is invalid
        """
        validate_signing_config(config)
        self.config = config
        self.logger = config.logger or logger
        self.resolver = ServiceInfoResolver(config.domain_suffixes)

    def sign(
        self,
        request: SignableRequest,
        service_info: Optional[ServiceInfo] = None
    ) -> SignableRequest:
        """
        Sign an HTTP request.

        Args:
            request: Request to sign, mutated in place
            service_info: Optional service/region override

        Returns:
            SignableRequest: The same request with host, x-amz-date, optional
            x-amz-security-token and Authorization headers set

        Raises:
            MalformedRequestError: If the URL, headers or body are unusable
            UnresolvableServiceInfoError: If service or region is unknown
        """
        signed_request, _ = self.sign_with_context(request, service_info)
        return signed_request

    def sign_with_context(
        self,
        request: SignableRequest,
        service_info: Optional[ServiceInfo] = None
    ) -> Tuple[SignableRequest, SigningContext]:
        """
        Sign an HTTP request and return the values derived along the way.

        The request is left untouched when signing fails.

        Args:
            request: Request to sign, mutated in place
            service_info: Optional service/region override

        Returns:
            tuple: (signed request, signing context)
        """
        if not isinstance(request, SignableRequest):
            raise MalformedRequestError(
                f"Request must be a SignableRequest, got {type(request).__name__}",
                SigningErrorCodes.MALFORMED_REQUEST
            )

        access_info = self.config.access_info
        url_parts = parse_url(request.url)
        resolved = self.resolver.resolve(request, service_info, self.config.service_info)

        timestamp, date_stamp = format_amz_date(self._now())

        headers = dict(request.headers or {})
        remove_header(headers, AUTHORIZATION_HEADER)
        set_header(headers, HOST_HEADER, url_parts["host"])
        set_header(headers, AMZ_DATE_HEADER, timestamp)
        if access_info.session_token:
            set_header(headers, SECURITY_TOKEN_HEADER, access_info.session_token)

        # Task 1: Create a Canonical Request
        builder = CanonicalRequestBuilder(
            dataclasses.replace(request, headers=headers),
            self.config.duplicate_header_policy
        )
        canonical = builder.build()
        if self.config.log_canonical_request:
            self.logger.debug(f"Resolved service info: service={resolved.service} region={resolved.region}")
            self.logger.debug(f"Canonical request:\n{canonical}")

        # Task 2: Create a String to Sign
        scope = credential_scope(date_stamp, resolved.region, resolved.service)
        str_to_sign = string_to_sign(ALGORITHM, canonical, timestamp, scope)

        # Task 3: Calculate the Signature
        signing_key = derive_signing_key(access_info.secret_key, date_stamp, resolved.region, resolved.service)
        signature = calculate_signature(signing_key, str_to_sign)

        # Task 4: Add the Signing information to the Request
        authorization = build_authorization_header(
            ALGORITHM,
            access_info.access_key,
            scope,
            builder.signed_headers,
            signature
        )
        headers[AUTHORIZATION_HEADER] = authorization

        if request.headers is None:
            request.headers = {}
        request.headers.clear()
        request.headers.update(headers)

        self.logger.debug(
            f"Signed {canonical_method(request.method)} request to {url_parts['host']} "
            f"for {resolved.service}/{resolved.region}"
        )

        context = SigningContext(
            algorithm=ALGORITHM,
            timestamp=timestamp,
            date_stamp=date_stamp,
            service_info=resolved,
            credential_scope=scope,
            canonical_request=canonical,
            signed_headers=builder.signed_headers,
            string_to_sign=str_to_sign,
            signing_key=signing_key,
            signature=signature,
            authorization=authorization,
        )
        return request, context

    def _now(self):
        generator = self.config.timestamp_generator or generate_timestamp
        return generator()


def create_signer(config: SigningConfig) -> SigV4Signer:
    """
    Create a new SigV4 signer.

    Args:
        config: Signing configuration

    Returns:
        SigV4Signer: Configured signer instance
    """
    return SigV4Signer(config)


def sign_request(
    request: SignableRequest,
    access_info: AccessInfo,
    service_info: Optional[ServiceInfo] = None,
    logger: Optional[logging.Logger] = None,
    timestamp_generator: Optional[TimestampGenerator] = None
) -> SignableRequest:
    """
    Sign a request with the given credentials.

    Args:
        request: Request to sign, mutated in place
        access_info: Credentials
        service_info: Optional service/region, parsed from the host when absent
        logger: Optional logger for diagnostics
        timestamp_generator: Optional clock returning the signing time

    Returns:
        SignableRequest: The same request, signed

    Raises:
        MissingCredentialsError: If access key or secret key is missing
    """
    validate_access_info(access_info)
    config = SigningConfig(
        access_info=access_info,
        logger=logger,
        timestamp_generator=timestamp_generator,
    )
    return SigV4Signer(config).sign(request, service_info)
