"""
Signature verification for SigV4 signed requests

The verifier rebuilds the canonical request from the headers the signer
declared in SignedHeaders, recomputes the signature with the shared secret
and compares it in constant time.
"""

import dataclasses
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from cryptography.hazmat.primitives import constant_time

from ..crypto.derivation import SCOPE_TERMINATOR, derive_signing_key
from ..exceptions import SignatureVerificationError
from ..signing.authorization import ParsedAuthorization, calculate_signature, parse_authorization_header
from ..signing.canonical_request import CanonicalRequestBuilder
from ..signing.string_to_sign import string_to_sign
from ..signing.types import (
    ALGORITHM,
    AMZ_DATE_FORMAT,
    AMZ_DATE_HEADER,
    AUTHORIZATION_HEADER,
    DATE_STAMP_LENGTH,
    AccessInfo,
    DuplicateHeaderPolicy,
    ServiceInfo,
    SignableRequest,
    SigningErrorCodes,
)
from ..signing.utils import find_header, generate_timestamp, normalize_header_name, validate_access_info
from .types import VerificationResult, VerificationStatus

logger = logging.getLogger(__name__)

DEFAULT_MAX_CLOCK_SKEW_SECONDS = 300


class SigV4Verifier:
    """
    SigV4 signature verifier for requests signed with a shared secret
    """

    def __init__(
        self,
        access_info: AccessInfo,
        max_clock_skew_seconds: Optional[int] = DEFAULT_MAX_CLOCK_SKEW_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
        duplicate_header_policy: DuplicateHeaderPolicy = DuplicateHeaderPolicy.MERGE
    ):
        """
        Initialize the verifier.

        Args:
            access_info: Credentials the request should have been signed with
            max_clock_skew_seconds: Allowed distance between x-amz-date and now,
                None disables the check
            clock: Optional clock returning the current time
            duplicate_header_policy: Policy the signer used for colliding headers
        """
        self.access_info = validate_access_info(access_info)
        self.max_clock_skew_seconds = max_clock_skew_seconds
        self.clock = clock or generate_timestamp
        self.duplicate_header_policy = duplicate_header_policy

    def verify(self, request: SignableRequest) -> VerificationResult:
        """
        Verify the Authorization header of a signed request.

        Args:
            request: Received request including its signing headers

        Returns:
            VerificationResult: Outcome with diagnostics

        Raises:
            SignatureVerificationError: If the request carries no usable
                SigV4 Authorization header or lacks a signed header
        """
        parsed = self._parse_authorization(request)
        date_stamp, region, service = self._parse_scope(parsed)

        timestamp = find_header(request.headers, AMZ_DATE_HEADER)
        if not timestamp:
            raise SignatureVerificationError(
                f"Signed request has no {AMZ_DATE_HEADER} header",
                SigningErrorCodes.MISSING_SIGNED_HEADER,
                {"header": AMZ_DATE_HEADER}
            )

        result = VerificationResult(
            status=VerificationStatus.VALID,
            access_key=parsed.access_key,
            service_info=ServiceInfo(service=service, region=region),
            timestamp=timestamp,
            provided_signature=parsed.signature,
        )

        if parsed.access_key != self.access_info.access_key:
            return self._reject(result, VerificationStatus.ACCESS_KEY_MISMATCH,
                                f"Unexpected access key: {parsed.access_key}")

        if timestamp[:DATE_STAMP_LENGTH] != date_stamp:
            return self._reject(result, VerificationStatus.SCOPE_MISMATCH,
                                f"Scope date {date_stamp} does not match {AMZ_DATE_HEADER} {timestamp}")

        skew_message = self._check_clock_skew(timestamp)
        if skew_message:
            return self._reject(result, VerificationStatus.CLOCK_SKEW, skew_message)

        builder = CanonicalRequestBuilder(
            dataclasses.replace(request, headers=self._signed_subset(request, parsed)),
            self.duplicate_header_policy
        )
        if builder.signed_headers != parsed.signed_headers:
            return self._reject(result, VerificationStatus.SIGNED_HEADERS_MISMATCH,
                                f"SignedHeaders {parsed.signed_headers} is not in canonical order")

        result.canonical_request = builder.build()
        str_to_sign = string_to_sign(ALGORITHM, result.canonical_request, timestamp, parsed.scope)
        signing_key = derive_signing_key(self.access_info.secret_key, date_stamp, region, service)
        result.expected_signature = calculate_signature(signing_key, str_to_sign)

        if not constant_time.bytes_eq(result.expected_signature.encode("ascii"), parsed.signature.encode("ascii")):
            return self._reject(result, VerificationStatus.INVALID_SIGNATURE, "Signature does not match")

        logger.debug(f"Verified signature for {service}/{region} from {parsed.access_key}")
        return result

    def _parse_authorization(self, request: SignableRequest) -> ParsedAuthorization:
        value = find_header(request.headers, AUTHORIZATION_HEADER)
        parsed = parse_authorization_header(value or "")
        if parsed is None or parsed.algorithm != ALGORITHM:
            raise SignatureVerificationError(
                "Request has no valid SigV4 Authorization header",
                SigningErrorCodes.INVALID_AUTHORIZATION,
                {"authorization": value}
            )
        return parsed

    def _parse_scope(self, parsed: ParsedAuthorization):
        parts = parsed.scope_parts
        if len(parts) != 4 or parts[3] != SCOPE_TERMINATOR or not all(parts):
            raise SignatureVerificationError(
                f"Malformed credential scope: {parsed.scope}",
                SigningErrorCodes.INVALID_AUTHORIZATION,
                {"scope": parsed.scope}
            )
        date_stamp, region, service, _ = parts
        return date_stamp, region, service

    def _signed_subset(self, request: SignableRequest, parsed: ParsedAuthorization):
        wanted = set(parsed.signed_header_names)
        subset = {
            name: value for name, value in request.headers.items()
            if normalize_header_name(name) in wanted
        }

        present = {normalize_header_name(name) for name in subset}
        missing = sorted(wanted - present)
        if missing:
            raise SignatureVerificationError(
                f"Signed headers missing from request: {', '.join(missing)}",
                SigningErrorCodes.MISSING_SIGNED_HEADER,
                {"missing_headers": missing}
            )
        return subset

    def _check_clock_skew(self, timestamp: str) -> Optional[str]:
        if self.max_clock_skew_seconds is None:
            return None

        try:
            signed_at = datetime.strptime(timestamp, AMZ_DATE_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            return f"Invalid {AMZ_DATE_HEADER} value: {timestamp}"

        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        skew = abs((now - signed_at).total_seconds())
        if skew > self.max_clock_skew_seconds:
            return f"Request time is {skew:.0f}s away from now (limit {self.max_clock_skew_seconds}s)"
        return None

    def _reject(self, result: VerificationResult, status: VerificationStatus, message: str) -> VerificationResult:
        result.status = status
        result.messages.append(message)
        logger.debug(f"Signature verification failed: {message}")
        return result


def verify_request(
    request: SignableRequest,
    access_info: AccessInfo,
    max_clock_skew_seconds: Optional[int] = DEFAULT_MAX_CLOCK_SKEW_SECONDS
) -> VerificationResult:
    """
    Verify a signed request with the given credentials.

    Args:
        request: Received request
        access_info: Shared credentials
        max_clock_skew_seconds: Allowed clock skew, None to disable

    Returns:
        VerificationResult: Verification outcome
    """
    return SigV4Verifier(access_info, max_clock_skew_seconds).verify(request)
