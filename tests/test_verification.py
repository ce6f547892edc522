"""
Unit tests for SigV4 signature verification
"""

from datetime import datetime, timedelta, timezone

import pytest

from sigv4_sdk.exceptions import MissingCredentialsError, SignatureVerificationError
from sigv4_sdk.signing import AccessInfo, ServiceInfo, SignableRequest, SigningConfig, SigningErrorCodes, SigV4Signer
from sigv4_sdk.verification import (
    DEFAULT_MAX_CLOCK_SKEW_SECONDS,
    SigV4Verifier,
    VerificationStatus,
    verify_request,
)

ACCESS_KEY = "AKIDEXAMPLE"
SECRET_KEY = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"
SIGNING_TIME = datetime(2015, 8, 30, 12, 36, 0, tzinfo=timezone.utc)


class TestSigV4Verifier:
    """Test verification of signed requests"""

    def setup_method(self):
        self.access_info = AccessInfo(ACCESS_KEY, SECRET_KEY)
        config = SigningConfig(access_info=self.access_info, timestamp_generator=lambda: SIGNING_TIME)
        self.signer = SigV4Signer(config)
        self.verifier = SigV4Verifier(self.access_info, clock=lambda: SIGNING_TIME)

    def signed_request(self, **kwargs):
        request = SignableRequest(
            url=kwargs.pop("url", "https://dynamodb.us-east-1.amazonaws.com/?b=2&a=1"),
            method=kwargs.pop("method", "POST"),
            headers=kwargs.pop("headers", {"Content-Type": "application/x-amz-json-1.0"}),
            body=kwargs.pop("body", '{"TableName": "items"}'),
        )
        return self.signer.sign(request, **kwargs)

    def test_valid_signature(self):
        request = self.signed_request()
        result = self.verifier.verify(request)

        assert result.is_valid
        assert result.status == VerificationStatus.VALID
        assert result.access_key == ACCESS_KEY
        assert result.service_info == ServiceInfo(service="dynamodb", region="us-east-1")
        assert result.timestamp == "20150830T123600Z"
        assert result.expected_signature == result.provided_signature
        assert result.messages == []

    def test_vanilla_request(self):
        request = SignableRequest(url="https://example.amazonaws.com/", method="GET")
        self.signer.sign(request, ServiceInfo(service="service", region="us-east-1"))

        result = self.verifier.verify(request)
        assert result.is_valid
        assert result.provided_signature == "5fa00fa31553b73ebf1942676e86291e8372ff2a2260956d9b8aae1d763fbf31"

    def test_tampered_body(self):
        request = self.signed_request()
        request.body = '{"TableName": "other"}'

        result = self.verifier.verify(request)
        assert not result.is_valid
        assert result.status == VerificationStatus.INVALID_SIGNATURE

    def test_tampered_signed_header(self):
        request = self.signed_request()
        request.headers["Content-Type"] = "text/plain"

        assert self.verifier.verify(request).status == VerificationStatus.INVALID_SIGNATURE

    def test_unsigned_header_ignored(self):
        request = self.signed_request()
        request.headers["User-Agent"] = "added-after-signing"

        assert self.verifier.verify(request).is_valid

    def test_wrong_secret(self):
        request = self.signed_request()
        verifier = SigV4Verifier(AccessInfo(ACCESS_KEY, "another-secret"), clock=lambda: SIGNING_TIME)

        assert verifier.verify(request).status == VerificationStatus.INVALID_SIGNATURE

    def test_access_key_mismatch(self):
        request = self.signed_request()
        verifier = SigV4Verifier(AccessInfo("AKIDOTHER", SECRET_KEY), clock=lambda: SIGNING_TIME)

        result = verifier.verify(request)
        assert result.status == VerificationStatus.ACCESS_KEY_MISMATCH
        assert result.expected_signature is None

    def test_scope_date_mismatch(self):
        request = self.signed_request()
        request.headers["x-amz-date"] = "20150831T123600Z"

        verifier = SigV4Verifier(self.access_info, max_clock_skew_seconds=None)
        assert verifier.verify(request).status == VerificationStatus.SCOPE_MISMATCH

    def test_clock_skew(self):
        request = self.signed_request()
        late = SIGNING_TIME + timedelta(seconds=DEFAULT_MAX_CLOCK_SKEW_SECONDS + 1)

        result = SigV4Verifier(self.access_info, clock=lambda: late).verify(request)
        assert result.status == VerificationStatus.CLOCK_SKEW
        assert result.messages

        within = SIGNING_TIME - timedelta(seconds=DEFAULT_MAX_CLOCK_SKEW_SECONDS)
        assert SigV4Verifier(self.access_info, clock=lambda: within).verify(request).is_valid

    def test_skew_check_disabled(self):
        request = self.signed_request()
        assert verify_request(request, self.access_info, max_clock_skew_seconds=None).is_valid

    def test_missing_authorization(self):
        request = SignableRequest(url="https://dynamodb.us-east-1.amazonaws.com/")

        with pytest.raises(SignatureVerificationError) as exc_info:
            self.verifier.verify(request)
        assert exc_info.value.error_code == SigningErrorCodes.INVALID_AUTHORIZATION

    def test_wrong_algorithm(self):
        request = self.signed_request()
        request.headers["Authorization"] = request.headers["Authorization"].replace(
            "AWS4-HMAC-SHA256", "AWS4-HMAC-SHA512"
        )

        with pytest.raises(SignatureVerificationError):
            self.verifier.verify(request)

    def test_malformed_scope(self):
        request = self.signed_request()
        request.headers["Authorization"] = request.headers["Authorization"].replace("/aws4_request", "/aws5_request")

        with pytest.raises(SignatureVerificationError) as exc_info:
            self.verifier.verify(request)
        assert exc_info.value.error_code == SigningErrorCodes.INVALID_AUTHORIZATION

    def test_missing_signed_header(self):
        request = self.signed_request()
        del request.headers["Content-Type"]

        with pytest.raises(SignatureVerificationError) as exc_info:
            self.verifier.verify(request)
        assert exc_info.value.error_code == SigningErrorCodes.MISSING_SIGNED_HEADER
        assert exc_info.value.details["missing_headers"] == ["content-type"]

    def test_missing_date_header(self):
        request = self.signed_request()
        del request.headers["x-amz-date"]

        with pytest.raises(SignatureVerificationError) as exc_info:
            self.verifier.verify(request)
        assert exc_info.value.error_code == SigningErrorCodes.MISSING_SIGNED_HEADER

    def test_signed_headers_out_of_order(self):
        request = self.signed_request()
        request.headers["Authorization"] = request.headers["Authorization"].replace(
            "SignedHeaders=content-type;host;x-amz-date", "SignedHeaders=host;content-type;x-amz-date"
        )

        assert self.verifier.verify(request).status == VerificationStatus.SIGNED_HEADERS_MISMATCH

    def test_requires_credentials(self):
        with pytest.raises(MissingCredentialsError):
            SigV4Verifier(AccessInfo(ACCESS_KEY, ""))
