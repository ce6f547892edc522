"""
Test suite for SigV4 request signing

This module tests the complete signing pipeline including configuration,
service resolution, the signing orchestration and its diagnostics.
"""

import logging
import re
from datetime import datetime, timedelta, timezone

import pytest

from sigv4_sdk.exceptions import (
    ConfigurationError,
    MalformedRequestError,
    MissingCredentialsError,
    UnresolvableServiceInfoError,
)
from sigv4_sdk.signing import (
    ALGORITHM,
    AccessInfo,
    DuplicateHeaderPolicy,
    ServiceInfo,
    SignableRequest,
    SigningConfig,
    SigningContext,
    SigV4Signer,
    build_authorization_header,
    create_signer,
    create_signing_config,
    credential_scope,
    format_amz_date,
    parse_authorization_header,
    sign_request,
    string_to_sign,
)

ACCESS_KEY = "AKIDEXAMPLE"
SECRET_KEY = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"
SIGNING_TIME = datetime(2015, 8, 30, 12, 36, 0, tzinfo=timezone.utc)
VANILLA_SIGNATURE = "5fa00fa31553b73ebf1942676e86291e8372ff2a2260956d9b8aae1d763fbf31"

AUTHORIZATION_PATTERN = re.compile(
    r"^AWS4-HMAC-SHA256 Credential=[^/]+/\d{8}/[^/]+/[^/]+/aws4_request, "
    r"SignedHeaders=[a-z0-9;-]+, Signature=[0-9a-f]{64}$"
)


def fixed_clock():
    return SIGNING_TIME


def vanilla_request(**kwargs):
    return SignableRequest(url="https://example.amazonaws.com/", method="GET", **kwargs)


class TestSigningUtilities:
    """Test timestamp, scope and header helpers"""

    def test_format_amz_date(self):
        assert format_amz_date(SIGNING_TIME) == ("20150830T123600Z", "20150830")

    def test_format_amz_date_converts_to_utc(self):
        moment = datetime(2015, 8, 30, 14, 36, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_amz_date(moment) == ("20150830T123600Z", "20150830")

    def test_format_amz_date_naive_is_utc(self):
        assert format_amz_date(datetime(2015, 8, 30, 12, 36, 0, 999))[0] == "20150830T123600Z"

    def test_format_amz_date_rejects_non_datetime(self):
        with pytest.raises(MalformedRequestError):
            format_amz_date("20150830T123600Z")

    def test_credential_scope(self):
        assert credential_scope("20150830", "us-east-1", "service") == "20150830/us-east-1/service/aws4_request"

    def test_string_to_sign(self):
        canonical = "\n".join([
            "GET",
            "/",
            "",
            "host:example.amazonaws.com\nx-amz-date:20150830T123600Z\n",
            "host;x-amz-date",
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
        ])
        result = string_to_sign(ALGORITHM, canonical, "20150830T123600Z", "20150830/us-east-1/service/aws4_request")

        assert result == (
            "AWS4-HMAC-SHA256\n"
            "20150830T123600Z\n"
            "20150830/us-east-1/service/aws4_request\n"
            "bb579772317eb040ac9ed261061d46c1f17a8133879d6129b6e1c25292927e63"
        )

    def test_authorization_header_round_trip(self):
        value = build_authorization_header(
            ALGORITHM, ACCESS_KEY, "20150830/us-east-1/service/aws4_request", "host;x-amz-date", VANILLA_SIGNATURE
        )
        parsed = parse_authorization_header(value)

        assert parsed.access_key == ACCESS_KEY
        assert parsed.scope_parts == ["20150830", "us-east-1", "service", "aws4_request"]
        assert parsed.signed_header_names == ["host", "x-amz-date"]
        assert parsed.signature == VANILLA_SIGNATURE

    def test_parse_authorization_rejects_garbage(self):
        assert parse_authorization_header("") is None
        assert parse_authorization_header("Bearer token") is None


class TestSigningConfig:
    """Test signing configuration"""

    def test_builder(self):
        config = (create_signing_config()
                  .credentials(ACCESS_KEY, SECRET_KEY, "session")
                  .service("dynamodb")
                  .region("us-east-1")
                  .add_domain_suffix(".internal.example.")
                  .duplicate_headers("reject")
                  .timestamp_generator(fixed_clock)
                  .log_canonical_request()
                  .build())

        assert config.access_info == AccessInfo(ACCESS_KEY, SECRET_KEY, "session")
        assert config.service_info == ServiceInfo(service="dynamodb", region="us-east-1")
        assert "internal.example" in config.domain_suffixes
        assert config.duplicate_header_policy == DuplicateHeaderPolicy.REJECT
        assert config.timestamp_generator is fixed_clock
        assert config.log_canonical_request is True

    def test_builder_without_credentials(self):
        with pytest.raises(MissingCredentialsError):
            create_signing_config().service("s3").build()

    def test_missing_secret_key(self):
        with pytest.raises(MissingCredentialsError) as exc_info:
            SigningConfig(access_info=AccessInfo(ACCESS_KEY, ""))
        assert exc_info.value.details["missing_fields"] == ["secret_key"]

    def test_missing_access_info(self):
        with pytest.raises(MissingCredentialsError):
            SigningConfig(access_info=None)

    def test_invalid_values(self):
        access_info = AccessInfo(ACCESS_KEY, SECRET_KEY)

        with pytest.raises(ConfigurationError):
            SigningConfig(access_info={"access_key": ACCESS_KEY})
        with pytest.raises(ConfigurationError):
            SigningConfig(access_info=access_info, domain_suffixes=())
        with pytest.raises(ConfigurationError):
            SigningConfig(access_info=access_info, domain_suffixes="amazonaws.com")
        with pytest.raises(ConfigurationError):
            SigningConfig(access_info=access_info, timestamp_generator="now")
        with pytest.raises(ConfigurationError):
            SigningConfig(access_info=access_info, duplicate_header_policy="ignore")
        with pytest.raises(ConfigurationError):
            create_signing_config().duplicate_headers("ignore")

    def test_secrets_not_in_repr(self):
        access_info = AccessInfo(ACCESS_KEY, SECRET_KEY, "token-value")
        text = repr(SigningConfig(access_info=access_info))

        assert ACCESS_KEY in text
        assert SECRET_KEY not in text
        assert "token-value" not in text


class TestSigV4Signer:
    """Test the signing orchestration"""

    def setup_method(self):
        self.access_info = AccessInfo(ACCESS_KEY, SECRET_KEY)
        self.service_info = ServiceInfo(service="service", region="us-east-1")
        self.config = SigningConfig(access_info=self.access_info, timestamp_generator=fixed_clock)
        self.signer = SigV4Signer(self.config)

    def test_reference_signature(self):
        request = vanilla_request()
        signed = self.signer.sign(request, self.service_info)

        assert signed is request
        assert signed.headers["host"] == "example.amazonaws.com"
        assert signed.headers["x-amz-date"] == "20150830T123600Z"
        assert signed.headers["Authorization"] == (
            "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20150830/us-east-1/service/aws4_request, "
            f"SignedHeaders=host;x-amz-date, Signature={VANILLA_SIGNATURE}"
        )

    def test_authorization_structure(self):
        signed = sign_request(
            vanilla_request(),
            self.access_info,
            ServiceInfo(service="s3", region="eu-west-1"),
        )
        assert AUTHORIZATION_PATTERN.match(signed.headers["Authorization"])
        assert "SignedHeaders=host;x-amz-date," in signed.headers["Authorization"]

    def test_deterministic(self):
        first = self.signer.sign(vanilla_request(), self.service_info)
        second = self.signer.sign(vanilla_request(), self.service_info)
        assert first.headers == second.headers

    def test_sign_with_context(self):
        _, context = self.signer.sign_with_context(vanilla_request(), self.service_info)

        assert isinstance(context, SigningContext)
        assert context.timestamp == "20150830T123600Z"
        assert context.date_stamp == "20150830"
        assert context.credential_scope == "20150830/us-east-1/service/aws4_request"
        assert context.signed_headers == "host;x-amz-date"
        assert context.signature == VANILLA_SIGNATURE
        assert context.string_to_sign.endswith(
            "bb579772317eb040ac9ed261061d46c1f17a8133879d6129b6e1c25292927e63"
        )
        assert len(context.signing_key) == 32
        assert "signing_key" not in repr(context)

    def test_service_resolved_from_host(self):
        request = SignableRequest(url="https://dynamodb.us-east-1.amazonaws.com/", method="POST", body="{}")
        _, context = self.signer.sign_with_context(request)
        assert context.service_info == ServiceInfo(service="dynamodb", region="us-east-1")
        assert "/us-east-1/dynamodb/aws4_request" in request.headers["Authorization"]

    def test_configured_default_service_info(self):
        config = SigningConfig(
            access_info=self.access_info,
            service_info=ServiceInfo(service="execute-api", region="eu-west-1"),
            timestamp_generator=fixed_clock,
        )
        request = SignableRequest(url="https://abc123.example.com/prod/items")
        _, context = SigV4Signer(config).sign_with_context(request)
        assert context.credential_scope == "20150830/eu-west-1/execute-api/aws4_request"

    def test_session_token_is_signed(self):
        config = SigningConfig(
            access_info=AccessInfo(ACCESS_KEY, SECRET_KEY, "temporary-token"),
            timestamp_generator=fixed_clock,
        )
        request = vanilla_request(headers={"X-Amz-Security-Token": "stale"})
        SigV4Signer(config).sign(request, self.service_info)

        assert request.headers["x-amz-security-token"] == "temporary-token"
        assert "X-Amz-Security-Token" not in request.headers
        assert "SignedHeaders=host;x-amz-date;x-amz-security-token," in request.headers["Authorization"]

    def test_existing_headers_replaced(self):
        request = vanilla_request(headers={
            "Host": "other.example.com",
            "X-Amz-Date": "20000101T000000Z",
            "authorization": "stale",
        })
        self.signer.sign(request, self.service_info)

        assert request.headers["Authorization"].endswith(f"Signature={VANILLA_SIGNATURE}")
        assert "Host" not in request.headers
        assert "X-Amz-Date" not in request.headers
        assert "authorization" not in request.headers

    def test_user_headers_are_signed(self):
        request = vanilla_request(headers={"Content-Type": "application/json"})
        self.signer.sign(request, self.service_info)
        assert "SignedHeaders=content-type;host;x-amz-date," in request.headers["Authorization"]
        assert request.headers["Content-Type"] == "application/json"

    def test_request_untouched_on_failure(self):
        request = SignableRequest(url="https://localhost/", headers={"X-Custom": "1"})

        with pytest.raises(UnresolvableServiceInfoError):
            self.signer.sign(request)

        assert request.headers == {"X-Custom": "1"}

    def test_duplicate_headers_rejected(self):
        config = SigningConfig(
            access_info=self.access_info,
            duplicate_header_policy=DuplicateHeaderPolicy.REJECT,
            timestamp_generator=fixed_clock,
        )
        request = vanilla_request(headers={"X-Multi": "a", "x-multi": "b"})

        with pytest.raises(MalformedRequestError):
            SigV4Signer(config).sign(request, self.service_info)
        assert "Authorization" not in request.headers

    def test_missing_credentials_fail_fast(self):
        with pytest.raises(MissingCredentialsError):
            sign_request(vanilla_request(), AccessInfo("", SECRET_KEY), self.service_info)
        with pytest.raises(MissingCredentialsError):
            sign_request(vanilla_request(), None, self.service_info)

    def test_malformed_request(self):
        with pytest.raises(MalformedRequestError):
            self.signer.sign("https://example.amazonaws.com/", self.service_info)
        with pytest.raises(MalformedRequestError):
            self.signer.sign(SignableRequest(url="example.amazonaws.com/"), self.service_info)

    def test_default_clock(self):
        signer = create_signer(SigningConfig(access_info=self.access_info))
        request = signer.sign(vanilla_request(), self.service_info)

        signed_at = datetime.strptime(request.headers["x-amz-date"], "%Y%m%dT%H%M%SZ").replace(tzinfo=timezone.utc)
        assert abs((datetime.now(timezone.utc) - signed_at).total_seconds()) < 60

    def test_canonical_request_logging(self, caplog):
        test_logger = logging.getLogger("tests.sigv4")
        config = SigningConfig(
            access_info=self.access_info,
            timestamp_generator=fixed_clock,
            logger=test_logger,
            log_canonical_request=True,
        )
        caplog.set_level(logging.DEBUG, logger="tests.sigv4")

        SigV4Signer(config).sign(vanilla_request(), self.service_info)

        assert "Canonical request" in caplog.text
        assert "host:example.amazonaws.com" in caplog.text
        assert SECRET_KEY not in caplog.text

    def test_canonical_request_not_logged_by_default(self, caplog):
        caplog.set_level(logging.DEBUG, logger="sigv4_sdk")
        self.signer.sign(vanilla_request(), self.service_info)

        assert "Canonical request" not in caplog.text
        assert "Signed GET request" in caplog.text
