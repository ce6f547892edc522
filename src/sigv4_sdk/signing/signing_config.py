"""
Configuration management for request signing

This module provides the signer configuration, a fluent builder for it, and
configuration validation.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from ..exceptions import ConfigurationError
from .service_resolver import DEFAULT_DOMAIN_SUFFIXES
from .types import (
    AccessInfo,
    DuplicateHeaderPolicy,
    ServiceInfo,
    SigningErrorCodes,
    TimestampGenerator,
)
from .utils import validate_access_info


@dataclass
class SigningConfig:
    """
    Configuration for request signing

    Attributes:
        access_info: Credentials used to sign
        service_info: Optional default service/region, overrides host parsing
        domain_suffixes: Cloud domain suffixes recognised when parsing hosts
        duplicate_header_policy: How colliding header names are canonicalized
        timestamp_generator: Optional clock, returns the signing time
        logger: Optional logger for diagnostics
        log_canonical_request: Log canonical requests and service info at DEBUG
    """
    access_info: AccessInfo
    service_info: Optional[ServiceInfo] = None
    domain_suffixes: Tuple[str, ...] = DEFAULT_DOMAIN_SUFFIXES
    duplicate_header_policy: DuplicateHeaderPolicy = DuplicateHeaderPolicy.MERGE
    timestamp_generator: Optional[TimestampGenerator] = None
    logger: Optional[logging.Logger] = field(default=None, repr=False)
    log_canonical_request: bool = False

    def __post_init__(self):
        """Validate signing configuration"""
        validate_signing_config(self)


def validate_signing_config(config: SigningConfig) -> None:
    """
    Validate a signing configuration.

    Args:
        config: Configuration to validate

    Raises:
        MissingCredentialsError: If credentials are incomplete
        ConfigurationError: If any other field is invalid
    """
    if config.access_info is not None and not isinstance(config.access_info, AccessInfo):
        raise ConfigurationError(
            "access_info must be an AccessInfo instance",
            SigningErrorCodes.INVALID_CONFIG,
            {"access_info_type": type(config.access_info).__name__}
        )
    validate_access_info(config.access_info)

    if config.service_info is not None and not isinstance(config.service_info, ServiceInfo):
        raise ConfigurationError(
            "service_info must be a ServiceInfo instance",
            SigningErrorCodes.INVALID_CONFIG
        )

    if isinstance(config.domain_suffixes, str):
        raise ConfigurationError(
            "domain_suffixes must be a sequence of suffixes, not a string",
            SigningErrorCodes.INVALID_CONFIG,
            {"domain_suffixes": config.domain_suffixes}
        )

    if not config.domain_suffixes or any(not s for s in config.domain_suffixes):
        raise ConfigurationError(
            "At least one non-empty domain suffix is required",
            SigningErrorCodes.INVALID_CONFIG,
            {"domain_suffixes": list(config.domain_suffixes or ())}
        )

    if not isinstance(config.duplicate_header_policy, DuplicateHeaderPolicy):
        raise ConfigurationError(
            f"Invalid duplicate header policy: {config.duplicate_header_policy}",
            SigningErrorCodes.INVALID_CONFIG
        )

    if config.timestamp_generator is not None and not callable(config.timestamp_generator):
        raise ConfigurationError(
            "timestamp_generator must be callable",
            SigningErrorCodes.INVALID_CONFIG
        )


def parse_duplicate_header_policy(value: Union[str, DuplicateHeaderPolicy]) -> DuplicateHeaderPolicy:
    """Convert a policy name to DuplicateHeaderPolicy."""
    if isinstance(value, DuplicateHeaderPolicy):
        return value
    try:
        return DuplicateHeaderPolicy(str(value).strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"Unknown duplicate header policy: {value}",
            SigningErrorCodes.INVALID_CONFIG,
            {"allowed": [p.value for p in DuplicateHeaderPolicy]}
        )


class SigningConfigBuilder:
    """
    Builder for creating signing configurations with fluent API
    """

    def __init__(self):
        self._access_key: Optional[str] = None
        self._secret_key: Optional[str] = None
        self._session_token: Optional[str] = None
        self._service: Optional[str] = None
        self._region: Optional[str] = None
        self._domain_suffixes: List[str] = list(DEFAULT_DOMAIN_SUFFIXES)
        self._duplicate_header_policy = DuplicateHeaderPolicy.MERGE
        self._timestamp_generator: Optional[TimestampGenerator] = None
        self._logger: Optional[logging.Logger] = None
        self._log_canonical_request = False

    def credentials(
        self,
        access_key: str,
        secret_key: str,
        session_token: Optional[str] = None
    ) -> 'SigningConfigBuilder':
        """
        Set signing credentials.

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._access_key = access_key
        self._secret_key = secret_key
        self._session_token = session_token
        return self

    def access_info(self, access_info: AccessInfo) -> 'SigningConfigBuilder':
        """Set credentials from an AccessInfo instance."""
        return self.credentials(access_info.access_key, access_info.secret_key, access_info.session_token)

    def session_token(self, token: Optional[str]) -> 'SigningConfigBuilder':
        self._session_token = token
        return self

    def service(self, service: Optional[str]) -> 'SigningConfigBuilder':
        self._service = service
        return self

    def region(self, region: Optional[str]) -> 'SigningConfigBuilder':
        self._region = region
        return self

    def service_info(self, service_info: Optional[ServiceInfo]) -> 'SigningConfigBuilder':
        """
        Set the default service and region.

        Args:
            service_info: Service info, or None to rely on host parsing

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._service = service_info.service if service_info else None
        self._region = service_info.region if service_info else None
        return self

    def add_domain_suffix(self, suffix: str) -> 'SigningConfigBuilder':
        """Recognise an additional cloud domain suffix when parsing hosts."""
        normalized = suffix.strip().strip(".").lower()
        if normalized and normalized not in self._domain_suffixes:
            self._domain_suffixes.append(normalized)
        return self

    def domain_suffixes(self, suffixes: List[str]) -> 'SigningConfigBuilder':
        self._domain_suffixes = [s.strip().strip(".").lower() for s in suffixes]
        return self

    def duplicate_headers(self, policy: Union[str, DuplicateHeaderPolicy]) -> 'SigningConfigBuilder':
        self._duplicate_header_policy = parse_duplicate_header_policy(policy)
        return self

    def timestamp_generator(self, generator: TimestampGenerator) -> 'SigningConfigBuilder':
        self._timestamp_generator = generator
        return self

    def logger(self, logger: logging.Logger) -> 'SigningConfigBuilder':
        self._logger = logger
        return self

    def log_canonical_request(self, enabled: bool = True) -> 'SigningConfigBuilder':
        self._log_canonical_request = enabled
        return self

    def build(self) -> SigningConfig:
        """
        Build the signing configuration.

        Returns:
            SigningConfig: Validated configuration

        Raises:
            MissingCredentialsError: If credentials are missing
            ConfigurationError: If configuration is invalid
        """
        service_info = None
        if self._service or self._region:
            service_info = ServiceInfo(service=self._service, region=self._region)

        return SigningConfig(
            access_info=AccessInfo(
                access_key=self._access_key or "",
                secret_key=self._secret_key or "",
                session_token=self._session_token or None,
            ),
            service_info=service_info,
            domain_suffixes=tuple(self._domain_suffixes),
            duplicate_header_policy=self._duplicate_header_policy,
            timestamp_generator=self._timestamp_generator,
            logger=self._logger,
            log_canonical_request=self._log_canonical_request,
        )


def create_signing_config() -> SigningConfigBuilder:
    """
    Create a new signing configuration builder.

    Returns:
        SigningConfigBuilder: New builder instance
    """
    return SigningConfigBuilder()
