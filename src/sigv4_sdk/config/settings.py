"""
Signer settings loading for Python SDK

Settings describe how requests are signed (default scope, recognised domain
suffixes, duplicate header handling, diagnostics). They can be loaded from a
JSON string, a JSON file, or environment variables. Credentials are not part
of the settings and are always supplied by the caller.

JSON format:

    {
        "service": "execute-api",
        "region": "eu-west-1",
        "domain_suffixes": ["amazonaws.com", "amazonaws.com.cn"],
        "duplicate_headers": "merge",
        "logging": {"level": "DEBUG", "log_canonical_request": true}
    }
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..exceptions import ConfigurationError
from ..signing.service_resolver import DEFAULT_DOMAIN_SUFFIXES
from ..signing.signing_config import SigningConfig, parse_duplicate_header_policy
from ..signing.types import AccessInfo, DuplicateHeaderPolicy, ServiceInfo

ENV_PREFIX = "SIGV4_SDK_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class LoggingSettings:
    """Logging configuration"""
    level: str = "WARNING"
    log_canonical_request: bool = False


@dataclass
class SignerSettings:
    """Signer settings independent of credentials"""
    service: Optional[str] = None
    region: Optional[str] = None
    domain_suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_DOMAIN_SUFFIXES))
    duplicate_headers: DuplicateHeaderPolicy = DuplicateHeaderPolicy.MERGE
    log_settings: LoggingSettings = field(default_factory=LoggingSettings)

    @property
    def service_info(self) -> Optional[ServiceInfo]:
        if not self.service and not self.region:
            return None
        return ServiceInfo(service=self.service, region=self.region)

    def to_signing_config(self, access_info: AccessInfo, logger: Optional[logging.Logger] = None) -> SigningConfig:
        """
        Combine settings with caller-supplied credentials.

        Args:
            access_info: Credentials
            logger: Optional logger for diagnostics

        Returns:
            SigningConfig: Validated signing configuration
        """
        return SigningConfig(
            access_info=access_info,
            service_info=self.service_info,
            domain_suffixes=tuple(self.domain_suffixes),
            duplicate_header_policy=self.duplicate_headers,
            logger=logger,
            log_canonical_request=self.log_settings.log_canonical_request,
        )

    def apply_logging(self, logger_name: str = "sigv4_sdk") -> logging.Logger:
        """Set the SDK logger level from settings."""
        sdk_logger = logging.getLogger(logger_name)
        sdk_logger.setLevel(_parse_log_level(self.log_settings.level))
        return sdk_logger


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}", details={"setting": name})


def _parse_log_level(level: str) -> int:
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ConfigurationError(f"Invalid log level: {level!r}", details={"setting": "logging.level"})
    return value


def _parse_suffixes(value: Union[str, List[str]]) -> List[str]:
    items = value.split(",") if isinstance(value, str) else list(value)
    suffixes = [str(item).strip().strip(".").lower() for item in items if str(item).strip()]
    if not suffixes:
        raise ConfigurationError("domain_suffixes cannot be empty", details={"setting": "domain_suffixes"})
    return suffixes


def load_settings_from_dict(data: Mapping[str, Any]) -> SignerSettings:
    """
    Build settings from a parsed mapping.

    Raises:
        ConfigurationError: If a value is invalid
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError("Settings must be a JSON object")

    logging_data = data.get("logging") or {}
    if not isinstance(logging_data, Mapping):
        raise ConfigurationError("logging settings must be a JSON object")

    level = str(logging_data.get("level", "WARNING"))
    _parse_log_level(level)

    return SignerSettings(
        service=data.get("service") or None,
        region=data.get("region") or None,
        domain_suffixes=_parse_suffixes(data.get("domain_suffixes", list(DEFAULT_DOMAIN_SUFFIXES))),
        duplicate_headers=parse_duplicate_header_policy(data.get("duplicate_headers", DuplicateHeaderPolicy.MERGE)),
        log_settings=LoggingSettings(
            level=level.upper(),
            log_canonical_request=_parse_bool(
                logging_data.get("log_canonical_request", False), "logging.log_canonical_request"
            ),
        ),
    )


def load_settings_from_json(json_string: str) -> SignerSettings:
    """Load settings from a JSON string"""
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse settings JSON: {e}", "PARSE_ERROR")
    return load_settings_from_dict(data)


def load_settings_from_file(file_path: Union[str, Path]) -> SignerSettings:
    """Load settings from a JSON file"""
    path = Path(file_path)
    try:
        json_string = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read settings file {path}: {e}",
            "FILE_ERROR",
            {"path": str(path)}
        )
    return load_settings_from_json(json_string)


def load_settings_from_env(environ: Optional[Mapping[str, str]] = None) -> SignerSettings:
    """
    Load settings from SIGV4_SDK_* environment variables.

    Recognised variables: SIGV4_SDK_SERVICE, SIGV4_SDK_REGION,
    SIGV4_SDK_DOMAIN_SUFFIXES (comma separated), SIGV4_SDK_DUPLICATE_HEADERS,
    SIGV4_SDK_LOG_LEVEL, SIGV4_SDK_LOG_CANONICAL_REQUEST.
    """
    env = os.environ if environ is None else environ

    data: Dict[str, Any] = {"logging": {}}
    if env.get(ENV_PREFIX + "SERVICE"):
        data["service"] = env[ENV_PREFIX + "SERVICE"]
    if env.get(ENV_PREFIX + "REGION"):
        data["region"] = env[ENV_PREFIX + "REGION"]
    if env.get(ENV_PREFIX + "DOMAIN_SUFFIXES"):
        data["domain_suffixes"] = env[ENV_PREFIX + "DOMAIN_SUFFIXES"]
    if env.get(ENV_PREFIX + "DUPLICATE_HEADERS"):
        data["duplicate_headers"] = env[ENV_PREFIX + "DUPLICATE_HEADERS"]
    if env.get(ENV_PREFIX + "LOG_LEVEL"):
        data["logging"]["level"] = env[ENV_PREFIX + "LOG_LEVEL"]
    if ENV_PREFIX + "LOG_CANONICAL_REQUEST" in env:
        data["logging"]["log_canonical_request"] = env[ENV_PREFIX + "LOG_CANONICAL_REQUEST"]

    return load_settings_from_dict(data)
