"""
Exception classes for SigV4 Python SDK
"""

from typing import Optional, Dict, Any


class SigV4SDKError(Exception):
    """Base exception for all SigV4 SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"


class MalformedRequestError(SigV4SDKError):
    """Exception raised when the request URL, host, headers or body cannot be used for signing"""

    def __init__(self, message: str, error_code: str = "MALFORMED_REQUEST", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class UnresolvableServiceInfoError(SigV4SDKError):
    """Exception raised when the service name or region cannot be determined"""

    def __init__(self, message: str, error_code: str = "UNRESOLVABLE_SERVICE_INFO", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class MissingCredentialsError(SigV4SDKError):
    """Exception raised when the access key or secret key is absent"""

    def __init__(self, message: str, error_code: str = "MISSING_CREDENTIALS", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ConfigurationError(SigV4SDKError):
    """Exception raised for invalid signer configuration"""

    def __init__(self, message: str, error_code: str = "INVALID_CONFIG", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class SignatureVerificationError(SigV4SDKError):
    """Exception raised when a signed request cannot be checked"""

    def __init__(self, message: str, error_code: str = "VERIFICATION_FAILED", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
