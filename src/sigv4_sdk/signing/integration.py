"""
HTTP client integration for request signing

This module plugs the SigV4 signer into the requests library so outbound
requests are signed right before they are sent. The SDK itself never sends
anything; transport stays with requests.
"""

import logging
from typing import Optional

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest
from requests.sessions import Session

from .signing_config import SigningConfig
from .sigv4_signer import SigV4Signer
from .types import ServiceInfo, SignableRequest

logger = logging.getLogger(__name__)


class SigV4Auth(AuthBase):
    """
    requests authentication handler that signs each prepared request.

    Use with the ``auth`` argument of requests calls, or assign it to a
    session's ``auth`` attribute. Streaming bodies (generators, files) cannot
    be hashed and are rejected with MalformedRequestError.
    """

    def __init__(self, config: SigningConfig, service_info: Optional[ServiceInfo] = None):
        """
        Initialize the auth handler.

        Args:
            config: Signing configuration
            service_info: Optional service/region override for every request
        """
        self.signer = SigV4Signer(config)
        self.service_info = service_info

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        # http.client sends str bodies as ISO-8859-1; the hashed bytes must be the sent bytes
        if isinstance(request.body, str):
            request.body = request.body.encode("utf-8")
            request.prepare_content_length(request.body)

        signable = SignableRequest(
            url=request.url,
            method=request.method,
            headers=dict(request.headers),
            body=request.body,
        )
        self.signer.sign(signable, self.service_info)

        request.headers.update(signable.headers)
        logger.debug(f"Signed {request.method} request to {request.url}")
        return request


def create_signing_session(
    config: SigningConfig,
    service_info: Optional[ServiceInfo] = None,
    session: Optional[Session] = None
) -> Session:
    """
    Create a requests session that signs every request.

    Args:
        config: Signing configuration
        service_info: Optional service/region override
        session: Optional existing session to configure

    Returns:
        requests.Session: Session with SigV4Auth attached
    """
    session = session or requests.Session()
    session.auth = SigV4Auth(config, service_info)
    logger.info(f"Configured SigV4 request signing for access key: {config.access_info.access_key}")
    return session
