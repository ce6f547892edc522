"""
Hash and HMAC primitives for SigV4 signing

Thin wrappers over the cryptography package producing raw bytes or
lowercase hex text, the two forms the signing pipeline needs.
"""

from typing import Optional, Union

from cryptography.hazmat.primitives import hashes, hmac

from ..exceptions import MalformedRequestError

# SHA-256 of the empty string, used for requests without a body
EMPTY_PAYLOAD_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

HEX_ENCODING = "hex"

Payload = Union[str, bytes, bytearray, memoryview, None]


def to_bytes(data: Payload) -> bytes:
    """
    Convert a payload to bytes, encoding text as UTF-8.

    Args:
        data: Text, bytes-like object or None

    Returns:
        bytes: Encoded payload (empty for None)

    Raises:
        MalformedRequestError: If the payload type is not supported
    """
    if data is None:
        return b""
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)

    raise MalformedRequestError(
        f"Payload must be string, bytes, or None, got {type(data).__name__}",
        details={"payload_type": type(data).__name__}
    )


def sha256_hex(payload: Payload = None) -> str:
    """
    Hash a payload with SHA-256.

    Args:
        payload: Text (hashed as UTF-8), bytes, or None for the empty payload

    Returns:
        str: Lowercase hex digest
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(to_bytes(payload))
    return digest.finalize().hex()


def hmac_sha256(key: bytes, message: Payload, encoding: Optional[str] = None) -> Union[bytes, str]:
    """
    Compute HMAC-SHA256 of a message.

    Args:
        key: Raw key bytes
        message: Message to authenticate (text is encoded as UTF-8)
        encoding: ``"hex"`` for hex text output, None for raw bytes

    Returns:
        bytes or str: MAC as raw bytes, or lowercase hex text when requested
    """
    mac = hmac.HMAC(to_bytes(key), hashes.SHA256())
    mac.update(to_bytes(message))
    raw = mac.finalize()

    if encoding is None:
        return raw
    if encoding == HEX_ENCODING:
        return raw.hex()

    raise ValueError(f"Unsupported HMAC output encoding: {encoding}")
