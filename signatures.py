import hashlib
import hmac
import random
import secrets
import string
from typing import Union

SIGNATURE_PREFIX = "sha256="

_ALPHABET = string.ascii_letters + string.digits


def credential_hash(app_name: str, owner_id: str, app_secret: str) -> str:
    """
    Hash the application credential for the init handshake.

    SHA-256 over app_name + owner_id + app_secret, lowercase hex. No nonce or
    timestamp is mixed in, so the same credential always yields the same hash.
    """
    data = f"{app_name}{owner_id}{app_secret}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def encryption_key_material(length: int = 32) -> str:
    """
    Generate ephemeral key material advertised to the server during init.
    Drawn from the OS CSPRNG.
    """
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def filler_string(length: int) -> str:
    """
    Pseudo-random alphanumeric filler for non-secret values only.
    Never use this for keys or tokens.
    """
    return "".join(random.choices(_ALPHABET, k=length))


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def webhook_signature(secret: str, payload: Union[str, bytes]) -> str:
    """
    Compute the webhook signature header value for a raw payload.

    Returns "sha256=" followed by the lowercase hex HMAC-SHA256 of the payload
    keyed with the shared secret.
    """
    digest = hmac.new(_to_bytes(secret), _to_bytes(payload), hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def signatures_match(expected: str, received: str) -> bool:
    """Constant-time comparison of two signature header values."""
    if not received:
        return False
    return hmac.compare_digest(
        expected.strip().lower().encode("utf-8"),
        received.strip().lower().encode("utf-8"),
    )
