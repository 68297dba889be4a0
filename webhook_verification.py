"""
Inbound webhook verification.

A payload is checked against its signature header before anything looks
inside it. Unverified bytes never reach the JSON decoder.
"""
import json
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from exceptions import ProtocolFailure, SignatureMismatchError
from models import WebhookEvent
from signatures import signatures_match, webhook_signature

logger = logging.getLogger(__name__)


def verify(payload: Union[str, bytes], signature_header: Optional[str], secret: str) -> bool:
    """
    Verify a webhook signature.

    Args:
        payload: Raw request body, exactly as received
        signature_header: Value of the signature header ("sha256=<hex>")
        secret: Shared webhook secret

    Returns:
        True if the signature matches. Always False when secret is empty.
    """
    if not secret:
        logger.error("No webhook secret configured; refusing every webhook")
        return False
    if not signature_header:
        return False
    expected = webhook_signature(secret, payload)
    return signatures_match(expected, signature_header)


def _decode(payload: Union[str, bytes]) -> Dict[str, Any]:
    try:
        body = json.loads(payload)
    except (ValueError, UnicodeDecodeError) as e:
        raise ProtocolFailure("Webhook payload is not valid JSON") from e
    if not isinstance(body, dict):
        raise ProtocolFailure("Webhook payload must be a JSON object")
    return body


def parse(
    payload: Union[str, bytes], signature_header: Optional[str], secret: str
) -> Optional[Dict[str, Any]]:
    """
    Verify, then decode a webhook payload.

    Returns None when the signature does not match or the verified body is
    not a JSON object.
    """
    if not verify(payload, signature_header, secret):
        logger.warning("Rejected webhook with invalid signature")
        return None

    try:
        return _decode(payload)
    except ProtocolFailure as e:
        logger.warning(f"Rejected verified webhook: {e.message}")
        return None


def load_event(
    payload: Union[str, bytes], signature_header: Optional[str], secret: str
) -> WebhookEvent:
    """
    Verify and decode a webhook into a WebhookEvent.

    Raises:
        SignatureMismatchError: If the signature does not match
        ProtocolFailure: If the verified body is malformed
    """
    if not verify(payload, signature_header, secret):
        raise SignatureMismatchError()

    body = _decode(payload)
    try:
        return WebhookEvent.model_validate(body)
    except ValidationError as e:
        raise ProtocolFailure(f"Webhook payload has an unexpected shape: {e.error_count()} errors") from e
