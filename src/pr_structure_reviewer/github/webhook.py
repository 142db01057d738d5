"""
Webhook Gate

Verifies GitHub webhook signatures and decides which deliveries are worth
processing.
"""

import hashlib
import hmac
import json
import logging
from enum import Enum
from typing import Iterable, Optional

from ..config import DEFAULT_RELEVANT_ACTIONS
from ..errors import SignatureInvalidError
from ..models.webhook import WebhookEvent


logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
EVENT_HEADER = "X-GitHub-Event"
SIGNATURE_PREFIX = "sha256="
PULL_REQUEST_EVENT = "pull_request"


def compute_signature(secret: str, raw_body: bytes) -> str:
    """Signature header value GitHub sends for this body."""
    digest = hmac.new(secret.encode('utf-8'), raw_body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str, raw_body: bytes, signature_header: Optional[str]) -> bool:
    """
    Check a ``sha256=<hex>`` signature header against the raw request body.

    Args:
        secret: Webhook signing secret
        raw_body: Request body exactly as received
        signature_header: Value of the X-Hub-Signature-256 header

    Returns:
        True only if the header matches the HMAC of the body (always False
        without a secret)
    """
    if not secret or not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    expected = compute_signature(secret, raw_body)
    return hmac.compare_digest(signature_header.encode('utf-8'), expected.encode('utf-8'))


class SignatureStatus(Enum):
    """Outcome of a signature check."""
    VERIFIED = "verified"
    SKIPPED = "skipped"
    INVALID = "invalid"


class WebhookGate:
    """
    Authenticates and filters webhook deliveries.

    Without a secret, verification is skipped and reported as SKIPPED,
    never as VERIFIED.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        relevant_events: Iterable[str] = (PULL_REQUEST_EVENT,),
        relevant_actions: Iterable[str] = DEFAULT_RELEVANT_ACTIONS,
    ):
        """
        Initialize webhook gate.

        Args:
            secret: Webhook signing secret (verification disabled when empty)
            relevant_events: Event types to process
            relevant_actions: Pull request actions to process
        """
        self.secret = secret or None
        self.relevant_events = frozenset(relevant_events)
        self.relevant_actions = frozenset(relevant_actions)

        if not self.secret:
            logger.warning("Webhook secret not configured: signature verification is DISABLED")

    @property
    def verification_enabled(self) -> bool:
        return self.secret is not None

    def verify(self, raw_body: bytes, signature_header: Optional[str]) -> SignatureStatus:
        if not self.secret:
            return SignatureStatus.SKIPPED

        if verify_signature(self.secret, raw_body, signature_header):
            return SignatureStatus.VERIFIED

        return SignatureStatus.INVALID

    def authenticate(self, raw_body: bytes, signature_header: Optional[str]) -> SignatureStatus:
        """
        Verify a delivery, raising on a bad signature.

        Raises:
            SignatureInvalidError: If the signature is missing or wrong
        """
        status = self.verify(raw_body, signature_header)
        if status is SignatureStatus.INVALID:
            logger.warning("Invalid webhook signature")
            raise SignatureInvalidError("Invalid signature")
        return status

    def is_relevant_event(self, event_type: Optional[str]) -> bool:
        return event_type in self.relevant_events

    def should_process(self, event_type: Optional[str], action: Optional[str]) -> bool:
        """True for relevant event types carrying a relevant action."""
        return self.is_relevant_event(event_type) and action in self.relevant_actions

    def parse_event(
        self,
        event_type: Optional[str],
        raw_body: bytes,
        signature_header: Optional[str],
    ) -> WebhookEvent:
        """
        Authenticate a delivery and decode its JSON payload.

        Raises:
            SignatureInvalidError: If the signature is missing or wrong
            ValueError: If the body is not a JSON object
        """
        self.authenticate(raw_body, signature_header)
        return self.decode_event(event_type, raw_body, signature_header)

    def decode_event(
        self,
        event_type: Optional[str],
        raw_body: bytes,
        signature_header: Optional[str],
    ) -> WebhookEvent:
        """
        Decode an already authenticated delivery.

        Raises:
            ValueError: If the body is not a JSON object
        """
        payload = json.loads(raw_body.decode('utf-8')) if raw_body else {}
        if not isinstance(payload, dict):
            raise ValueError("Webhook payload must be a JSON object")

        return WebhookEvent(
            event_type=event_type,
            raw_body=raw_body,
            signature=signature_header,
            payload=payload,
        )
