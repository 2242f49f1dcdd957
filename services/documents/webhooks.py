"""
Signature Webhook Processor

Receives Dropbox Sign callback events and mirrors them onto
Document.signature_status.

Two layers:
    process(): fallible core. Verifies the HMAC signature on every call,
        parses the event and applies the status change, raising typed
        WebhookError subclasses on failure.
    handle(): provider-facing boundary. Always acknowledges so the provider
        does not retry, and logs each failure class distinctly.

Events:
- callback_test / plaintext probe: answered with the handshake literal
- signature_request_sent: pending
- signature_request_signed: partially_signed, or completed when all signed
- signature_request_all_signed: completed
- signature_request_declined / _canceled / _expired / _invalid:
  declined / cancelled / expired / error
- signature_request_viewed: no change
"""

import hashlib
import hmac
import json
import logging
from typing import Optional, Tuple, Union

from .exceptions import (
    AuthenticityFailure,
    DocumentError,
    MalformedWebhookEvent,
)
from .signature_status import (
    CALLBACK_TEST_EVENT,
    can_transition,
    coerce_status,
    status_for_event,
)
from .types import SignatureEvent, WebhookResult

logger = logging.getLogger(__name__)

HANDSHAKE_RESPONSE = 'Hello API Event Received'
ACKNOWLEDGEMENT = json.dumps({'received': True})


def compute_signature(secret: str, raw_body: bytes) -> str:
    """Hex HMAC-SHA256 of the raw request body."""
    return hmac.new(secret.encode('utf-8'), raw_body, hashlib.sha256).hexdigest()


def _as_bytes(raw_body: Union[bytes, str]) -> bytes:
    return raw_body.encode('utf-8') if isinstance(raw_body, str) else raw_body


class SignatureWebhookProcessor:

    def __init__(self, store, secret: str):
        self.store = store
        self.secret = secret

    def verify(self, raw_body: bytes, signature: Optional[str]) -> None:
        """
        Check the caller-supplied signature against the raw body.

        Raises:
            AuthenticityFailure: No secret configured, no signature, or mismatch
        """
        if not self.secret:
            raise AuthenticityFailure("webhook secret is not configured")
        if not signature:
            raise AuthenticityFailure("missing signature header")

        expected = compute_signature(self.secret, raw_body)
        if not hmac.compare_digest(expected.encode('utf-8'), signature.strip().lower().encode('utf-8')):
            raise AuthenticityFailure("signature mismatch")

    def process(self, raw_body: Union[bytes, str], signature: Optional[str]) -> WebhookResult:
        """
        Verify and apply one webhook delivery.

        Returns:
            WebhookResult describing what happened

        Raises:
            AuthenticityFailure: Body does not match its signature
            MalformedWebhookEvent: Unparseable body or missing signature_request_id
            StorageFailure: Document store failure
        """
        raw_body = _as_bytes(raw_body)
        # Verification precedes the handshake: an unsigned plaintext probe or
        # callback_test is acknowledged with {"received": true}, never the
        # handshake literal. URL verification without a signature uses GET.
        self.verify(raw_body, signature)

        try:
            payload = json.loads(raw_body)
        except ValueError:
            if HANDSHAKE_RESPONSE.encode('utf-8') in raw_body:
                return WebhookResult('handshake')
            raise MalformedWebhookEvent("payload is not valid JSON") from None

        if not isinstance(payload, dict):
            raise MalformedWebhookEvent("payload is not a JSON object")

        event = SignatureEvent.from_payload(payload)

        if event.event_type == CALLBACK_TEST_EVENT:
            return WebhookResult('handshake', event_type=event.event_type)

        if not event.signature_request_id:
            raise MalformedWebhookEvent(f"{event.event_type or 'event'} has no signature_request_id")

        doc = self.store.find_by_signature_request_id(event.signature_request_id)
        if doc is None:
            logger.info(f"No document for signature request {event.signature_request_id} ({event.event_type})")
            return WebhookResult('unmatched', event_type=event.event_type)

        current = coerce_status(doc.signature_status)
        new_status = status_for_event(event)

        if new_status is None:
            return WebhookResult('ignored', event.event_type, doc.id, doc.signature_status)

        if new_status == current:
            return WebhookResult('unchanged', event.event_type, doc.id, new_status.value)

        if not can_transition(current, new_status):
            logger.info(
                f"Ignoring stale {event.event_type} for document {doc.id}: "
                f"{current.value if current else None} -> {new_status.value} is not forward"
            )
            return WebhookResult('ignored', event.event_type, doc.id, doc.signature_status)

        self.store.update_signature_status(doc.id, new_status.value)
        logger.info(f"Updated document {doc.id} signature status to {new_status.value}")
        return WebhookResult('updated', event.event_type, doc.id, new_status.value)

    def handle(self, raw_body: Union[bytes, str], signature: Optional[str]) -> Tuple[str, str]:
        """
        Process a delivery and always produce the acknowledgement.

        Returns:
            tuple: (response body, mimetype)
        """
        try:
            result = self.process(raw_body, signature)
        except AuthenticityFailure as e:
            logger.warning(f"Rejected signature webhook: authenticity check failed ({e})")
            return ACKNOWLEDGEMENT, 'application/json'
        except MalformedWebhookEvent as e:
            logger.warning(f"Malformed signature webhook: {e}")
            return ACKNOWLEDGEMENT, 'application/json'
        except DocumentError as e:
            logger.error(f"Signature webhook processing failed: {type(e).__name__}: {e}")
            return ACKNOWLEDGEMENT, 'application/json'
        except Exception:
            logger.exception("Unexpected error processing signature webhook")
            return ACKNOWLEDGEMENT, 'application/json'

        if result.is_handshake:
            return HANDSHAKE_RESPONSE, 'text/plain'

        logger.info(
            f"Dropbox Sign webhook event: {result.event_type} "
            f"outcome={result.outcome} document={result.document_id} status={result.status}"
        )
        return ACKNOWLEDGEMENT, 'application/json'
