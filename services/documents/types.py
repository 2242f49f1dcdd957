"""
Document System Type Definitions

Enums and dataclasses shared by the generation and e-signature pipelines.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum

from .exceptions import InvalidDocumentType, MalformedWebhookEvent


class DocumentType(str, Enum):
    """Types of landlord documents the system can generate."""
    LATE_RENT = "late_rent"
    LEASE_RENEWAL = "lease_renewal"
    DEPOSIT_RETURN = "deposit_return"
    MAINTENANCE = "maintenance"
    MOVE_IN_OUT = "move_in_out"
    LEASE_AGREEMENT = "lease_agreement"

    @classmethod
    def parse(cls, value) -> 'DocumentType':
        """Parse a document type tag, raising InvalidDocumentType for unknown tags."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidDocumentType(value) from None


class SignatureStatus(str, Enum):
    """A document's position in the external signing lifecycle."""
    PENDING = "pending"
    PARTIALLY_SIGNED = "partially_signed"
    COMPLETED = "completed"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self not in (SignatureStatus.PENDING, SignatureStatus.PARTIALLY_SIGNED)


@dataclass(frozen=True)
class SignatureEvent:
    """
    A provider-pushed signature lifecycle notification.

    Attributes:
        event_type: Provider event tag (e.g., "signature_request_signed")
        signature_request_id: Correlates the event with a stored document
        is_complete: True when every signer has signed
    """
    event_type: str
    signature_request_id: Optional[str] = None
    is_complete: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'SignatureEvent':
        """
        Read an event from a decoded callback payload.

        Raises:
            MalformedWebhookEvent: Nested values are not the expected JSON types
        """
        event = payload.get('event') or {}
        signature_request = payload.get('signature_request') or {}
        if not isinstance(event, dict):
            raise MalformedWebhookEvent("event is not a JSON object")
        if not isinstance(signature_request, dict):
            raise MalformedWebhookEvent("signature_request is not a JSON object")
        event_type = event.get('event_type') or ''
        if not isinstance(event_type, str):
            raise MalformedWebhookEvent("event_type is not a string")
        signature_request_id = signature_request.get('signature_request_id')
        if signature_request_id is not None and not isinstance(signature_request_id, str):
            raise MalformedWebhookEvent("signature_request_id is not a string")
        return cls(
            event_type=event_type,
            signature_request_id=signature_request_id,
            is_complete=bool(signature_request.get('is_complete', False)),
        )


@dataclass(frozen=True)
class Signer:
    """A signer on a Dropbox Sign signature request."""
    name: str
    email: str
    role: str  # 'landlord' or 'tenant'

    def to_dict(self, order: int) -> Dict[str, Any]:
        return {
            'email_address': self.email,
            'name': self.name,
            'order': order,
        }


@dataclass(frozen=True)
class WebhookResult:
    """
    Outcome of processing one webhook delivery.

    Attributes:
        outcome: 'handshake', 'unmatched', 'updated', 'unchanged' or 'ignored'
        event_type: Provider event tag, when one was parsed
        document_id: Matched document, if any
        status: The document's signature status after processing
    """
    outcome: str
    event_type: Optional[str] = None
    document_id: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_handshake(self) -> bool:
        return self.outcome == 'handshake'
