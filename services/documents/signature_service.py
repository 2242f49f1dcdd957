"""
Signature Actions

Owner-initiated e-signature operations on a generated document: send,
refresh status, cancel and remind. Status changes made here follow the same
forward-only rule as the webhook processor.
"""

import logging
from typing import Any, Dict, Optional

from models import Profile
from .exceptions import NoSignatureRequest, SignatureAlreadyRequested
from .signature_status import can_transition, coerce_status
from .types import SignatureStatus, Signer

logger = logging.getLogger(__name__)


class SignatureService:

    def __init__(self, store, client):
        self.store = store
        self.client = client

    def send(
        self,
        owner_id: str,
        document_id: str,
        tenant_name: Optional[str] = None,
        tenant_email: Optional[str] = None,
        subject: Optional[str] = None,
        message: Optional[str] = None
    ):
        """
        Send a document for signature: landlord first, then the tenant when an
        email address is known.

        Raises:
            NotFound: Document absent or not owned
            SignatureAlreadyRequested: Document was already sent
            SignatureProviderError: Dropbox Sign call failed
        """
        doc = self.store.get_for_owner(document_id, owner_id)
        if doc.signature_request_id:
            raise SignatureAlreadyRequested()

        profile = self.store.session.get(Profile, owner_id)
        signers = [Signer(
            name=(profile.full_name if profile and profile.full_name else 'Landlord'),
            email=(profile.email if profile and profile.email else ''),
            role='landlord'
        )]

        form_data = doc.form_data or {}
        tenant_email = tenant_email or form_data.get('tenantEmail')
        if tenant_email:
            signers.append(Signer(
                name=tenant_name or form_data.get('tenantName') or 'Tenant',
                email=tenant_email,
                role='tenant'
            ))

        result = self.client.send_signature_request(
            title=doc.title,
            content=doc.content,
            signers=signers,
            subject=subject,
            message=message
        )

        doc = self.store.set_signature_request(
            document_id, owner_id, result['signature_request_id'], SignatureStatus.PENDING.value
        )
        logger.info(f"Document {doc.id} sent for signature as {doc.signature_request_id}")
        return doc

    def refresh_status(self, owner_id: str, document_id: str) -> Dict[str, Any]:
        """Poll Dropbox Sign and mirror its state onto the document."""
        doc = self.store.get_for_owner(document_id, owner_id)
        if not doc.signature_request_id:
            return {'has_signature_request': False, 'status': None}

        signature_request = self.client.get_signature_request(doc.signature_request_id)
        signatures = signature_request.get('signatures') or []

        new_status = None
        if signature_request.get('is_complete'):
            new_status = SignatureStatus.COMPLETED
        elif any(s.get('status_code') == 'signed' for s in signatures):
            new_status = SignatureStatus.PARTIALLY_SIGNED

        current = coerce_status(doc.signature_status)
        if new_status is not None and new_status != current and can_transition(current, new_status):
            self.store.update_signature_status(doc.id, new_status.value)
            current = new_status

        return {
            'has_signature_request': True,
            'signature_request_id': doc.signature_request_id,
            'status': current.value if current else None,
            'is_complete': bool(signature_request.get('is_complete')),
            'signatures': [
                {
                    'signer_email': s.get('signer_email_address'),
                    'signer_name': s.get('signer_name'),
                    'status': s.get('status_code'),
                    'signed_at': s.get('signed_at'),
                }
                for s in signatures
            ],
        }

    def cancel(self, owner_id: str, document_id: str):
        """Cancel the signature request and detach it from the document."""
        doc = self.store.get_for_owner(document_id, owner_id)
        if not doc.signature_request_id:
            raise NoSignatureRequest("No signature request to cancel")

        self.client.cancel_signature_request(doc.signature_request_id)
        doc = self.store.set_signature_request(document_id, owner_id, None, SignatureStatus.CANCELLED.value)
        logger.info(f"Signature request cancelled for document {doc.id}")
        return doc

    def remind(self, owner_id: str, document_id: str, email_address: str) -> None:
        doc = self.store.get_for_owner(document_id, owner_id)
        if not doc.signature_request_id:
            raise NoSignatureRequest()
        self.client.send_reminder(doc.signature_request_id, email_address)
