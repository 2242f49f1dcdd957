"""
Dropbox Sign Client

Thin wrapper around the Dropbox Sign (HelloSign) v3 API for sending generated
documents for e-signature. Runs in mock mode when no API key is configured so
local development never reaches the provider.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

import requests
from flask import current_app

from .exceptions import SignatureProviderError
from .types import Signer

logger = logging.getLogger(__name__)

DROPBOX_SIGN_API_URL = 'https://api.hellosign.com/v3'

# Request timeout
DEFAULT_TIMEOUT = 30


class DropboxSignClient:
    """
    Client for Dropbox Sign API operations.

    Provides methods for:
        - Sending a signature request
        - Reading signature request status
        - Cancelling a request
        - Reminding a signer
    """

    def __init__(self, api_key: str, test_mode: bool = True, base_url: str = DROPBOX_SIGN_API_URL, session=None):
        self.api_key = api_key
        self.test_mode = test_mode
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()

    @property
    def is_mock_mode(self) -> bool:
        """Check if running in mock mode (no API key)."""
        return not bool(self.api_key)

    def _request(self, method: str, path: str, action: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self.session.request(
                method,
                f"{self.base_url}{path}",
                auth=(self.api_key, ''),
                timeout=DEFAULT_TIMEOUT,
                **kwargs
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            status_code = getattr(getattr(e, 'response', None), 'status_code', None)
            logger.error(f"Dropbox Sign failed to {action}: {type(e).__name__} (status {status_code})")
            raise SignatureProviderError(f"Failed to {action}", status_code=status_code) from None

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            raise SignatureProviderError(f"Failed to {action}: invalid response from Dropbox Sign") from None

    def send_signature_request(
        self,
        title: str,
        content: str,
        signers: List[Signer],
        subject: Optional[str] = None,
        message: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Send a document to its signers by email.

        The document content is uploaded as a UTF-8 text file.

        Returns:
            dict with 'signature_request_id' and 'signatures'
        """
        if self.is_mock_mode:
            return self._mock_send(title, signers)

        data = {
            'title': title,
            'subject': subject or f"Please sign: {title}",
            'message': message or 'Please review and sign this document at your earliest convenience.',
            'test_mode': '1' if self.test_mode else '0',
        }
        for order, signer in enumerate(signers):
            for key, value in signer.to_dict(order).items():
                data[f"signers[{order}][{key}]"] = str(value)

        files = {'file[0]': (f"{title}.txt", content.encode('utf-8'), 'text/plain')}

        body = self._request('POST', '/signature_request/send', 'create signature request', data=data, files=files)
        signature_request = body.get('signature_request') or {}
        signature_request_id = signature_request.get('signature_request_id')
        if not signature_request_id:
            raise SignatureProviderError("No signature request ID returned")

        logger.info(f"Created Dropbox Sign request {signature_request_id} for {len(signers)} signer(s)")
        return {
            'signature_request_id': signature_request_id,
            'signatures': signature_request.get('signatures', []),
        }

    def get_signature_request(self, signature_request_id: str) -> Dict[str, Any]:
        """
        Fetch current status of a signature request.

        Returns:
            dict with 'is_complete' and 'signatures'
        """
        if self.is_mock_mode:
            return {'signature_request_id': signature_request_id, 'is_complete': False, 'signatures': []}

        body = self._request('GET', f"/signature_request/{signature_request_id}", 'get signature request status')
        return body.get('signature_request') or {}

    def cancel_signature_request(self, signature_request_id: str) -> None:
        if self.is_mock_mode:
            logger.info(f"[MOCK] Cancelled signature request {signature_request_id}")
            return
        self._request('POST', f"/signature_request/cancel/{signature_request_id}", 'cancel signature request')

    def send_reminder(self, signature_request_id: str, email_address: str) -> None:
        if self.is_mock_mode:
            logger.info(f"[MOCK] Sent reminder for signature request {signature_request_id}")
            return
        self._request(
            'POST',
            f"/signature_request/remind/{signature_request_id}",
            'send reminder',
            data={'email_address': email_address}
        )

    def _mock_send(self, title: str, signers: List[Signer]) -> Dict[str, Any]:
        signature_request_id = uuid.uuid4().hex
        logger.info(f"[MOCK] Created signature request {signature_request_id} for '{title}'")
        return {
            'signature_request_id': signature_request_id,
            'signatures': [
                {
                    'signature_id': uuid.uuid4().hex,
                    'signer_email_address': s.email,
                    'signer_name': s.name,
                    'status_code': 'awaiting_signature',
                }
                for s in signers
            ],
        }


def get_signature_client() -> DropboxSignClient:
    """Build a client from the current app's configuration."""
    config = current_app.config
    return DropboxSignClient(
        api_key=config.get('DROPBOX_SIGN_API_KEY', ''),
        test_mode=config.get('DROPBOX_SIGN_TEST_MODE', True)
    )
