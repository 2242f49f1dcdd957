"""
Dropbox Sign Client and Signature Service Tests

Run with: python -m pytest tests/test_signature_client.py -v
"""

import json

import pytest
import requests

from models import db, Document
from services.documents import (
    DocumentStore,
    DropboxSignClient,
    NoSignatureRequest,
    SignatureProviderError,
    SignatureService,
    Signer,
)

from conftest import OWNER_ID

REQUEST_ID = 'fa5c8a0b0f492d768749333ad6fcc214c111e967'


def _response(status_code=200, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode('utf-8') if body is not None else b''
    response.url = 'https://api.hellosign.com/v3/test'
    return response


class RecordingSession:
    """requests.Session stand-in returning canned responses."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


class ScriptedSignatureClient:
    """Provider stand-in for SignatureService tests."""

    def __init__(self, signature_request=None):
        self.signature_request = signature_request or {}
        self.sent = []
        self.cancelled = []
        self.reminded = []

    def send_signature_request(self, title, content, signers, subject=None, message=None):
        self.sent.append((title, signers))
        return {'signature_request_id': REQUEST_ID, 'signatures': []}

    def get_signature_request(self, signature_request_id):
        return self.signature_request

    def cancel_signature_request(self, signature_request_id):
        self.cancelled.append(signature_request_id)

    def send_reminder(self, signature_request_id, email_address):
        self.reminded.append((signature_request_id, email_address))


class TestDropboxSignClient:
    """HTTP calls against the Dropbox Sign v3 API."""

    def test_send_signature_request(self):
        session = RecordingSession(_response(body={
            'signature_request': {'signature_request_id': REQUEST_ID, 'signatures': []}
        }))
        client = DropboxSignClient('api-key', test_mode=True, session=session)
        signers = [
            Signer('Pat Landlord', 'landlord@example.com', 'landlord'),
            Signer('J. Smith', 'tenant@example.com', 'tenant'),
        ]

        result = client.send_signature_request('Late Rent Notice - J. Smith', 'Pay now.', signers)

        assert result['signature_request_id'] == REQUEST_ID
        method, url, kwargs = session.requests[0]
        assert method == 'POST'
        assert url == 'https://api.hellosign.com/v3/signature_request/send'
        assert kwargs['auth'] == ('api-key', '')
        assert kwargs['data']['test_mode'] == '1'
        assert kwargs['data']['signers[0][email_address]'] == 'landlord@example.com'
        assert kwargs['data']['signers[1][name]'] == 'J. Smith'
        assert kwargs['data']['signers[1][order]'] == '1'
        assert kwargs['files']['file[0]'][1] == b'Pay now.'

    def test_http_error(self):
        session = RecordingSession(_response(status_code=401, body={'error': {'error_msg': 'Unauthorized api key'}}))
        client = DropboxSignClient('api-key', session=session)

        with pytest.raises(SignatureProviderError) as exc_info:
            client.get_signature_request(REQUEST_ID)
        assert exc_info.value.status_code == 401
        assert 'api-key' not in str(exc_info.value)

    def test_connection_error(self):
        session = RecordingSession(error=requests.exceptions.ConnectionError("refused"))
        client = DropboxSignClient('api-key', session=session)

        with pytest.raises(SignatureProviderError):
            client.cancel_signature_request(REQUEST_ID)

    def test_missing_request_id(self):
        session = RecordingSession(_response(body={'signature_request': {}}))
        client = DropboxSignClient('api-key', session=session)

        with pytest.raises(SignatureProviderError):
            client.send_signature_request('Title', 'Body', [Signer('A', 'a@example.com', 'landlord')])

    def test_reminder(self):
        session = RecordingSession(_response(body={'signature_request': {}}))
        client = DropboxSignClient('api-key', session=session)

        client.send_reminder(REQUEST_ID, 'tenant@example.com')

        method, url, kwargs = session.requests[0]
        assert url.endswith(f'/signature_request/remind/{REQUEST_ID}')
        assert kwargs['data'] == {'email_address': 'tenant@example.com'}

    def test_mock_mode_makes_no_requests(self):
        session = RecordingSession(error=AssertionError("no requests expected"))
        client = DropboxSignClient('', session=session)

        result = client.send_signature_request('Title', 'Body', [Signer('A', 'a@example.com', 'landlord')])

        assert client.is_mock_mode
        assert result['signature_request_id']
        assert session.requests == []


class TestSignatureService:
    """Owner-initiated signature actions."""

    @pytest.fixture
    def document_id(self, app_ctx):
        doc = DocumentStore().insert(
            OWNER_ID, 'late_rent', 'Late Rent Notice - J. Smith', 'Pay now.',
            {'tenantName': 'J. Smith', 'amountDue': 450, 'tenantEmail': 'tenant@example.com'}
        )
        return doc.id

    def test_send_adds_landlord_and_tenant(self, document_id):
        provider = ScriptedSignatureClient()
        doc = SignatureService(DocumentStore(), provider).send(OWNER_ID, document_id)

        assert doc.signature_request_id == REQUEST_ID
        assert doc.signature_status == 'pending'
        title, signers = provider.sent[0]
        assert title == 'Late Rent Notice - J. Smith'
        assert [(s.name, s.email, s.role) for s in signers] == [
            ('Pat Landlord', 'landlord@example.com', 'landlord'),
            ('J. Smith', 'tenant@example.com', 'tenant'),
        ]

    def test_refresh_status_partially_signed(self, document_id):
        provider = ScriptedSignatureClient({
            'is_complete': False,
            'signatures': [
                {'signer_email_address': 'landlord@example.com', 'signer_name': 'Pat Landlord', 'status_code': 'signed'},
                {'signer_email_address': 'tenant@example.com', 'signer_name': 'J. Smith',
                 'status_code': 'awaiting_signature'},
            ],
        })
        service = SignatureService(DocumentStore(), provider)
        service.send(OWNER_ID, document_id)

        result = service.refresh_status(OWNER_ID, document_id)

        assert result['status'] == 'partially_signed'
        assert result['signatures'][0]['status'] == 'signed'
        assert db.session.get(Document, document_id).signature_status == 'partially_signed'

    def test_refresh_status_never_regresses(self, document_id):
        service = SignatureService(DocumentStore(), ScriptedSignatureClient({
            'is_complete': False,
            'signatures': [{'signer_email_address': 'tenant@example.com', 'status_code': 'signed'}],
        }))
        service.send(OWNER_ID, document_id)
        DocumentStore().update_signature_status(document_id, 'completed')

        assert service.refresh_status(OWNER_ID, document_id)['status'] == 'completed'

    def test_cancel_and_remind(self, document_id):
        provider = ScriptedSignatureClient()
        service = SignatureService(DocumentStore(), provider)
        service.send(OWNER_ID, document_id)

        service.remind(OWNER_ID, document_id, 'tenant@example.com')
        doc = service.cancel(OWNER_ID, document_id)

        assert provider.reminded == [(REQUEST_ID, 'tenant@example.com')]
        assert provider.cancelled == [REQUEST_ID]
        assert doc.signature_request_id is None
        assert doc.signature_status == 'cancelled'

        with pytest.raises(NoSignatureRequest):
            service.remind(OWNER_ID, document_id, 'tenant@example.com')
