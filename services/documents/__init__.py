"""
Document Generation System

Generates landlord documents from form data with a text generation model,
persists them, regenerates them from the stored form data, and mirrors their
Dropbox Sign e-signature status.

Usage:
    from services.documents import DocumentGenerator, DocumentStore, get_generation_client
    from services.usage_service import UsageCounter

    generator = DocumentGenerator(DocumentStore(), get_generation_client(), UsageCounter())
    doc = generator.generate(owner_id, 'late_rent', form_data)

    processor = SignatureWebhookProcessor(DocumentStore(), secret)
    body, mimetype = processor.handle(raw_body, signature_header)
"""

from .types import (
    DocumentType,
    SignatureStatus,
    SignatureEvent,
    Signer,
    WebhookResult
)

from .exceptions import (
    DocumentError,
    InvalidDocumentType,
    InvalidFormData,
    MissingFormData,
    InvalidDocumentUpdate,
    NotFound,
    QuotaExceeded,
    StorageFailure,
    UpstreamUnavailable,
    EmptyResponse,
    SignatureAlreadyRequested,
    NoSignatureRequest,
    SignatureProviderError,
    WebhookError,
    MalformedWebhookEvent,
    AuthenticityFailure
)

from .forms import FormData, parse_form_data
from .prompt_builders import DOCUMENT_SYSTEM_PROMPT, build_prompt, build_title
from .generation_client import GenerationClient, get_generation_client
from .store import DocumentStore
from .orchestrator import DocumentGenerator
from .signature_client import DropboxSignClient, get_signature_client
from .signature_service import SignatureService
from .webhooks import SignatureWebhookProcessor, HANDSHAKE_RESPONSE, compute_signature

__all__ = [
    # Types
    'DocumentType',
    'SignatureStatus',
    'SignatureEvent',
    'Signer',
    'WebhookResult',
    'FormData',

    # Exceptions
    'DocumentError',
    'InvalidDocumentType',
    'InvalidFormData',
    'MissingFormData',
    'InvalidDocumentUpdate',
    'NotFound',
    'QuotaExceeded',
    'StorageFailure',
    'UpstreamUnavailable',
    'EmptyResponse',
    'SignatureAlreadyRequested',
    'NoSignatureRequest',
    'SignatureProviderError',
    'WebhookError',
    'MalformedWebhookEvent',
    'AuthenticityFailure',

    # Prompts
    'DOCUMENT_SYSTEM_PROMPT',
    'build_prompt',
    'build_title',
    'parse_form_data',

    # Services
    'GenerationClient',
    'get_generation_client',
    'DocumentStore',
    'DocumentGenerator',
    'DropboxSignClient',
    'get_signature_client',
    'SignatureService',
    'SignatureWebhookProcessor',
    'HANDSHAKE_RESPONSE',
    'compute_signature',
]
