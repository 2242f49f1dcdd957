"""
Document Generation Orchestrator

Dispatches on document type to the matching prompt builder, calls the
generation client, and persists the result. Used for first-time creation
and for regeneration from stored form data.

Usage:
    generator = DocumentGenerator(DocumentStore(), get_generation_client(), UsageCounter())
    doc = generator.generate(owner_id, 'late_rent', form_data)
    doc = generator.regenerate(owner_id, doc.id)
"""

import logging
from typing import Any, Dict

from models import Document
from .exceptions import MissingFormData, StorageFailure
from .prompt_builders import DOCUMENT_SYSTEM_PROMPT, render
from .types import DocumentType

logger = logging.getLogger(__name__)


class DocumentGenerator:
    """
    Generates and regenerates landlord documents.

    Collaborators are injected:
        store: DocumentStore (insert / get_for_owner / update_content)
        client: GenerationClient (complete)
        usage_counter: UsageCounter (check_quota / increment)
    """

    def __init__(self, store, client, usage_counter, state: str = 'TX'):
        self.store = store
        self.client = client
        self.usage_counter = usage_counter
        self.state = state

    def generate(self, owner_id: str, document_type, form_data: Dict[str, Any]) -> Document:
        """
        Generate a new document and save it with the form data that produced it.

        Raises:
            InvalidDocumentType: Unknown document type tag (nothing is called)
            InvalidFormData: Form data does not match the document type
            QuotaExceeded: Owner's plan tier does not allow this document
            UpstreamUnavailable / EmptyResponse: Generation backend failure
            StorageFailure: Document could not be saved after generation
        """
        document_type = DocumentType.parse(document_type)
        prompt, title, data = render(document_type, form_data)

        self.usage_counter.check_quota(owner_id, document_type.value)

        content = self.client.complete(DOCUMENT_SYSTEM_PROMPT, prompt)

        doc = self.store.insert(
            owner_id=owner_id,
            document_type=document_type.value,
            title=title,
            content=content,
            form_data=form_data,
            property_id=data.property_id,
            tenant_id=data.tenant_id,
            state=self.state
        )

        try:
            self.usage_counter.increment(owner_id)
        except StorageFailure:
            # Document is already saved
            logger.error(f"Document {doc.id} saved but usage count for {owner_id} was not recorded")

        logger.info(f"Generated {document_type.value} document {doc.id}: {title}")
        return doc

    def regenerate(self, owner_id: str, document_id: str) -> Document:
        """
        Regenerate a document's content from its stored form data.

        Only content is overwritten; title, form data, cross references and
        signature fields are left as they are.

        Raises:
            NotFound: Document absent or owned by another account
            MissingFormData: Document was saved without form data
            InvalidDocumentType / InvalidFormData: Stored record no longer valid
            UpstreamUnavailable / EmptyResponse: Generation backend failure
            StorageFailure: New content could not be saved
        """
        doc = self.store.get_for_owner(document_id, owner_id)

        if not doc.form_data:
            raise MissingFormData(document_id)

        prompt, _title, _data = render(doc.document_type, doc.form_data)
        content = self.client.complete(DOCUMENT_SYSTEM_PROMPT, prompt)

        doc = self.store.update_content(document_id, owner_id, content)
        logger.info(f"Regenerated {doc.document_type} document {doc.id}")
        return doc
