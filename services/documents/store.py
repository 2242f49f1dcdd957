"""
Document Store

Access contract over the documents table. Every user-facing read and write
is scoped to the owning account; only the webhook lookup by signature
request id is unscoped, since webhooks carry no user context.

Database errors are rolled back and surfaced as StorageFailure.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from models import db, Document
from .exceptions import InvalidDocumentUpdate, NotFound, StorageFailure

logger = logging.getLogger(__name__)

# Fields an owner may edit directly; signature fields only change through the signature flow
UPDATABLE_FIELDS = ('title', 'content', 'form_data', 'property_id', 'tenant_id')


class DocumentStore:

    def __init__(self, session=None):
        self.session = session or db.session

    def _commit(self, action: str):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to {action}: {type(e).__name__}")
            raise StorageFailure(f"Failed to {action}") from e

    def insert(
        self,
        owner_id: str,
        document_type: str,
        title: str,
        content: str,
        form_data: Optional[Dict[str, Any]],
        property_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
        state: str = 'TX'
    ) -> Document:
        """Create a new document row and return it."""
        doc = Document(
            user_id=owner_id,
            document_type=document_type,
            title=title,
            content=content,
            form_data=form_data,
            property_id=property_id,
            tenant_id=tenant_id,
            state=state
        )
        self.session.add(doc)
        self._commit('save document')
        logger.info(f"Saved {document_type} document {doc.id} for owner {owner_id}")
        return doc

    def get_for_owner(self, document_id: str, owner_id: str) -> Document:
        """
        Load a document owned by owner_id.

        Raises:
            NotFound: When the document is absent or owned by someone else
        """
        try:
            doc = self.session.query(Document).filter_by(id=document_id, user_id=owner_id).first()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to load document {document_id}: {type(e).__name__}")
            raise StorageFailure("Failed to load document") from e
        if doc is None:
            raise NotFound()
        return doc

    def update_content(self, document_id: str, owner_id: str, content: str) -> Document:
        """Overwrite the content field only."""
        doc = self.get_for_owner(document_id, owner_id)
        doc.content = content
        self._commit('update document')
        return doc

    def list_for_owner(
        self,
        owner_id: str,
        document_type: Optional[str] = None,
        property_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 10
    ) -> Tuple[List[Document], int]:
        """
        List the owner's documents, newest first.

        Args:
            owner_id: Owning account
            document_type / property_id / tenant_id: Exact-match filters
            start_date / end_date: Inclusive bounds on created_at
            search: Case-insensitive substring of the title
            page: 1-based page number
            page_size: Documents per page

        Returns:
            tuple: (documents on the requested page, total matching count)
        """
        query = self.session.query(Document).filter(Document.user_id == owner_id)

        if document_type:
            query = query.filter(Document.document_type == document_type)
        if property_id:
            query = query.filter(Document.property_id == property_id)
        if tenant_id:
            query = query.filter(Document.tenant_id == tenant_id)
        if start_date:
            query = query.filter(Document.created_at >= start_date)
        if end_date:
            query = query.filter(Document.created_at <= end_date)
        if search:
            query = query.filter(Document.title.ilike(f"%{search}%"))

        try:
            total = query.count()
            documents = (
                query.order_by(Document.created_at.desc(), Document.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
                .all()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to list documents for owner {owner_id}: {type(e).__name__}")
            raise StorageFailure("Failed to fetch documents") from e
        return documents, total

    def update_fields(self, document_id: str, owner_id: str, changes: Dict[str, Any]) -> Document:
        """
        Apply a partial update to the editable fields of an owned document.

        Raises:
            InvalidDocumentUpdate: No editable fields given, or a blank title/content
            NotFound: Document absent or owned by someone else
        """
        changes = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        if not changes:
            raise InvalidDocumentUpdate("No fields to update")

        for key in ('title', 'content'):
            if key in changes and (not isinstance(changes[key], str) or not changes[key].strip()):
                raise InvalidDocumentUpdate(f"{key} must be a non-empty string")
        if 'form_data' in changes and changes['form_data'] is not None and not isinstance(changes['form_data'], dict):
            raise InvalidDocumentUpdate("form_data must be an object")

        doc = self.get_for_owner(document_id, owner_id)
        for key, value in changes.items():
            setattr(doc, key, value)
        self._commit('update document')
        logger.info(f"Updated {', '.join(sorted(changes))} on document {doc.id}")
        return doc

    def delete(self, document_id: str, owner_id: str) -> None:
        """Delete an owned document (NotFound when absent or not owned)."""
        doc = self.get_for_owner(document_id, owner_id)
        self.session.delete(doc)
        self._commit('delete document')
        logger.info(f"Deleted document {document_id} for owner {owner_id}")

    def set_signature_request(
        self,
        document_id: str,
        owner_id: str,
        signature_request_id: Optional[str],
        signature_status: Optional[str]
    ) -> Document:
        """Record (or clear) the signature request a document was sent with."""
        doc = self.get_for_owner(document_id, owner_id)
        doc.signature_request_id = signature_request_id
        doc.signature_status = signature_status
        self._commit('update signature request')
        return doc

    def update_signature_status(self, document_id: str, signature_status: str) -> None:
        """Set signature_status and nothing else."""
        try:
            updated = self.session.query(Document).filter_by(id=document_id).update(
                {Document.signature_status: signature_status},
                synchronize_session='fetch'
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to update signature status for {document_id}: {type(e).__name__}")
            raise StorageFailure("Failed to update signature status") from e
        self._commit('update signature status')
        if not updated:
            raise NotFound()

    def find_by_signature_request_id(self, signature_request_id: str) -> Optional[Document]:
        """Unscoped lookup used by the signature webhook."""
        try:
            return self.session.query(Document).filter_by(
                signature_request_id=signature_request_id
            ).first()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to look up signature request {signature_request_id}: {type(e).__name__}")
            raise StorageFailure("Failed to look up signature request") from e
