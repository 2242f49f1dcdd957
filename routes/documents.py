# routes/documents.py
"""
Document generation, document management and e-signature API endpoints (JSON responses).
"""

import logging
import math
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, current_user

from services.documents import (
    DocumentError,
    DocumentGenerator,
    DocumentStore,
    InvalidDocumentUpdate,
    SignatureService,
    get_generation_client,
    get_signature_client,
)
from services.usage_service import UsageCounter

logger = logging.getLogger(__name__)

documents_bp = Blueprint('documents', __name__, url_prefix='/api')


def _generator():
    return DocumentGenerator(
        DocumentStore(),
        get_generation_client(),
        UsageCounter(),
        state=current_app.config.get('DOCUMENT_STATE', 'TX')
    )


def _signatures():
    return SignatureService(DocumentStore(), get_signature_client())


def _document_summary(doc):
    return {
        'id': doc.id,
        'title': doc.title,
        'content': doc.content,
    }


@documents_bp.errorhandler(DocumentError)
def handle_document_error(error):
    if error.http_status >= 500:
        logger.error(f"{type(error).__name__}: {error}")
    return jsonify({'success': False, 'error': str(error)}), error.http_status


# =============================================================================
# GENERATION
# =============================================================================

@documents_bp.route('/generate', methods=['POST'])
@login_required
def generate_document():
    """Generate a new document from form data."""
    body = request.get_json(silent=True) or {}
    document_type = body.get('documentType')
    form_data = body.get('formData')

    if not isinstance(form_data, dict):
        return jsonify({'success': False, 'error': 'formData must be an object'}), 400

    try:
        doc = _generator().generate(current_user.id, document_type, form_data)
    except DocumentError:
        raise
    except Exception:
        logger.exception("Error generating document")
        return jsonify({'success': False, 'error': 'Failed to generate document'}), 500

    return jsonify({'success': True, 'document': _document_summary(doc)})


# =============================================================================
# DOCUMENTS
# =============================================================================

MAX_PAGE_SIZE = 100


def _parse_date(name):
    value = request.args.get(name)
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise InvalidDocumentUpdate(f"{name} must be an ISO date") from None
    if parsed.tzinfo is not None:
        # created_at is stored as naive UTC
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@documents_bp.route('/documents')
@login_required
def list_documents():
    """List the current owner's documents with optional filters."""
    page = max(request.args.get('page', 1, type=int), 1)
    page_size = min(max(request.args.get('pageSize', 10, type=int), 1), MAX_PAGE_SIZE)

    documents, count = DocumentStore().list_for_owner(
        current_user.id,
        document_type=request.args.get('documentType'),
        property_id=request.args.get('propertyId'),
        tenant_id=request.args.get('tenantId'),
        start_date=_parse_date('startDate'),
        end_date=_parse_date('endDate'),
        search=request.args.get('search'),
        page=page,
        page_size=page_size
    )

    return jsonify({
        'success': True,
        'data': {
            'data': [doc.to_dict() for doc in documents],
            'count': count,
            'page': page,
            'pageSize': page_size,
            'totalPages': math.ceil(count / page_size),
        }
    })


@documents_bp.route('/documents/<document_id>')
@login_required
def get_document(document_id):
    doc = DocumentStore().get_for_owner(document_id, current_user.id)
    return jsonify({'success': True, 'data': doc.to_dict()})


@documents_bp.route('/documents/<document_id>', methods=['PUT'])
@login_required
def update_document(document_id):
    """Update a document's title, content, form data or cross references."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({'success': False, 'error': 'No fields to update'}), 400

    doc = DocumentStore().update_fields(document_id, current_user.id, body)
    return jsonify({'success': True, 'data': doc.to_dict()})


@documents_bp.route('/documents/<document_id>', methods=['DELETE'])
@login_required
def delete_document(document_id):
    DocumentStore().delete(document_id, current_user.id)
    return jsonify({'success': True, 'data': {'deleted': True}})


@documents_bp.route('/documents/<document_id>/regenerate', methods=['POST'])
@login_required
def regenerate_document(document_id):
    """Regenerate a document's content from its stored form data."""
    try:
        doc = _generator().regenerate(current_user.id, document_id)
    except DocumentError:
        raise
    except Exception:
        logger.exception(f"Error regenerating document {document_id}")
        return jsonify({'success': False, 'error': 'Failed to regenerate document'}), 500

    return jsonify({'success': True, 'document': _document_summary(doc)})


# =============================================================================
# E-SIGNATURE
# =============================================================================

@documents_bp.route('/documents/<document_id>/signature', methods=['POST'])
@login_required
def send_for_signature(document_id):
    """Send a document for e-signature via Dropbox Sign."""
    body = request.get_json(silent=True) or {}
    doc = _signatures().send(
        current_user.id,
        document_id,
        tenant_name=body.get('tenantName'),
        tenant_email=body.get('tenantEmail'),
        subject=body.get('subject'),
        message=body.get('message')
    )
    return jsonify({
        'success': True,
        'signatureRequestId': doc.signature_request_id,
        'message': 'Signature request sent successfully'
    })


@documents_bp.route('/documents/<document_id>/signature', methods=['GET'])
@login_required
def check_signature_status(document_id):
    """Check the signature status of a document."""
    result = _signatures().refresh_status(current_user.id, document_id)
    return jsonify({'success': True, **result})


@documents_bp.route('/documents/<document_id>/signature', methods=['DELETE'])
@login_required
def cancel_signature_request(document_id):
    _signatures().cancel(current_user.id, document_id)
    return jsonify({'success': True, 'message': 'Signature request cancelled'})


@documents_bp.route('/documents/<document_id>/signature', methods=['PATCH'])
@login_required
def send_signature_reminder(document_id):
    """Resend the signing email to a signer who hasn't signed yet."""
    body = request.get_json(silent=True) or {}
    email_address = body.get('emailAddress')
    if not email_address:
        return jsonify({'success': False, 'error': 'Email address is required'}), 400

    _signatures().remind(current_user.id, document_id, email_address)
    return jsonify({'success': True, 'message': 'Reminder sent successfully'})
