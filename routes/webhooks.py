# routes/webhooks.py
"""
Dropbox Sign webhook endpoint.

Configure this URL in Dropbox Sign: https://yourdomain.com/api/webhooks/dropbox-sign

Every POST is answered with 200 so the provider never retries; failures are
only visible in the logs.
"""

from flask import Blueprint, Response, current_app, request

from services.documents import DocumentStore, SignatureWebhookProcessor, HANDSHAKE_RESPONSE

webhooks_bp = Blueprint('webhooks', __name__, url_prefix='/api/webhooks')


@webhooks_bp.route('/dropbox-sign', methods=['POST'])
def dropbox_sign_webhook():
    """Receive Dropbox Sign signature request events."""
    config = current_app.config
    processor = SignatureWebhookProcessor(DocumentStore(), config.get('DROPBOX_SIGN_WEBHOOK_SECRET'))

    signature = request.headers.get(config.get('SIGNATURE_WEBHOOK_HEADER', 'X-Signature'))
    body, mimetype = processor.handle(request.get_data(), signature)
    return Response(body, status=200, mimetype=mimetype)


@webhooks_bp.route('/dropbox-sign', methods=['GET'])
def dropbox_sign_verification():
    """Answer the provider's URL verification request."""
    return Response(HANDSHAKE_RESPONSE, status=200, mimetype='text/plain')
