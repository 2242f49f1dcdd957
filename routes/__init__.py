from .documents import documents_bp
from .webhooks import webhooks_bp

def register_blueprints(app):
    app.register_blueprint(documents_bp)
    app.register_blueprint(webhooks_bp)
