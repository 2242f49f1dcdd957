# models.py
import uuid
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin

db = SQLAlchemy()


def _uuid():
    return str(uuid.uuid4())


class Profile(UserMixin, db.Model):
    """Landlord account. Rows are created by the identity provider on signup."""
    __tablename__ = 'profiles'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    email = db.Column(db.String(255))
    full_name = db.Column(db.String(255))
    subscription_tier = db.Column(db.String(20), nullable=False, default='free')  # free, basic, pro
    documents_this_month = db.Column(db.Integer, nullable=False, default=0)
    billing_cycle_start = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    documents = db.relationship('Document', backref='owner', lazy='dynamic', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Profile {self.email}>'


class Document(db.Model):
    __tablename__ = 'documents'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False, index=True)
    property_id = db.Column(db.String(36))
    tenant_id = db.Column(db.String(36))
    document_type = db.Column(db.String(30), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    form_data = db.Column(db.JSON, nullable=True)  # Inputs the content was generated from
    state = db.Column(db.String(2), default='TX')

    # E-signature (Dropbox Sign)
    signature_request_id = db.Column(db.String(64), index=True)
    # pending, partially_signed, completed, declined, cancelled, expired, error
    signature_status = db.Column(db.String(20))

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'property_id': self.property_id,
            'tenant_id': self.tenant_id,
            'document_type': self.document_type,
            'title': self.title,
            'content': self.content,
            'form_data': self.form_data,
            'state': self.state,
            'signature_request_id': self.signature_request_id,
            'signature_status': self.signature_status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Document {self.title}>'
