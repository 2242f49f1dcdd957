import os


class Config:
    # Environment
    FLASK_ENV = os.getenv('FLASK_ENV', 'development')

    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///documents.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Text generation (OpenAI)
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    GENERATION_MODEL = os.getenv('GENERATION_MODEL', 'gpt-4o')
    GENERATION_MAX_TOKENS = int(os.getenv('GENERATION_MAX_TOKENS', 2048))
    GENERATION_TIMEOUT = float(os.getenv('GENERATION_TIMEOUT', 60))

    # Dropbox Sign configuration
    DROPBOX_SIGN_API_KEY = os.getenv('DROPBOX_SIGN_API_KEY', '')
    # Webhook HMAC secret; Dropbox Sign signs callbacks with the account API key
    DROPBOX_SIGN_WEBHOOK_SECRET = os.getenv('DROPBOX_SIGN_WEBHOOK_SECRET') or DROPBOX_SIGN_API_KEY
    DROPBOX_SIGN_TEST_MODE = os.getenv('DROPBOX_SIGN_TEST_MODE', 'True').lower() == 'true'
    SIGNATURE_WEBHOOK_HEADER = os.getenv('SIGNATURE_WEBHOOK_HEADER', 'X-Signature')

    # All documents are framed under Texas Property Code
    DOCUMENT_STATE = 'TX'


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    OPENAI_API_KEY = 'sk-test-key'
    DROPBOX_SIGN_API_KEY = ''
    DROPBOX_SIGN_WEBHOOK_SECRET = 'test-webhook-secret'
