import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev_secret_key')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///weighbridge.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(BASE_DIR, 'uploads'))
    API_PUBLIC_URL = os.getenv('API_PUBLIC_URL', 'http://localhost:4000')
    INVOICE_TEMPLATE_PATH = os.getenv(
        'INVOICE_TEMPLATE_PATH', os.path.join(BASE_DIR, 'templates', 'invoice_template.docx')
    )
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_UPLOAD_BYTES', 10 * 1024 * 1024))


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
