import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class Config:
    # Provide a safe development fallback to avoid 500s when SECRET_KEY is missing.
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-me'
    DATABASE_URL = os.getenv('DATABASE_URL')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL or 'sqlite:///escout.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_TABLES = _flag('AUTO_CREATE_TABLES', 'true')
    PORT = int(os.getenv('PORT', 5000))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Token signing. Access and refresh tokens use separate secrets.
    JWT_ACCESS_SECRET = os.getenv('JWT_ACCESS_SECRET') or 'dev-access-secret-change-me-in-production'
    JWT_REFRESH_SECRET = os.getenv('JWT_REFRESH_SECRET') or 'dev-refresh-secret-change-me-in-production'
    JWT_ACCESS_EXPIRES_MINUTES = int(os.getenv('JWT_ACCESS_EXPIRES_MINUTES', 15))
    JWT_REFRESH_EXPIRES_DAYS = int(os.getenv('JWT_REFRESH_EXPIRES_DAYS', 7))

    OTP_TTL_MINUTES = int(os.getenv('OTP_TTL_MINUTES', 10))
    PASSWORD_MIN_LENGTH = int(os.getenv('PASSWORD_MIN_LENGTH', 6))

    # Outbound email. With EMAIL_ENABLED off, messages are written to the log.
    EMAIL_ENABLED = _flag('EMAIL_ENABLED')
    SMTP_HOST = os.getenv('SMTP_HOST')
    SMTP_PORT = int(os.getenv('SMTP_PORT', 587))
    SMTP_USER = os.getenv('SMTP_USER')
    SMTP_PASSWORD = os.getenv('SMTP_PASSWORD')
    FROM_EMAIL = os.getenv('FROM_EMAIL', 'noreply@example.com')

    # Background email delivery through RQ
    EMAIL_QUEUE_ENABLED = _flag('EMAIL_QUEUE_ENABLED')
    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

    RATELIMIT_ENABLED = _flag('RATELIMIT_ENABLED', 'true')
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    AUTO_CREATE_TABLES = False
    JWT_ACCESS_SECRET = 'test-access-secret-at-least-32-bytes!!'
    JWT_REFRESH_SECRET = 'test-refresh-secret-at-least-32-bytes!'
    EMAIL_ENABLED = False
    EMAIL_QUEUE_ENABLED = False
    RATELIMIT_ENABLED = False
