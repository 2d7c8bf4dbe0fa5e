import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ['1', 'true', 'yes', 'on']


def _env_int(name, default):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///agenda.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PERMANENT_SESSION_LIFETIME = 30 * 24 * 60 * 60  # 30 days in seconds
    JSON_SORT_KEYS = False

    # Optional shared key for service callers (X-API-Key + X-User-Id headers)
    API_SHARED_KEY = os.environ.get('API_SHARED_KEY')

    # Wall-clock zone used to compute "now" for reminders; stored times stay naive
    DEFAULT_TIMEZONE = os.environ.get('DEFAULT_TIMEZONE', 'UTC')

    SMTP_HOST = os.environ.get('SMTP_HOST')
    SMTP_PORT = _env_int('SMTP_PORT', 587)
    SMTP_USER = os.environ.get('SMTP_USER')
    SMTP_PASSWORD = os.environ.get('SMTP_PASSWORD')
    SMTP_FROM = os.environ.get('SMTP_FROM') or os.environ.get('SMTP_USER')
    SMTP_USE_TLS = _env_bool('SMTP_USE_TLS', True)

    ENABLE_REMINDER_JOBS = _env_bool('ENABLE_REMINDER_JOBS', True)
    REMINDER_INTERVAL_SECONDS = _env_int('REMINDER_INTERVAL_SECONDS', 60)

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
