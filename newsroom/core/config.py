import os
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """
    Base configuration for the Newsroom framework.
    Host projects can override any of these through environment variables
    or by setting the same key on app.config before calling Newsroom(app).
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', os.getenv('SECRET_KEY'))

    # Flat-file content store
    DATA_DIR = os.getenv('DATA_DIR', os.path.join(os.getcwd(), 'data'))
    CONTENT_FILE = os.getenv('CONTENT_FILE', os.path.join(DATA_DIR, 'content.json'))

    # Uploads (served back under UPLOAD_URL_PREFIX)
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'public', 'uploads'))
    UPLOAD_URL_PREFIX = os.getenv('UPLOAD_URL_PREFIX', '/uploads')
    MAX_UPLOAD_BYTES = int(os.getenv('MAX_UPLOAD_BYTES', str(10 * 1024 * 1024)))

    # Admin credentials: env vars win over the credentials file
    ADMIN_CREDENTIALS_FILE = os.getenv(
        'ADMIN_CREDENTIALS_FILE', os.path.join(os.getcwd(), 'admin.credentials.json')
    )
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

    # Databases
    NEWS_DB = os.getenv('NEWS_DB', os.path.join(DATA_DIR, 'news.db'))
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', f"sqlite:///{NEWS_DB}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_DB = os.getenv('LOG_DB', os.path.join(DATA_DIR, 'app_logs.db'))

    # Public read endpoints are fetched by the front end from other origins
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Port for local server (optional, projects can set this)
    port = int(os.getenv('PORT', '5000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
