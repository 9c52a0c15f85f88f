import os
from dotenv import load_dotenv

load_dotenv()

IS_PRODUCTION = (
    os.getenv('ENVIRONMENT') == 'production' or
    os.getenv('FLASK_ENV') == 'production' or
    os.getenv('PRODUCTION') == '1'
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(BASE_DIR, 'data')


class Config:
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')
    SESSION_COOKIE_SECURE = IS_PRODUCTION

    # Content store and databases
    DATA_DIR = DATA_DIR
    CONTENT_FILE = os.path.join(DATA_DIR, 'content.json')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', f"sqlite:///{os.path.join(DATA_DIR, 'news.db')}")
    LOG_DB = os.path.join(DATA_DIR, 'app_logs.db')

    # Uploads are served from /uploads
    UPLOAD_FOLDER = os.path.join(BASE_DIR, 'public', 'uploads')

    # Admin credentials (env vars win over the file)
    ADMIN_CREDENTIALS_FILE = os.path.join(BASE_DIR, 'admin.credentials.json')
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

    # Front end dev server
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:3000')
