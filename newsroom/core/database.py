import os
import sqlite3
from flask_sqlalchemy import SQLAlchemy

# Shared ORM handle for articles, categories, tags and users
db = SQLAlchemy()


class Database:
    """Thin helpers around plain sqlite3 files (used by the log store)."""

    @staticmethod
    def connect(path):
        db_dir = os.path.dirname(path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        return sqlite3.connect(path)


def init_database(app):
    """Bind the ORM to the app and create any missing tables"""
    db.init_app(app)

    # Make sure the directory for a file-backed sqlite URI exists
    uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
    if uri.startswith('sqlite:///'):
        db_dir = os.path.dirname(uri[len('sqlite:///'):])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    # Models register themselves on import
    from ..modules.news import models  # noqa: F401

    with app.app_context():
        db.create_all()
