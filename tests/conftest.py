"""
Shared fixtures for the Newsroom test suite.

pytest-flask picks up the ``app`` fixture below and provides ``client``.
Install with: pip install -e ".[dev]"
"""

import json
import os
import shutil
import tempfile

import pytest
from flask import Flask

from newsroom import Newsroom
from newsroom.modules.auth.credentials import SESSION_KEY, ADMIN_CLAIMS

ADMIN_USERNAME = 'editor'
ADMIN_PASSWORD = 'correct horse battery staple'


@pytest.fixture
def tmp_data_dir():
    """Temporary directory for content, uploads and databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="newsroom-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


def make_app(data_dir, **overrides):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DATA_DIR"] = data_dir
    app.config["CONTENT_FILE"] = os.path.join(data_dir, "content.json")
    app.config["UPLOAD_FOLDER"] = os.path.join(data_dir, "uploads")
    app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(data_dir, 'news.db')}"
    app.config["LOG_DB"] = os.path.join(data_dir, "app_logs.db")
    app.config["ADMIN_CREDENTIALS_FILE"] = os.path.join(data_dir, "admin.credentials.json")
    # Keep host environment credentials out of the tests
    app.config["ADMIN_USERNAME"] = ""
    app.config["ADMIN_PASSWORD"] = ""
    app.config.update(overrides)

    with open(app.config["ADMIN_CREDENTIALS_FILE"], "w", encoding="utf-8") as f:
        json.dump({"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}, f)

    Newsroom(app)
    return app


@pytest.fixture
def app(tmp_data_dir):
    """Fully initialised Flask app with all Newsroom modules registered."""
    app = make_app(tmp_data_dir)
    with app.app_context():
        yield app


@pytest.fixture
def app_factory(tmp_data_dir):
    """Build extra apps over the same data dir with config overrides."""
    return lambda **overrides: make_app(tmp_data_dir, **overrides)


@pytest.fixture
def admin_client(client):
    """Test client carrying admin claims in its session."""
    with client.session_transaction() as sess:
        sess[SESSION_KEY] = ADMIN_CLAIMS.to_dict()
    return client


@pytest.fixture
def content_path(app):
    return app.config["CONTENT_FILE"]
