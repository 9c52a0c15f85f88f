"""
Upload Module
=============

Admin image uploads into the public uploads folder, plus the static
route that serves them back.
"""

from flask import Blueprint

upload_bp = Blueprint('upload', __name__, url_prefix='/api/upload')

# Public file serving lives on its own prefix (UPLOAD_URL_PREFIX)
uploads_public_bp = Blueprint('uploads', __name__)

from . import routes  # noqa: E402,F401

__all__ = ['upload_bp', 'uploads_public_bp']
