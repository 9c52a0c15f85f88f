"""
Content Module
==============

Editable site content kept in a flat JSON file:
breaking-news ticker, tag list, per-article overrides and hero slides.

Provides:
- The content store (newsroom.modules.content.store)
- GET/POST /api/content
"""

from flask import Blueprint

content_bp = Blueprint('content', __name__, url_prefix='/api/content')

from . import routes  # noqa: E402,F401

__all__ = ['content_bp']
