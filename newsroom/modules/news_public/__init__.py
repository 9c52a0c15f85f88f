"""
Public News Module
==================

Read-only JSON feed for the public site: article listing and search,
featured stories, article pages, category sections and the home page
payload (hero slides, ticker, sections). Admin article overrides from the
content store are applied to every article returned.

Also owns /api/layout: the saved home page layout is public to read and
admin-only to change.
"""

from flask import Blueprint

news_public_bp = Blueprint('news', __name__, url_prefix='/api')

from . import routes  # noqa: E402,F401

__all__ = ['news_public_bp']
