"""
News Admin Module
=================

Admin API for the article database.

Provides:
- Article creation, editing, deletion and publish toggling
- Category management with article counts
- Dashboard statistics and recent logs
"""

from flask import Blueprint

news_bp = Blueprint('news_admin', __name__, url_prefix='/admin/api')

from . import routes  # noqa: E402,F401

__all__ = ['news_bp']
