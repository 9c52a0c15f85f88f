"""
Content API Routes
==================

GET  /api/content  - full content document (public)
POST /api/content  - one named mutation (admin only)
"""

from flask import request, jsonify
from flask_cors import cross_origin

from . import content_bp
from .store import (
    read_content, update_article_override, update_breaking_news,
    set_available_tags, set_hero_slides
)
from ..auth.credentials import admin_required, get_admin_claims
from ...core.logging_service import LoggingService


def _is_string_list(value):
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _is_object_list(value):
    return isinstance(value, list) and all(isinstance(item, dict) for item in value)


def _set_breaking_news(body):
    if not _is_string_list(body.get('items')):
        return None
    return update_breaking_news(body['items'])


def _set_available_tags(body):
    if not _is_string_list(body.get('tags')):
        return None
    return set_available_tags(body['tags'])


def _set_article_override(body):
    article_id = body.get('articleId')
    patch = body.get('patch')
    if not isinstance(article_id, str) or not article_id or not isinstance(patch, dict):
        return None
    return update_article_override(article_id, patch)


def _set_hero_slides(body):
    if not _is_object_list(body.get('slides')):
        return None
    return set_hero_slides(body['slides'])


# op name -> handler returning the new document, or None for a malformed body
OPERATIONS = {
    'setBreakingNews': _set_breaking_news,
    'setAvailableTags': _set_available_tags,
    'setArticleOverride': _set_article_override,
    'setHeroSlides': _set_hero_slides,
}


@content_bp.route('', methods=['GET'])
@cross_origin()
def get_content():
    """Full content snapshot - public endpoint"""
    return jsonify({'success': True, 'data': read_content()})


@content_bp.route('', methods=['POST'])
@admin_required
def update_content():
    """Apply one content mutation"""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({'success': False, 'error': 'Bad Request'}), 400

    op = body.get('op')
    handler = OPERATIONS.get(op) if isinstance(op, str) else None
    if handler is None:
        return jsonify({'success': False, 'error': 'Bad Request'}), 400

    try:
        data = handler(body)
    except Exception as e:
        LoggingService.log_error_with_traceback('content', e, {'op': op})
        return jsonify({'success': False, 'error': 'Internal Server Error'}), 500

    if data is None:
        return jsonify({'success': False, 'error': 'Bad Request'}), 400

    claims = get_admin_claims()
    LoggingService.log_user_action('content', op, user_id=claims.id if claims else None)
    return jsonify({'success': True, 'data': data})
