"""
News Admin Routes
=================

Article and category management for the admin dashboard, plus the
dashboard statistics tiles. Every route requires an admin session.
"""

from flask import request, jsonify

from . import news_bp
from .database import (
    list_articles, get_article, create_article, update_article, delete_article,
    toggle_publish, get_categories_with_article_count, create_category,
    update_category, delete_category, get_admin_author, get_admin_stats
)
from ..auth.credentials import admin_required
from ...core.database import db
from ...core.logging_service import LoggingService

ADMIN_PAGE_SIZE = 20
MAX_ADMIN_PAGE_SIZE = 100


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _server_error(e):
    db.session.rollback()
    LoggingService.log_error_with_traceback('news', e, {'path': request.path})
    return jsonify({'success': False, 'error': 'Internal Server Error'}), 500


# ===== Articles =====

@news_bp.route('/articles', methods=['GET'])
@admin_required
def get_articles():
    """Get a page of articles, optionally filtered by ?status=published|draft"""
    page = max(request.args.get('page', 1, type=int) or 1, 1)
    limit = request.args.get('limit', ADMIN_PAGE_SIZE, type=int) or ADMIN_PAGE_SIZE
    limit = max(1, min(limit, MAX_ADMIN_PAGE_SIZE))

    try:
        articles, pagination = list_articles(status=request.args.get('status'), page=page, limit=limit)
        return jsonify({
            'success': True,
            'articles': [a.to_dict() for a in articles],
            'pagination': pagination,
        })
    except Exception as e:
        return _server_error(e)


@news_bp.route('/articles/<int:article_id>', methods=['GET'])
@admin_required
def get_single_article(article_id):
    article = get_article(article_id)
    if article is None:
        return jsonify({'success': False, 'error': 'Article not found'}), 404
    return jsonify({'success': True, 'article': article.to_dict()})


@news_bp.route('/articles', methods=['POST'])
@admin_required
def create_new_article():
    """Create new article"""
    data = _json_body()
    if data is None:
        return jsonify({'success': False, 'error': 'Invalid JSON body'}), 400
    if not data.get('title') or not data.get('content'):
        return jsonify({'success': False, 'error': 'Title and content are required'}), 400

    try:
        article = create_article(data, author=get_admin_author())
    except ValueError as e:
        db.session.rollback()
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        return _server_error(e)

    LoggingService.log_user_action('news', 'article created', details={'id': article.id, 'slug': article.slug})
    return jsonify({'success': True, 'article': article.to_dict()}), 201


@news_bp.route('/articles/<int:article_id>', methods=['PUT'])
@admin_required
def update_existing_article(article_id):
    """Update article"""
    data = _json_body()
    if data is None:
        return jsonify({'success': False, 'error': 'Invalid JSON body'}), 400

    try:
        article = update_article(article_id, data)
    except ValueError as e:
        db.session.rollback()
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        return _server_error(e)

    if article is None:
        return jsonify({'success': False, 'error': 'Article not found'}), 404

    LoggingService.log_user_action('news', 'article updated', details={'id': article.id})
    return jsonify({'success': True, 'article': article.to_dict()})


@news_bp.route('/articles/<int:article_id>', methods=['DELETE'])
@admin_required
def delete_existing_article(article_id):
    try:
        deleted = delete_article(article_id)
    except Exception as e:
        return _server_error(e)

    if not deleted:
        return jsonify({'success': False, 'error': 'Article not found'}), 404

    LoggingService.log_user_action('news', 'article deleted', details={'id': article_id})
    return jsonify({'success': True})


@news_bp.route('/articles/<int:article_id>/toggle-publish', methods=['POST'])
@admin_required
def toggle_article_publish(article_id):
    """Toggle article between draft and published"""
    try:
        article = toggle_publish(article_id)
    except Exception as e:
        return _server_error(e)

    if article is None:
        return jsonify({'success': False, 'error': 'Article not found'}), 404
    return jsonify({'success': True, 'published': article.published})


# ===== Categories =====

@news_bp.route('/categories', methods=['GET'])
@admin_required
def get_categories():
    try:
        return jsonify({'success': True, 'categories': get_categories_with_article_count()})
    except Exception as e:
        return _server_error(e)


@news_bp.route('/categories', methods=['POST'])
@admin_required
def create_new_category():
    data = _json_body()
    if data is None:
        return jsonify({'success': False, 'error': 'Invalid JSON body'}), 400

    try:
        category = create_category(data)
    except ValueError as e:
        db.session.rollback()
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        return _server_error(e)

    LoggingService.log_user_action('news', 'category created', details={'slug': category.slug})
    return jsonify({'success': True, 'category': category.to_dict()}), 201


@news_bp.route('/categories/<int:category_id>', methods=['PUT'])
@admin_required
def update_existing_category(category_id):
    data = _json_body()
    if data is None:
        return jsonify({'success': False, 'error': 'Invalid JSON body'}), 400

    try:
        category = update_category(category_id, data)
    except ValueError as e:
        db.session.rollback()
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        return _server_error(e)

    if category is None:
        return jsonify({'success': False, 'error': 'Category not found'}), 404
    return jsonify({'success': True, 'category': category.to_dict()})


@news_bp.route('/categories/<int:category_id>', methods=['DELETE'])
@admin_required
def delete_existing_category(category_id):
    try:
        deleted = delete_category(category_id)
    except Exception as e:
        return _server_error(e)

    if not deleted:
        return jsonify({'success': False, 'error': 'Category not found'}), 404

    LoggingService.log_user_action('news', 'category deleted', details={'id': category_id})
    return jsonify({'success': True})


# ===== Dashboard =====

@news_bp.route('/stats', methods=['GET'])
@admin_required
def get_stats():
    """Statistics tiles for the admin dashboard"""
    try:
        return jsonify({'success': True, 'data': get_admin_stats()})
    except Exception as e:
        return _server_error(e)


@news_bp.route('/logs', methods=['GET'])
@admin_required
def get_logs():
    """Recent application log entries"""
    limit = request.args.get('limit', 100, type=int)
    logs = LoggingService.get_recent_logs(
        limit=max(1, min(limit, 500)),
        level=request.args.get('level'),
        source=request.args.get('source'),
    )
    return jsonify({'success': True, 'logs': logs})
