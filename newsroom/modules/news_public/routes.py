from flask import jsonify, request
from flask_cors import cross_origin

from . import news_public_bp
from ..content.store import read_content, apply_article_override
from ..news.database import (
    get_published_articles, get_featured_articles, get_article_by_slug,
    get_related_articles, list_categories, get_category_by_slug, get_category_articles,
    get_layout, save_layout
)
from ..auth.credentials import admin_required, get_admin_claims
from ...core.database import db
from ...core.logging_service import LoggingService

MAX_PAGE_SIZE = 50
SECTION_SIZE = 4


def _serialize(articles, overrides):
    """Article dicts with admin overrides layered on top"""
    return [apply_article_override(article.to_dict(), overrides) for article in articles]


def article_to_slide(article):
    """Shape a serialized article like a hero slide"""
    return {
        'id': str(article['id']),
        'title': article['title'],
        'excerpt': article.get('excerpt') or '',
        'imageUrl': article.get('image_url') or '',
        'category': (article.get('category') or {}).get('name', ''),
        'author': (article.get('author') or {}).get('name') or '',
        'publishedAt': article.get('published_at'),
        'views': article.get('views') or 0,
        'slug': article['slug'],
    }


def _server_error(e):
    LoggingService.log_error_with_traceback('news_public', e, {'path': request.path})
    return jsonify({'success': False, 'error': 'Internal Server Error'}), 500


@news_public_bp.route('/articles', methods=['GET'])
@cross_origin()
def articles():
    """Published articles with search, filters and pagination"""
    page = max(request.args.get('page', 1, type=int) or 1, 1)
    limit = request.args.get('limit', 12, type=int) or 12
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    tags = [t for t in request.args.getlist('tag') if t]

    try:
        results, pagination = get_published_articles(
            query=request.args.get('q') or None,
            category=request.args.get('category') or None,
            tags=tags or None,
            author=request.args.get('author') or None,
            date_from=request.args.get('from'),
            date_to=request.args.get('to'),
            page=page,
            limit=limit,
        )
        overrides = read_content()['articleOverrides']
        return jsonify({
            'success': True,
            'articles': _serialize(results, overrides),
            'pagination': pagination,
        })
    except Exception as e:
        return _server_error(e)


@news_public_bp.route('/articles/featured', methods=['GET'])
@cross_origin()
def featured_articles():
    count = max(1, min(request.args.get('count', 6, type=int) or 6, MAX_PAGE_SIZE))
    try:
        overrides = read_content()['articleOverrides']
        return jsonify({'success': True, 'articles': _serialize(get_featured_articles(count), overrides)})
    except Exception as e:
        return _server_error(e)


@news_public_bp.route('/articles/<slug>', methods=['GET'])
@cross_origin()
def article_detail(slug):
    """Single published article plus related stories"""
    try:
        article = get_article_by_slug(slug)
        if article is None:
            return jsonify({'success': False, 'error': 'Article not found'}), 404

        overrides = read_content()['articleOverrides']
        return jsonify({
            'success': True,
            'article': apply_article_override(article.to_dict(), overrides),
            'related': _serialize(get_related_articles(article), overrides),
        })
    except Exception as e:
        return _server_error(e)


@news_public_bp.route('/categories', methods=['GET'])
@cross_origin()
def categories():
    try:
        return jsonify({'success': True, 'categories': [c.to_dict() for c in list_categories()]})
    except Exception as e:
        return _server_error(e)


@news_public_bp.route('/categories/<slug>/articles', methods=['GET'])
@cross_origin()
def category_articles(slug):
    try:
        category = get_category_by_slug(slug)
        if category is None:
            return jsonify({'success': False, 'error': 'Category not found'}), 404

        overrides = read_content()['articleOverrides']
        return jsonify({
            'success': True,
            'category': category.to_dict(),
            'articles': _serialize(get_category_articles(slug), overrides),
        })
    except Exception as e:
        return _server_error(e)


@news_public_bp.route('/home', methods=['GET'])
@cross_origin()
def home():
    """Everything the home page needs in one payload"""
    try:
        content = read_content()
        overrides = content['articleOverrides']

        hero_slides = content['heroSlides']
        if not hero_slides:
            hero_slides = [article_to_slide(a) for a in _serialize(get_featured_articles(5), overrides)]

        sections = []
        for category in list_categories():
            section_articles = get_category_articles(category.slug, limit=SECTION_SIZE)
            if section_articles:
                sections.append({
                    'category': category.to_dict(),
                    'articles': _serialize(section_articles, overrides),
                })

        return jsonify({
            'success': True,
            'heroSlides': hero_slides,
            'breakingNews': content['breakingNews'],
            'sections': sections,
        })
    except Exception as e:
        return _server_error(e)


# ===== Layout =====

def _layout_count(value):
    """Whole-number itemCount as int, else None"""
    # bool is an int subclass; JSON true is not a count
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


@news_public_bp.route('/layout', methods=['GET'])
@cross_origin()
def get_site_layout():
    """Saved home page layout; layout is null until an admin saves one"""
    try:
        layout = get_layout()
        return jsonify({'success': True, 'layout': layout.to_dict() if layout else None})
    except Exception as e:
        return _server_error(e)


@news_public_bp.route('/layout', methods=['POST'])
@admin_required
def save_site_layout():
    """Save the home page layout (template name and item count)"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    template = data.get('template')
    item_count = _layout_count(data.get('itemCount'))
    if not isinstance(template, str) or not template.strip() or item_count is None:
        return jsonify({'success': False, 'error': 'Invalid data: template and itemCount are required'}), 400

    try:
        layout = save_layout(template.strip(), item_count)
    except Exception as e:
        db.session.rollback()
        return _server_error(e)

    claims = get_admin_claims()
    LoggingService.log_user_action('layout', 'layout saved', user_id=claims.id if claims else None,
                                   details={'template': layout.template, 'itemCount': layout.item_count})
    return jsonify({'success': True, 'layout': layout.to_dict()})
