"""
News Database Helpers
=====================

Query and persistence helpers for articles and categories.
Routes in both the admin and public modules go through these.
"""

import re
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, or_

from ...core.database import db
from .models import Article, Category, Layout, Tag, User

ADMIN_EMAIL = 'admin@local'


def slugify(text):
    """Lowercase, hyphen-separated slug"""
    slug = re.sub(r'[^\w\s-]', '', (text or '').lower())
    slug = re.sub(r'[-\s_]+', '-', slug)
    return slug.strip('-') or 'item'


def create_slug(title, model=Article, exclude_id=None):
    """Create URL-friendly slug with uniqueness checking"""
    base_slug = slugify(title)
    slug = base_slug
    counter = 1

    while True:
        query = db.select(model.id).where(model.slug == slug)
        if exclude_id is not None:
            query = query.where(model.id != exclude_id)
        if db.session.execute(query).first() is None:
            return slug
        slug = f"{base_slug}-{counter}"
        counter += 1


def _parse_datetime(value):
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None
    # Stored timestamps are naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def get_admin_author():
    """User row standing in for the credential-file admin"""
    user = db.session.execute(db.select(User).where(User.email == ADMIN_EMAIL)).scalar_one_or_none()
    if user is None:
        user = User(email=ADMIN_EMAIL, name='Admin', role='ADMIN')
        db.session.add(user)
        db.session.commit()
    return user


def get_or_create_tags(names):
    """Tag rows for the given names, creating any that are missing"""
    tags = []
    seen = set()
    for name in names or []:
        name = str(name).strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        tag = db.session.execute(db.select(Tag).where(Tag.name == name)).scalar_one_or_none()
        if tag is None:
            tag = Tag(name=name, slug=create_slug(name, model=Tag))
            db.session.add(tag)
            db.session.flush()
        tags.append(tag)
    return tags


# ===== Articles =====

def _paginate(stmt, order_by, page, limit):
    """Run stmt for one page; returns (rows, pagination dict)"""
    total = db.session.scalar(db.select(func.count()).select_from(stmt.subquery()))
    rows = db.session.scalars(
        stmt.order_by(*order_by).offset((page - 1) * limit).limit(limit)
    ).all()

    return rows, {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': (total + limit - 1) // limit,
    }


def list_articles(status=None, page=1, limit=20):
    """One page of all articles, newest first; status is 'published', 'draft' or None"""
    query = db.select(Article)
    if status == 'published':
        query = query.where(Article.published.is_(True))
    elif status == 'draft':
        query = query.where(Article.published.is_(False))
    return _paginate(query, (Article.created_at.desc(), Article.id.desc()), page, limit)


def get_article(article_id):
    return db.session.get(Article, article_id)


def _apply_article_fields(article, data):
    for field in ('excerpt', 'image_url'):
        if field in data:
            setattr(article, field, data.get(field) or None)

    if 'category_id' in data:
        category_id = data.get('category_id')
        if category_id and db.session.get(Category, category_id) is None:
            raise ValueError('Category not found')
        article.category_id = category_id or None

    if 'tags' in data:
        article.tags = get_or_create_tags(data.get('tags'))

    if 'published' in data:
        published = bool(data.get('published'))
        if published and not article.published:
            article.published_at = _parse_datetime(data.get('published_at')) or datetime.utcnow()
        article.published = published
    elif data.get('published_at'):
        article.published_at = _parse_datetime(data.get('published_at'))


def create_article(data, author=None):
    """Create new article from a validated dict"""
    title = (data.get('title') or '').strip()
    content = (data.get('content') or '').strip()
    if not title or not content:
        raise ValueError('Title and content are required')

    article = Article(
        title=title,
        slug=create_slug(title),
        content=content,
        author=author,
        published=False,
    )
    db.session.add(article)
    _apply_article_fields(article, data)
    db.session.commit()
    return article


def update_article(article_id, data):
    """Update existing article; returns None when not found"""
    article = get_article(article_id)
    if article is None:
        return None

    if 'title' in data:
        title = (data.get('title') or '').strip()
        if not title:
            raise ValueError('Title cannot be empty')
        if title != article.title:
            article.slug = create_slug(title, exclude_id=article.id)
        article.title = title

    if 'content' in data:
        content = (data.get('content') or '').strip()
        if not content:
            raise ValueError('Content cannot be empty')
        article.content = content

    _apply_article_fields(article, data)
    db.session.commit()
    return article


def delete_article(article_id):
    article = get_article(article_id)
    if article is None:
        return False
    db.session.delete(article)
    db.session.commit()
    return True


def toggle_publish(article_id):
    """Flip published state; returns the article or None"""
    article = get_article(article_id)
    if article is None:
        return None
    article.published = not article.published
    if article.published and article.published_at is None:
        article.published_at = datetime.utcnow()
    db.session.commit()
    return article


# ===== Public queries =====

def _published():
    return db.select(Article).where(Article.published.is_(True))


def get_published_articles(query=None, category=None, tags=None, author=None,
                           date_from=None, date_to=None, page=1, limit=12):
    """Filtered, paginated published articles, newest first"""
    stmt = _published()

    if query:
        pattern = f"%{query}%"
        stmt = stmt.where(or_(
            Article.title.ilike(pattern),
            Article.content.ilike(pattern),
            Article.excerpt.ilike(pattern),
        ))
    if category:
        stmt = stmt.where(Article.category.has(Category.slug == category))
    if tags:
        stmt = stmt.where(Article.tags.any(or_(Tag.slug.in_(tags), Tag.name.in_(tags))))
    if author:
        stmt = stmt.where(Article.author.has(User.name.ilike(f"%{author}%")))

    date_from = _parse_datetime(date_from)
    date_to = _parse_datetime(date_to)
    if date_from:
        stmt = stmt.where(Article.published_at >= date_from)
    if date_to:
        stmt = stmt.where(Article.published_at <= date_to)

    return _paginate(stmt, (Article.published_at.desc(), Article.id.desc()), page, limit)


def get_featured_articles(count=6):
    return db.session.scalars(
        _published().order_by(Article.views.desc(), Article.published_at.desc()).limit(count)
    ).all()


def get_article_by_slug(slug, increment_views=True):
    """Published article by slug, bumping its view count"""
    article = db.session.scalars(_published().where(Article.slug == slug)).first()
    if article is not None and increment_views:
        article.views = (article.views or 0) + 1
        db.session.commit()
    return article


def get_related_articles(article, limit=4):
    if article.category_id is None:
        return []
    return db.session.scalars(
        _published()
        .where(Article.category_id == article.category_id, Article.id != article.id)
        .order_by(Article.published_at.desc())
        .limit(limit)
    ).all()


def get_category_articles(slug, limit=None):
    stmt = _published().where(Article.category.has(Category.slug == slug)) \
        .order_by(Article.published_at.desc())
    if limit:
        stmt = stmt.limit(limit)
    return db.session.scalars(stmt).all()


# ===== Categories =====

def list_categories():
    return db.session.scalars(db.select(Category).order_by(Category.name.asc())).all()


def get_category_by_slug(slug):
    return db.session.execute(db.select(Category).where(Category.slug == slug)).scalar_one_or_none()


def get_categories_with_article_count():
    rows = db.session.execute(
        db.select(Category, func.count(Article.id))
        .outerjoin(Article, Article.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name.asc())
    ).all()
    return [{**category.to_dict(), 'articleCount': count} for category, count in rows]


def _category_name_taken(name, exclude_id=None):
    query = db.select(Category.id).where(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    return db.session.execute(query).first() is not None


def create_category(data):
    name = (data.get('name') or '').strip()
    if not name:
        raise ValueError('Name is required')
    if _category_name_taken(name):
        raise ValueError('Category already exists')

    category = Category(
        name=name,
        slug=create_slug(data.get('slug') or name, model=Category),
        description=data.get('description') or None,
        color=data.get('color') or None,
    )
    db.session.add(category)
    db.session.commit()
    return category


def update_category(category_id, data):
    category = db.session.get(Category, category_id)
    if category is None:
        return None

    if 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            raise ValueError('Name cannot be empty')
        if _category_name_taken(name, exclude_id=category.id):
            raise ValueError('Category already exists')
        category.name = name
    if data.get('slug'):
        category.slug = create_slug(data['slug'], model=Category, exclude_id=category.id)
    for field in ('description', 'color'):
        if field in data:
            setattr(category, field, data.get(field) or None)

    db.session.commit()
    return category


def delete_category(category_id):
    """Delete a category; its articles become uncategorized"""
    category = db.session.get(Category, category_id)
    if category is None:
        return False
    for article in category.articles:
        article.category_id = None
    db.session.delete(category)
    db.session.commit()
    return True


# ===== Layout =====

SITE_LAYOUT_ID = 1


def get_layout():
    """The saved home page layout, or None before the first save"""
    return db.session.get(Layout, SITE_LAYOUT_ID)


def save_layout(template, item_count):
    """Create or update the single site layout row"""
    layout = get_layout()
    if layout is None:
        layout = Layout(id=SITE_LAYOUT_ID)
        db.session.add(layout)
    layout.template = template
    layout.item_count = item_count
    layout.updated_at = datetime.utcnow()
    db.session.commit()
    return layout


# ===== Stats =====

def format_number(num):
    if num >= 1000000:
        return f"{num / 1000000:.1f}M"
    if num >= 1000:
        return f"{num / 1000:.1f}K"
    return str(num)


def calculate_change(current, previous):
    if previous == 0:
        return '+100%'
    change = (current - previous) / previous * 100
    return f"{'+' if change >= 0 else ''}{change:.1f}%"


def get_admin_stats(now=None):
    """Dashboard tiles for the admin home page"""
    now = now or datetime.utcnow()
    today_start = datetime(now.year, now.month, now.day)
    today_end = today_start + timedelta(days=1)

    last_month_start = today_start - timedelta(days=30)
    last_month_end = last_month_start + timedelta(days=1)

    total_articles = db.session.scalar(db.select(func.count(Article.id)))
    published_today = db.session.scalar(
        db.select(func.count(Article.id)).where(
            Article.published.is_(True),
            Article.published_at >= today_start,
            Article.published_at < today_end,
        )
    )
    total_views = db.session.scalar(
        db.select(func.coalesce(func.sum(Article.views), 0)).where(Article.published.is_(True))
    )
    active_authors = db.session.scalar(
        db.select(func.count(User.id)).where(User.articles.any(Article.published.is_(True)))
    )
    total_categories = db.session.scalar(db.select(func.count(Category.id)))
    last_month_articles = db.session.scalar(
        db.select(func.count(Article.id)).where(
            Article.published.is_(True),
            Article.created_at >= last_month_start,
            Article.created_at < last_month_end,
        )
    )

    return [
        {
            'name': 'Total Articles',
            'value': str(total_articles),
            'change': calculate_change(total_articles, last_month_articles),
            'changeType': 'positive' if total_articles >= last_month_articles else 'negative',
            'icon': 'Newspaper',
        },
        {
            'name': 'Published Today',
            'value': str(published_today),
            'change': '0%',
            'changeType': 'neutral',
            'icon': 'Calendar',
        },
        {
            'name': 'Total Views',
            'value': format_number(total_views or 0),
            'change': '0%',
            'changeType': 'neutral',
            'icon': 'Eye',
        },
        {
            'name': 'Active Authors',
            'value': str(active_authors),
            'change': '0%',
            'changeType': 'neutral',
            'icon': 'User',
        },
        {
            'name': 'Categories',
            'value': str(total_categories),
            'change': '0%',
            'changeType': 'neutral',
            'icon': 'BarChart3',
        },
    ]
