"""
Content Store
=============

Flat-file JSON store for the small set of editable site content that does
not live in the article database:

- breakingNews:     ticker strings, in display order
- availableTags:    tag names offered by the admin editors
- articleOverrides: article id -> partial patch {title, excerpt, content, imageUrl, tags}
- heroSlides:       slides for the home page carousel

Every mutation is a whole-document read-modify-write through write_content().
Reads never fail: a missing file is seeded with defaults and a corrupt one is
logged and replaced in memory by defaults.
"""

import copy
import json
import logging
import os
import threading

from ...core.config import get_config_value
from ...core.logging_service import LoggingService

logger = logging.getLogger(__name__)

DEFAULT_CONTENT = {
    'breakingNews': [
        'Supreme Court declares Articles of Impeachment vs VP Sara Duterte as unconstitutional',
        'President Marcos addresses the nation on economic recovery plans',
        'Iglesia ni Cristo holds National Rally for Peace with 1.5 million attendees',
        'OFW remittances reach all-time high this quarter',
        'Renewable energy projects accelerate nationwide development',
        'Filipino scientists develop breakthrough cancer treatment',
        'Gilas Pilipinas prepares for FIBA World Cup qualifiers',
    ],
    'availableTags': [
        'Politics',
        'National',
        'International',
        'National Security',
        'Legal',
        'Business',
        'Technology',
        'Sports',
        'Lifestyle',
        'Environment',
        'Science',
        'Finance',
        'Entertainment',
        'Health',
    ],
    'articleOverrides': {},
    # Empty means the home page falls back to featured articles
    'heroSlides': [],
}

OVERRIDE_FIELDS = ('title', 'excerpt', 'content', 'imageUrl', 'tags')

# Serializes writers inside this process; separate processes still race
_write_lock = threading.RLock()


def default_content():
    """Fresh copy of the built-in defaults"""
    return copy.deepcopy(DEFAULT_CONTENT)


def get_content_path():
    """Get content file path from config or environment"""
    path = get_config_value('CONTENT_FILE')
    if path:
        return path
    data_dir = get_config_value('DATA_DIR', os.path.join(os.getcwd(), 'data'))
    return os.path.join(data_dir, 'content.json')


def _dump(content, path):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(content, f, indent=2, ensure_ascii=False)


def _ensure_content_file(path):
    """Create the data directory and a default document if missing"""
    data_dir = os.path.dirname(path)
    if data_dir:
        os.makedirs(data_dir, exist_ok=True)
    if not os.path.exists(path):
        logger.info("Seeding content store at %s", path)
        _dump(DEFAULT_CONTENT, path)


def _coerce(parsed):
    """Force a parsed document into the ContentData shape.

    Wrong-typed fields fall back to defaults; wrong-typed elements inside a
    list or the overrides mapping are dropped.
    """
    if not isinstance(parsed, dict):
        raise ValueError(f"content document must be an object, got {type(parsed).__name__}")

    breaking_news = parsed.get('breakingNews')
    available_tags = parsed.get('availableTags')
    overrides = parsed.get('articleOverrides')
    hero_slides = parsed.get('heroSlides')

    if isinstance(breaking_news, list):
        breaking_news = [item for item in breaking_news if isinstance(item, str)]
    else:
        breaking_news = list(DEFAULT_CONTENT['breakingNews'])

    if isinstance(available_tags, list):
        available_tags = [tag for tag in available_tags if isinstance(tag, str)]
    else:
        available_tags = list(DEFAULT_CONTENT['availableTags'])

    if isinstance(overrides, dict):
        overrides = {str(k): v for k, v in overrides.items() if isinstance(v, dict)}
    else:
        overrides = {}

    if isinstance(hero_slides, list):
        hero_slides = [slide for slide in hero_slides if isinstance(slide, dict)]
    else:
        hero_slides = []

    return {
        'breakingNews': breaking_news,
        'availableTags': available_tags,
        'articleOverrides': overrides,
        'heroSlides': hero_slides,
    }


def read_content():
    """Read the content document, falling back to defaults on any failure"""
    path = get_content_path()
    try:
        _ensure_content_file(path)
        with open(path, 'r', encoding='utf-8') as f:
            parsed = json.load(f)
        return _coerce(parsed)
    except Exception as e:
        LoggingService.error('content', 'Failed to read content store, using defaults', {
            'path': path,
            'error': str(e),
        })
        return default_content()


def write_content(updater):
    """Apply updater(current) -> next and persist the whole result.

    Write errors are not caught here; callers surface them.
    """
    path = get_content_path()
    with _write_lock:
        current = read_content()
        next_content = updater(current)
        _ensure_content_file(path)
        _dump(next_content, path)
    return next_content


def update_article_override(article_id, patch):
    """Shallow-merge patch into the override for article_id (patch wins)"""
    article_id = str(article_id)

    def apply(current):
        overrides = dict(current['articleOverrides'])
        previous = overrides.get(article_id)
        merged = dict(previous) if isinstance(previous, dict) else {}
        merged.update(patch)
        overrides[article_id] = merged
        return {**current, 'articleOverrides': overrides}

    return write_content(apply)


def update_breaking_news(items):
    """Replace the ticker items"""
    return write_content(lambda current: {**current, 'breakingNews': list(items)})


def set_available_tags(tags):
    """Replace the tag list"""
    return write_content(lambda current: {**current, 'availableTags': list(tags)})


def set_hero_slides(slides):
    """Replace the hero carousel slides"""
    return write_content(lambda current: {**current, 'heroSlides': list(slides)})


def get_article_override(article_id, content=None):
    """Stored override for an article, or an empty dict"""
    if content is None:
        content = read_content()
    override = content['articleOverrides'].get(str(article_id))
    return dict(override) if isinstance(override, dict) else {}


def apply_article_override(article, overrides):
    """Layer an admin override onto a serialized article dict.

    overrides is the full articleOverrides mapping. Only known override
    fields are applied; imageUrl maps onto the article's image_url.
    """
    override = overrides.get(str(article.get('id')))
    if not isinstance(override, dict) or not override:
        return article

    merged = dict(article)
    for field in OVERRIDE_FIELDS:
        if field not in override:
            continue
        if field == 'imageUrl':
            merged['image_url'] = override[field]
        else:
            merged[field] = override[field]
    merged['overridden'] = True
    return merged
