"""
Content API tests
=================

GET/POST /api/content, admin gating and malformed bodies.
"""

import pytest

from newsroom.modules.content.store import DEFAULT_CONTENT, read_content


def test_get_content_is_public(client):
    response = client.get('/api/content')

    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['data'] == DEFAULT_CONTENT


def test_get_content_sends_cors_header(client):
    response = client.get('/api/content', headers={'Origin': 'http://localhost:3000'})
    assert response.headers.get('Access-Control-Allow-Origin') in ('*', 'http://localhost:3000')


def test_post_requires_admin(client):
    response = client.post('/api/content', json={'op': 'setBreakingNews', 'items': ['x']})

    assert response.status_code == 401
    assert read_content()['breakingNews'] == DEFAULT_CONTENT['breakingNews']


def test_post_rejects_non_admin_role(client):
    from newsroom.modules.auth.credentials import SESSION_KEY
    with client.session_transaction() as sess:
        sess[SESSION_KEY] = {'id': 'u1', 'email': 'reader@local', 'name': 'Reader', 'role': 'USER'}

    response = client.post('/api/content', json={'op': 'setBreakingNews', 'items': ['x']})
    assert response.status_code == 401


def test_post_rejects_malformed_claims(client):
    from newsroom.modules.auth.credentials import SESSION_KEY
    with client.session_transaction() as sess:
        sess[SESSION_KEY] = {'role': 'ADMIN'}

    response = client.post('/api/content', json={'op': 'setBreakingNews', 'items': ['x']})
    assert response.status_code == 401


def test_set_breaking_news(admin_client):
    response = admin_client.post('/api/content', json={
        'op': 'setBreakingNews', 'items': ['Storm warning', 'Markets rally'],
    })

    assert response.status_code == 200
    assert response.get_json()['data']['breakingNews'] == ['Storm warning', 'Markets rally']
    assert read_content()['breakingNews'] == ['Storm warning', 'Markets rally']


def test_set_available_tags(admin_client):
    response = admin_client.post('/api/content', json={'op': 'setAvailableTags', 'tags': ['Local']})

    assert response.status_code == 200
    assert read_content()['availableTags'] == ['Local']


def test_set_article_override_merges(admin_client):
    admin_client.post('/api/content', json={
        'op': 'setArticleOverride', 'articleId': 'abc', 'patch': {'title': 'A', 'excerpt': 'E'},
    })
    response = admin_client.post('/api/content', json={
        'op': 'setArticleOverride', 'articleId': 'abc', 'patch': {'title': 'B'},
    })

    assert response.status_code == 200
    assert response.get_json()['data']['articleOverrides']['abc'] == {'title': 'B', 'excerpt': 'E'}


def test_set_article_override_over_malformed_entry(admin_client, app):
    with open(app.config['CONTENT_FILE'], 'w', encoding='utf-8') as f:
        f.write('{"articleOverrides": {"1": "oops"}}')

    response = admin_client.post('/api/content', json={
        'op': 'setArticleOverride', 'articleId': '1', 'patch': {'title': 'x'},
    })

    assert response.status_code == 200
    assert response.get_json()['data']['articleOverrides'] == {'1': {'title': 'x'}}


def test_set_hero_slides_replaces(admin_client):
    first = [{'id': '1', 'title': 'One'}, {'id': '2', 'title': 'Two'}]
    second = [{'id': '3', 'title': 'Three'}]

    admin_client.post('/api/content', json={'op': 'setHeroSlides', 'slides': first})
    response = admin_client.post('/api/content', json={'op': 'setHeroSlides', 'slides': second})

    assert response.status_code == 200
    assert read_content()['heroSlides'] == second


@pytest.mark.parametrize('body', [
    {'op': 'unknownOp'},
    {'op': 'setBreakingNews'},
    {'op': 'setBreakingNews', 'items': 'not a list'},
    {'op': 'setBreakingNews', 'items': [1, 2]},
    {'op': 'setAvailableTags', 'tags': {'a': 1}},
    {'op': 'setArticleOverride', 'articleId': 5, 'patch': {'title': 'x'}},
    {'op': 'setArticleOverride', 'articleId': 'x', 'patch': ['title']},
    {'op': 'setHeroSlides', 'slides': ['not an object']},
    {'items': ['no op']},
    ['not', 'an', 'object'],
])
def test_malformed_bodies_are_400_and_leave_document_unchanged(admin_client, body):
    before = read_content()

    response = admin_client.post('/api/content', json=body)

    assert response.status_code == 400
    assert read_content() == before


def test_invalid_json_is_400(admin_client):
    response = admin_client.post('/api/content', data='{broken', content_type='application/json')
    assert response.status_code == 400


def test_write_failure_is_500_without_detail(admin_client, monkeypatch):
    from newsroom.modules.content import store

    def failing_dump(content, path):
        raise OSError('secret path /var/data')

    monkeypatch.setattr(store, '_dump', failing_dump)

    response = admin_client.post('/api/content', json={'op': 'setBreakingNews', 'items': []})

    assert response.status_code == 500
    assert '/var/data' not in response.get_data(as_text=True)
