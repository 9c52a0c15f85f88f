"""
Upload tests
============

Validation order, filename generation and the /api/upload endpoint.
"""

import io
import os
import re

import pytest
from werkzeug.datastructures import FileStorage

from newsroom.core import storage
from newsroom.core.storage import (
    UploadError, extension_for, generate_filename, validate_upload
)

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64
URL_PATTERN = re.compile(r'^/uploads/\d{13}-[0-9a-z]+\.png$')


def _file_storage(data, filename='photo.png', content_type='image/png'):
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=content_type)


def _uploads(app):
    folder = app.config['UPLOAD_FOLDER']
    return os.listdir(folder) if os.path.isdir(folder) else []


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

def test_generate_filename_format():
    name = generate_filename('holiday.png', 'image/png')
    assert re.match(r'^\d{13}-[0-9a-z]+\.png$', name)


def test_generate_filename_is_unique():
    names = {generate_filename('a.jpg', 'image/jpeg') for _ in range(50)}
    assert len(names) == 50


def test_extension_from_name_then_type():
    assert extension_for('cover.webp', 'image/png') == '.webp'
    assert extension_for('no-extension', 'image/gif') == '.gif'
    assert extension_for('', 'image/svg+xml') == '.svg'
    assert extension_for(None, None) == ''
    assert extension_for('blob', 'application/octet-stream') == ''


def test_extension_with_path_characters_falls_back_to_type():
    assert extension_for('evil.png/../../x', 'image/jpeg') == '.jpg'


def test_validate_missing_file(app):
    with pytest.raises(UploadError) as exc:
        validate_upload(None)
    assert exc.value.status_code == 400


def test_validate_rejects_disallowed_type(app):
    with pytest.raises(UploadError) as exc:
        validate_upload(_file_storage(b'%PDF-1.4', 'doc.pdf', 'application/pdf'))
    assert exc.value.status_code == 415


def test_validate_allows_missing_type(app):
    data = validate_upload(_file_storage(PNG_BYTES, 'photo.png', None))
    assert data == PNG_BYTES


def test_type_is_checked_before_size(app):
    big_pdf = b'0' * (storage.DEFAULT_MAX_BYTES + 1)
    with pytest.raises(UploadError) as exc:
        validate_upload(_file_storage(big_pdf, 'doc.pdf', 'application/pdf'))
    assert exc.value.status_code == 415


def test_size_cap_respects_config(app):
    app.config['MAX_UPLOAD_BYTES'] = 10
    with pytest.raises(UploadError) as exc:
        validate_upload(_file_storage(b'x' * 11))
    assert exc.value.status_code == 413


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

def test_upload_requires_admin(client, app):
    response = client.post('/api/upload', data={
        'file': (io.BytesIO(PNG_BYTES), 'photo.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 401
    assert _uploads(app) == []


def test_upload_png_succeeds(admin_client, app):
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(PNG_BYTES), 'photo.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True
    assert URL_PATTERN.match(data['url'])

    filename = data['url'].rsplit('/', 1)[-1]
    with open(os.path.join(app.config['UPLOAD_FOLDER'], filename), 'rb') as f:
        assert f.read() == PNG_BYTES


def test_uploaded_file_is_served(admin_client):
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(PNG_BYTES), 'photo.png', 'image/png'),
    }, content_type='multipart/form-data')
    url = response.get_json()['url']

    served = admin_client.get(url)
    assert served.status_code == 200
    assert served.data == PNG_BYTES


def test_relative_upload_folder_is_served(admin_client, app, tmp_data_dir, monkeypatch):
    monkeypatch.chdir(tmp_data_dir)
    app.config['UPLOAD_FOLDER'] = os.path.join('public', 'uploads')

    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(PNG_BYTES), 'photo.png', 'image/png'),
    }, content_type='multipart/form-data')
    url = response.get_json()['url']
    filename = url.rsplit('/', 1)[-1]

    assert os.path.isfile(os.path.join(tmp_data_dir, 'public', 'uploads', filename))
    served = admin_client.get(url)
    assert served.status_code == 200
    assert served.data == PNG_BYTES


def test_relative_upload_folder_resolved_at_startup(app_factory, tmp_data_dir, monkeypatch):
    monkeypatch.chdir(tmp_data_dir)
    app = app_factory(UPLOAD_FOLDER='media')

    assert app.config['UPLOAD_FOLDER'] == os.path.join(os.getcwd(), 'media')
    assert os.path.isdir(app.config['UPLOAD_FOLDER'])


def test_upload_without_file_is_400(admin_client):
    response = admin_client.post('/api/upload', data={}, content_type='multipart/form-data')
    assert response.status_code == 400


def test_upload_pdf_is_415_and_nothing_written(admin_client, app):
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(b'%PDF-1.4 fake'), 'report.pdf', 'application/pdf'),
    }, content_type='multipart/form-data')

    assert response.status_code == 415
    assert response.get_json()['success'] is False
    assert _uploads(app) == []


def test_upload_11_mib_is_413(admin_client, app):
    payload = b'\x00' * (11 * 1024 * 1024)
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(payload), 'huge.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 413
    assert _uploads(app) == []


def test_upload_io_error_is_500(admin_client, monkeypatch):
    def failing_save(file_bytes, filename):
        raise OSError('disk full')

    monkeypatch.setattr(storage, '_save_locally', failing_save)

    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(PNG_BYTES), 'photo.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 500
    assert 'disk full' not in response.get_data(as_text=True)


def test_list_uploads(admin_client):
    for _ in range(2):
        admin_client.post('/api/upload', data={
            'file': (io.BytesIO(PNG_BYTES), 'photo.png', 'image/png'),
        }, content_type='multipart/form-data')

    response = admin_client.get('/api/upload')

    assert response.status_code == 200
    files = response.get_json()['files']
    assert len(files) == 2
    assert all(f['url'].startswith('/uploads/') for f in files)
