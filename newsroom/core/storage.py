"""
Storage Utility
===============

Image uploads saved to the public uploads folder.
Validates the declared MIME type and size, generates a unique
timestamp-based filename and returns the public URL.
"""

import os
import re
import secrets
import time
from .config import get_config_value

ALLOWED_TYPES = {
    'image/jpeg',
    'image/png',
    'image/webp',
    'image/avif',
    'image/gif',
    'image/svg+xml',
}

EXTENSIONS_BY_TYPE = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/webp': '.webp',
    'image/avif': '.avif',
    'image/gif': '.gif',
    'image/svg+xml': '.svg',
}

DEFAULT_MAX_BYTES = 10 * 1024 * 1024

_BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'
_SAFE_EXTENSION = re.compile(r'^\.[A-Za-z0-9]+$')


class UploadError(Exception):
    """Upload rejected; status_code is the HTTP status to report"""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def get_upload_folder():
    """Absolute uploads directory; relative settings resolve against the working directory"""
    folder = get_config_value('UPLOAD_FOLDER') or os.path.join('public', 'uploads')
    return os.path.abspath(folder)


def _url_prefix():
    return get_config_value('UPLOAD_URL_PREFIX', '/uploads').rstrip('/')


def _max_bytes():
    return int(get_config_value('MAX_UPLOAD_BYTES', DEFAULT_MAX_BYTES))


def _base36_token(bits=64):
    """Random lowercase base36 string"""
    value = secrets.randbits(bits)
    chars = []
    while value:
        value, rem = divmod(value, 36)
        chars.append(_BASE36[rem])
    return ''.join(reversed(chars)) or '0'


def extension_for(filename, mimetype=None):
    """Extension from the original filename, else from the MIME type, else ''"""
    if filename and '.' in filename:
        ext = filename[filename.rindex('.'):]
        # Anything that is not a plain ".abc" suffix could carry path separators
        if _SAFE_EXTENSION.match(ext):
            return ext
    return EXTENSIONS_BY_TYPE.get(mimetype or '', '')


def generate_filename(filename, mimetype=None):
    """Build "<epoch millis>-<base36 token><ext>" for a new upload"""
    millis = int(time.time() * 1000)
    return f"{millis}-{_base36_token()}{extension_for(filename, mimetype)}"


def validate_upload(file):
    """Check an uploaded FileStorage and return its bytes.

    Raises UploadError with 400 (no file), 415 (declared type not allowed)
    or 413 (too large). A missing or empty declared type is let through.
    """
    if file is None or file.filename == '':
        raise UploadError('No file provided', 400)

    mimetype = file.mimetype
    if mimetype and mimetype not in ALLOWED_TYPES:
        raise UploadError('Unsupported file type', 415)

    file_bytes = file.read()
    max_bytes = _max_bytes()
    if len(file_bytes) > max_bytes:
        raise UploadError(f"File too large (max {max_bytes // (1024 * 1024)}MB)", 413)

    return file_bytes


def save_upload(file):
    """Validate and store an uploaded file, returning its public URL"""
    file_bytes = validate_upload(file)
    filename = generate_filename(file.filename, file.mimetype)
    return _save_locally(file_bytes, filename)


def _save_locally(file_bytes, filename):
    """Save to the uploads folder"""
    upload_dir = get_upload_folder()
    os.makedirs(upload_dir, exist_ok=True)
    filepath = os.path.join(upload_dir, filename)
    with open(filepath, 'wb') as f:
        f.write(file_bytes)
    return f"{_url_prefix()}/{filename}"


def list_uploads():
    """List uploaded image files.

    Returns list of {url, filename} dicts, newest first.
    """
    folder = get_upload_folder()
    if not os.path.isdir(folder):
        return []

    allowed = set(EXTENSIONS_BY_TYPE.values()) | {'.jpeg'}
    prefix = _url_prefix()
    images = []
    for filename in os.listdir(folder):
        ext = os.path.splitext(filename)[1].lower()
        if ext in allowed:
            images.append({
                'url': f'{prefix}/{filename}',
                'filename': filename,
            })

    images.sort(
        key=lambda img: os.path.getmtime(os.path.join(folder, img['filename'])),
        reverse=True,
    )
    return images
