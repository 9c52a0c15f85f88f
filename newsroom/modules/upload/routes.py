"""
Upload API Routes
=================

POST /api/upload   - store one image from the multipart "file" field (admin only)
GET  /api/upload   - list uploaded images (admin only)
GET  /uploads/<fn> - serve an uploaded file
"""

import logging
from flask import request, jsonify, send_from_directory

from . import upload_bp, uploads_public_bp
from ..auth.credentials import admin_required, get_admin_claims
from ...core.logging_service import LoggingService
from ...core.storage import UploadError, save_upload, list_uploads, get_upload_folder

logger = logging.getLogger(__name__)


@upload_bp.route('', methods=['POST'])
@admin_required
def upload_file():
    """Upload an image and return its public URL"""
    try:
        file = request.files.get('file')
        url = save_upload(file)
    except UploadError as e:
        logger.info("Upload rejected: %s", e.message)
        return jsonify({'success': False, 'error': e.message}), e.status_code
    except Exception as e:
        LoggingService.log_error_with_traceback('upload', e)
        return jsonify({'success': False, 'error': 'Internal Server Error'}), 500

    claims = get_admin_claims()
    LoggingService.log_user_action('upload', 'file uploaded', user_id=claims.id if claims else None,
                                   details={'url': url})
    return jsonify({'success': True, 'url': url})


@upload_bp.route('', methods=['GET'])
@admin_required
def get_uploads():
    """List uploaded images, newest first"""
    return jsonify({'success': True, 'files': list_uploads()})


@uploads_public_bp.route('/<path:filename>')
def serve_upload(filename):
    return send_from_directory(get_upload_folder(), filename)
