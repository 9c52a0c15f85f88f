from flask import render_template, request, jsonify

from . import auth_bp
from .credentials import (
    check_credentials, sign_in_admin, sign_out_admin, get_admin_claims
)
from ...core.logging_service import LoggingService


@auth_bp.route('/signin', methods=['GET'])
def signin_page():
    """Sign-in page route"""
    return render_template('auth/signin.html')


@auth_bp.route('/signin', methods=['POST'])
def signin():
    """Check admin credentials and start an admin session"""
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
    else:
        data = request.form
    username = str(data.get('username') or '').strip()
    password = str(data.get('password') or '')

    if not username or not password:
        return jsonify({'success': False, 'error': 'Username and password are required'}), 400

    if not check_credentials(username, password):
        LoggingService.log_security_event('Failed admin sign-in', {'username': username})
        return jsonify({'success': False, 'error': 'Invalid credentials'}), 401

    claims = sign_in_admin()
    LoggingService.log_user_action('auth', 'admin sign-in', user_id=claims.id)
    return jsonify({'success': True, 'user': claims.to_dict()})


@auth_bp.route('/signout', methods=['POST'])
def signout():
    claims = get_admin_claims()
    sign_out_admin()
    if claims:
        LoggingService.log_user_action('auth', 'admin sign-out', user_id=claims.id)
    return jsonify({'success': True})


@auth_bp.route('/session', methods=['GET'])
def current_session():
    """Current admin claims, if any"""
    claims = get_admin_claims()
    if claims is None:
        return jsonify({'authenticated': False})
    return jsonify({'authenticated': True, 'user': claims.to_dict()})
