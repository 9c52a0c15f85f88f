"""
Admin Credentials
=================

Single-admin credential check. ADMIN_USERNAME / ADMIN_PASSWORD win when both
are set, otherwise {"username", "password"} is read from the credentials file.
The file is plaintext and not hashed.

Signed-in admins carry a SessionClaims record in the Flask session. Every
admin check goes through SessionClaims.from_session(), which returns None for
anything missing or malformed so callers fail closed.
"""

import hmac
import json
import logging
from dataclasses import dataclass, asdict
from functools import wraps

from flask import session, jsonify

from ...core.config import get_config_value
from ...core.logging_service import LoggingService

logger = logging.getLogger(__name__)

SESSION_KEY = 'newsroom_admin'
ADMIN_ROLE = 'ADMIN'


@dataclass(frozen=True)
class SessionClaims:
    id: str
    email: str
    name: str
    role: str

    @property
    def is_admin(self):
        return self.role == ADMIN_ROLE

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_session(cls):
        """Validated claims from the current session, or None"""
        raw = session.get(SESSION_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            claims = cls(**{field: raw[field] for field in ('id', 'email', 'name', 'role')})
        except KeyError:
            return None
        if not all(isinstance(value, str) for value in asdict(claims).values()):
            return None
        return claims


ADMIN_CLAIMS = SessionClaims(id='admin-user', email='admin@local', name='Admin', role=ADMIN_ROLE)


def load_admin_credentials():
    """Return (username, password) or None when nothing is configured"""
    username = get_config_value('ADMIN_USERNAME')
    password = get_config_value('ADMIN_PASSWORD')
    if username and password:
        return username, password

    cred_path = get_config_value('ADMIN_CREDENTIALS_FILE')
    try:
        with open(cred_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return data['username'], data['password']
    except (OSError, TypeError, ValueError, KeyError) as e:
        logger.error("Failed to read admin credentials file and no environment variables set: %s", e)
        return None


def check_credentials(username, password):
    """True when username/password match the configured admin"""
    if not username or not password:
        return False

    credentials = load_admin_credentials()
    if not credentials:
        return False

    expected_username, expected_password = credentials
    return (hmac.compare_digest(str(username), str(expected_username))
            and hmac.compare_digest(str(password), str(expected_password)))


def sign_in_admin():
    session[SESSION_KEY] = ADMIN_CLAIMS.to_dict()
    session.permanent = True
    return ADMIN_CLAIMS


def sign_out_admin():
    session.pop(SESSION_KEY, None)


def get_admin_claims():
    """Claims for a signed-in admin, or None"""
    claims = SessionClaims.from_session()
    if claims is None or not claims.is_admin:
        return None
    return claims


def admin_required(f):
    """Decorator for JSON endpoints: 401 unless an admin is signed in"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_admin_claims() is None:
            LoggingService.log_security_event('Unauthorized admin request')
            return jsonify({'success': False, 'error': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return decorated_function
