"""
Newsroom Auth Module

Admin authentication against a single configured credential:
- Credentials from environment variables or admin.credentials.json
- Typed admin claims stored in the signed session
- admin_required decorator for admin JSON endpoints
"""

from flask import Blueprint

auth_bp = Blueprint(
    'auth',
    __name__,
    url_prefix='/auth',
    template_folder='templates'
)

from . import routes  # noqa: E402,F401
from .credentials import SessionClaims, admin_required, get_admin_claims, check_credentials  # noqa: E402

__all__ = ['auth_bp', 'SessionClaims', 'admin_required', 'get_admin_claims', 'check_credentials']
