"""
Alkitu Site - Authentication Routes
Login, current identity and the admin gate decorators
"""
from functools import wraps

from flask import Blueprint, request

from alkitu.errors import ForbiddenError, UnauthorizedError, api_success
from alkitu.schemas import validate_payload
from alkitu.schemas.users import LoginRequest
from alkitu.services.profile_service import profile_service
from alkitu.services.user_service import user_service

auth_bp = Blueprint('auth', __name__)


def _read_token():
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer '):
        return auth_header.split(' ', 1)[1].strip()
    # Query param fallback for download links
    return request.args.get('token')


def token_required(f):
    """Decorator to require valid JWT token"""
    @wraps(f)
    def decorated(*args, **kwargs):
        token = _read_token()
        if not token:
            raise UnauthorizedError('Token is missing')
        current_user = user_service.resolve_token(token)
        return f(current_user, *args, **kwargs)

    return decorated


def admin_required(f):
    """Decorator to require a row in admin_users; passes the admin record"""
    @wraps(f)
    @token_required
    def decorated(current_user, *args, **kwargs):
        admin = user_service.get_admin(current_user.id)
        if admin is None:
            raise ForbiddenError('Admin access required')
        return f(admin, *args, **kwargs)

    return decorated


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Admin login

    POST /api/auth/login
    {
        "email": "admin@alkitu.com",
        "password": "password123"
    }
    """
    data = validate_payload(LoginRequest, request.get_json(silent=True),
                            message='Email and password required')
    user = user_service.authenticate(data.email, data.password)
    admin = user_service.get_admin(user.id)
    if admin is not None:
        user_service.touch_last_login(user.id)

    return api_success({
        'token': user_service.generate_token(user),
        'user': user.to_dict(),
        'is_admin': admin is not None,
        'admin': admin.to_dict() if admin else None
    }, 'Login successful')


@auth_bp.route('/me', methods=['GET'])
@token_required
def me(current_user):
    admin = user_service.get_admin(current_user.id)
    profile = profile_service.get_by_user(current_user.id)
    return api_success({
        'user': current_user.to_dict(),
        'is_admin': admin is not None,
        'admin': admin.to_dict() if admin else None,
        'profile': profile.to_dict() if profile else None
    }, 'User retrieved successfully')
