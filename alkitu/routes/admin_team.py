"""
Alkitu Site - Admin Team Routes
Admin users, their profiles and profile photos, and the analytics summary
"""
from flask import Blueprint, request

from alkitu.errors import BadRequestError, api_success
from alkitu.routes.auth import admin_required
from alkitu.schemas import validate_payload
from alkitu.schemas.profiles import PhotoDelete, UpdateProfile, UpdateUsername
from alkitu.schemas.users import UpdateAdminUser
from alkitu.services.analytics_service import analytics_service
from alkitu.services.profile_service import profile_service
from alkitu.services.user_service import user_service
from alkitu.utils import get_pagination_params, safe_int

admin_profiles_bp = Blueprint('admin_profiles', __name__)
admin_users_bp = Blueprint('admin_users', __name__)
admin_misc_bp = Blueprint('admin_misc', __name__)


# ==========================================
# Profiles
# ==========================================

@admin_profiles_bp.route('', methods=['GET'])
@admin_required
def list_profiles(current_admin):
    page, per_page, _ = get_pagination_params(request, default_limit=10, limit_param='perPage')
    result = profile_service.list_profiles(
        page=page,
        per_page=per_page,
        search=request.args.get('search'),
        department=request.args.get('department'),
        role=request.args.get('role')
    )
    return api_success(result, 'Profiles retrieved successfully')


@admin_profiles_bp.route('/upload-photo', methods=['POST'])
@admin_required
def upload_photo(current_admin):
    """Multipart upload, field name 'file'"""
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        raise BadRequestError('No file provided', code='INVALID_FILE')
    stored = profile_service.upload_photo(current_admin, upload.filename, upload.mimetype, upload.read())
    return api_success(stored, 'Photo uploaded successfully', status=201)


@admin_profiles_bp.route('/delete-photo', methods=['DELETE'])
@admin_required
def delete_photo(current_admin):
    data = validate_payload(PhotoDelete, request.get_json(silent=True))
    cleared = profile_service.delete_photo(current_admin, data.url)
    return api_success({'url': data.url, 'profilesUpdated': cleared}, 'Photo deleted successfully')


@admin_profiles_bp.route('/<profile_id>', methods=['GET'])
@admin_required
def get_profile(current_admin, profile_id):
    profile = profile_service.get_for_admin(profile_id, current_admin, action='view')
    return api_success({'profile': profile.to_dict()}, 'Profile retrieved successfully')


@admin_profiles_bp.route('/<profile_id>', methods=['PATCH'])
@admin_required
def update_profile(current_admin, profile_id):
    """Owner or super_admin; only fields present in the body change"""
    data = validate_payload(UpdateProfile, request.get_json(silent=True))
    profile = profile_service.update(profile_id, current_admin, data.model_dump(mode='json', exclude_unset=True))
    return api_success({'profile': profile.to_dict()}, 'Profile updated successfully')


@admin_profiles_bp.route('/<profile_id>/username', methods=['PATCH'])
@admin_required
def update_username(current_admin, profile_id):
    data = validate_payload(UpdateUsername, request.get_json(silent=True))
    profile = profile_service.update_username(profile_id, current_admin, data.username)
    return api_success({'profile': profile.to_dict()}, 'Username updated successfully')


# ==========================================
# Admin users
# ==========================================

@admin_users_bp.route('', methods=['GET'])
@admin_required
def list_users(current_admin):
    page, per_page, _ = get_pagination_params(request, default_limit=10, limit_param='perPage')
    result = user_service.list_admins(
        page=page,
        per_page=per_page,
        sort_order='asc' if request.args.get('sortOrder') == 'asc' else 'desc',
        email=request.args.get('email')
    )
    return api_success(result, 'Users fetched successfully')


@admin_users_bp.route('/<user_id>', methods=['GET'])
@admin_required
def get_user(current_admin, user_id):
    admin = user_service.get_admin_or_404(user_id)
    return api_success({'user': admin.to_dict()}, 'User fetched successfully')


@admin_users_bp.route('/<user_id>', methods=['PATCH'])
@admin_required
def update_user(current_admin, user_id):
    data = validate_payload(UpdateAdminUser, request.get_json(silent=True))
    admin = user_service.update_admin(user_id, current_admin, data.model_dump(exclude_unset=True))
    return api_success({'user': admin.to_dict()}, 'User updated successfully')


# ==========================================
# Session bookkeeping & analytics
# ==========================================

@admin_misc_bp.route('/update-last-login', methods=['POST'])
@admin_required
def update_last_login(current_admin):
    updated = user_service.touch_last_login(current_admin.id)
    return api_success({'updated': updated}, 'Last login updated successfully')


@admin_misc_bp.route('/analytics/summary', methods=['GET'])
@admin_required
def analytics_summary(current_admin):
    days = safe_int(request.args.get('days'), 30, min_val=1, max_val=365)
    return api_success(analytics_service.summary(days=days), 'Analytics summary retrieved successfully')
