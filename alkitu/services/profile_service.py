"""
Alkitu Site - Profile Service
Admin user profiles, profile photos and the public profile view
"""
import logging
import re
from typing import Dict, Optional

from flask import current_app
from sqlalchemy import or_

from alkitu.database import db
from alkitu.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from alkitu.models.db_models import DBAdminUser, DBUserProfile
from alkitu.services.storage_service import storage_service

logger = logging.getLogger(__name__)

PHOTO_CONTENT_TYPE = re.compile(r'^image/(jpeg|jpg|png|webp|gif)$')

# Columns that cannot be stored as NULL
NON_NULL_FIELDS = {
    'remote_work', 'timezone', 'language_preference', 'theme_preference',
    'profile_color', 'profile_visibility', 'show_activity_status',
    'urls', 'roles', 'phone_numbers', 'emails',
    'hard_skills', 'soft_skills', 'languages', 'addresses',
}


class ProfileService:
    """Profiles belong to admin users; owners and super admins may edit them"""

    def list_profiles(self, page: int = 1, per_page: int = 10, search: str = None,
                      department: str = None, role: str = None) -> Dict:
        query = DBUserProfile.query
        if search:
            pattern = f'%{search}%'
            query = query.filter(or_(
                DBUserProfile.username.ilike(pattern),
                DBUserProfile.display_name.ilike(pattern),
                DBUserProfile.first_name.ilike(pattern),
                DBUserProfile.last_name.ilike(pattern),
            ))
        if department:
            query = query.filter(DBUserProfile.department.ilike(f'%{department}%'))
        query = query.order_by(DBUserProfile.created_at.desc())

        if role:
            # roles is a JSON array; matched here to stay portable across databases
            needle = role.lower()
            rows = [p for p in query.all()
                    if any(needle in (item.get('role') or '').lower() for item in (p.roles or []))]
            total = len(rows)
            rows = rows[(page - 1) * per_page:page * per_page]
        else:
            total = query.count()
            rows = query.offset((page - 1) * per_page).limit(per_page).all()

        return {
            'profiles': [p.to_dict() for p in rows],
            'pagination': {
                'total': total,
                'page': page,
                'perPage': per_page,
                'totalPages': (total + per_page - 1) // per_page
            }
        }

    def get_for_admin(self, profile_id: str, admin: DBAdminUser, action: str = 'view') -> DBUserProfile:
        profile = db.session.get(DBUserProfile, profile_id)
        if profile is None:
            raise NotFoundError('Profile not found')
        if profile.user_id != admin.id and not admin.is_super_admin:
            raise ForbiddenError(f'You can only {action} your own profile')
        return profile

    def get_by_user(self, user_id: str) -> Optional[DBUserProfile]:
        return DBUserProfile.query.filter_by(user_id=user_id).first()

    def create_profile(self, admin: DBAdminUser, username: str, display_name: str = None) -> DBUserProfile:
        if DBUserProfile.query.filter_by(username=username).first() is not None:
            raise ConflictError('Username is already taken', code='USERNAME_TAKEN')
        profile = DBUserProfile(user_id=admin.id, username=username, display_name=display_name)
        db.session.add(profile)
        db.session.commit()
        logger.info(f"Profile created for {admin.email}: {username}")
        return profile

    def update(self, profile_id: str, admin: DBAdminUser, values: Dict) -> DBUserProfile:
        profile = self.get_for_admin(profile_id, admin, action='update')
        for field, value in values.items():
            if value is None and field in NON_NULL_FIELDS:
                continue
            setattr(profile, field, value)
        db.session.commit()
        logger.info(f"Profile updated: {profile.username}")
        return profile

    def update_username(self, profile_id: str, admin: DBAdminUser, username: str) -> DBUserProfile:
        profile = self.get_for_admin(profile_id, admin, action='update')
        if username != profile.username:
            taken = DBUserProfile.query.filter(
                DBUserProfile.username == username, DBUserProfile.id != profile.id
            ).first()
            if taken is not None:
                raise ConflictError('Username is already taken', code='USERNAME_TAKEN')
            profile.username = username
            db.session.commit()
            logger.info(f"Profile {profile.id} username changed to {username}")
        return profile

    # ==========================================
    # Photos
    # ==========================================

    def upload_photo(self, admin: DBAdminUser, filename: str, content_type: str, data: bytes) -> Dict:
        if not PHOTO_CONTENT_TYPE.match(content_type or ''):
            raise BadRequestError('Only image files are allowed (JPEG, PNG, WebP, GIF)', code='INVALID_FILE')
        max_bytes = current_app.config.get('PROFILE_PHOTO_MAX_BYTES', 10 * 1024 * 1024)
        if not data:
            raise BadRequestError('File size must be positive', code='INVALID_FILE')
        if len(data) > max_bytes:
            raise BadRequestError('File size must be less than 10MB', code='FILE_TOO_LARGE')

        bucket = current_app.config.get('PROFILE_PHOTO_BUCKET', 'profile-photos')
        stored = storage_service.upload(bucket, admin.id, filename, data)
        return {'url': stored['url'], 'pathname': stored['pathname'], 'contentType': content_type}

    def delete_photo(self, admin: DBAdminUser, url: str) -> int:
        """Remove the stored object best-effort and clear every profile that points at it"""
        bucket = current_app.config.get('PROFILE_PHOTO_BUCKET', 'profile-photos')
        path = storage_service.path_from_url(bucket, url)

        if not admin.is_super_admin:
            own = self.get_by_user(admin.id)
            if own is None:
                raise NotFoundError('Profile not found')
            # Uploads are named <owner id>_..., see StorageService.upload
            if own.photo_url != url or not (path or '').startswith(f'{admin.id}_'):
                raise ForbiddenError('You can only delete your own photos')

        if path:
            storage_service.delete(bucket, path)
        else:
            logger.warning(f"Photo URL is not in the {bucket} bucket: {url}")

        cleared = DBUserProfile.query.filter_by(photo_url=url).update({'photo_url': None})
        db.session.commit()
        return cleared

    # ==========================================
    # Public
    # ==========================================

    def get_public(self, username: str) -> Dict:
        profile = DBUserProfile.query.filter_by(username=username).first()
        if profile is None:
            raise NotFoundError(f'Profile with username "{username}" not found')
        return profile.to_public_dict()


profile_service = ProfileService()
