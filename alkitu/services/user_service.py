"""
Alkitu Site - User Service
Login identities, admin records and JWT issuing
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

import jwt
from flask import current_app

from alkitu.database import db
from alkitu.errors import BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from alkitu.models.db_models import AdminRole, DBAdminUser, DBAuthUser, utcnow

logger = logging.getLogger(__name__)


class UserService:
    """Authentication and admin user management"""

    # ==========================================
    # Tokens
    # ==========================================

    def generate_token(self, user: DBAuthUser) -> str:
        """Generate JWT token for user"""
        payload = {
            'user_id': user.id,
            'email': user.email,
            'exp': datetime.now(timezone.utc) + current_app.config['JWT_ACCESS_TOKEN_EXPIRES']
        }
        return jwt.encode(payload, current_app.config['JWT_SECRET_KEY'], algorithm='HS256')

    def resolve_token(self, token: str) -> DBAuthUser:
        """Bearer token -> active auth user; UnauthorizedError otherwise"""
        try:
            payload = jwt.decode(token, current_app.config['JWT_SECRET_KEY'], algorithms=['HS256'])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError('Token has expired')
        except jwt.InvalidTokenError:
            raise UnauthorizedError('Invalid token')

        user = db.session.get(DBAuthUser, payload.get('user_id'))
        if user is None:
            raise UnauthorizedError('User not found')
        if not user.is_active:
            raise UnauthorizedError('User is deactivated')
        return user

    def authenticate(self, email: str, password: str) -> DBAuthUser:
        user = DBAuthUser.query.filter_by(email=email.strip().lower()).first()
        if user is None or not user.verify_password(password):
            logger.warning(f"Failed login attempt for {email}")
            raise UnauthorizedError('Invalid email or password', code='INVALID_CREDENTIALS')
        if not user.is_active:
            raise UnauthorizedError('User is deactivated')
        return user

    # ==========================================
    # Admin records
    # ==========================================

    def get_admin(self, user_id: str) -> Optional[DBAdminUser]:
        return db.session.get(DBAdminUser, user_id)

    def create_admin(self, email: str, password: str, full_name: str = None,
                     role: str = AdminRole.ADMIN) -> DBAdminUser:
        """Create the auth identity and its admin record together"""
        email = email.strip().lower()
        if DBAuthUser.query.filter_by(email=email).first() is not None:
            raise ConflictError(f'User with email {email} already exists', code='USER_EXISTS')
        if role not in AdminRole.ALL:
            raise BadRequestError(f'Unknown role: {role}')

        auth_user = DBAuthUser(email=email, password=password)
        admin = DBAdminUser(id=auth_user.id, email=email, full_name=full_name, role=role)
        db.session.add(auth_user)
        db.session.add(admin)
        db.session.commit()
        logger.info(f"Admin user created: {email} ({role})")
        return admin

    def list_admins(self, page: int = 1, per_page: int = 10, sort_order: str = 'desc',
                    email: str = None) -> Dict:
        query = DBAdminUser.query
        if email:
            query = query.filter(DBAdminUser.email.ilike(f'%{email}%'))
        total = query.count()
        order = DBAdminUser.created_at.asc() if sort_order == 'asc' else DBAdminUser.created_at.desc()
        rows = query.order_by(order).offset((page - 1) * per_page).limit(per_page).all()
        return {
            'users': [u.to_dict() for u in rows],
            'total': total,
            'page': page,
            'perPage': per_page
        }

    def get_admin_or_404(self, user_id: str) -> DBAdminUser:
        admin = self.get_admin(user_id)
        if admin is None:
            raise NotFoundError('User not found')
        return admin

    def update_admin(self, user_id: str, caller: DBAdminUser, values: Dict) -> DBAdminUser:
        """Update name/email; a password may only be changed on the caller's own account"""
        if values.get('password') and user_id != caller.id:
            raise BadRequestError('You can only change your own password')
        admin = self.get_admin_or_404(user_id)

        if values.get('full_name') is not None:
            admin.full_name = values['full_name']
        if values.get('email') is not None:
            email = values['email'].strip().lower()
            clash = DBAuthUser.query.filter(DBAuthUser.email == email, DBAuthUser.id != admin.id).first()
            if clash is not None:
                raise ConflictError(f'User with email {email} already exists', code='USER_EXISTS')
            admin.email = email
            auth_user = db.session.get(DBAuthUser, admin.id)
            if auth_user is not None:
                auth_user.email = email
        if values.get('password'):
            auth_user = db.session.get(DBAuthUser, admin.id)
            if auth_user is None:
                raise NotFoundError('User not found')
            auth_user.set_password(values['password'])
            logger.info(f"Password changed for {admin.email}")

        db.session.commit()
        return admin

    def touch_last_login(self, user_id: str) -> bool:
        admin = self.get_admin(user_id)
        if admin is None:
            return False
        admin.last_login_at = utcnow()
        db.session.commit()
        return True


user_service = UserService()
