#!/usr/bin/env python3
"""
Alkitu Site - Create Admin User
Creates the login identity, the admin_users row and an empty profile.

Usage:
    python scripts/create_admin.py

Or with environment variables:
    ADMIN_EMAIL=admin@alkitu.com ADMIN_PASSWORD=securepass123 ADMIN_ROLE=super_admin \
        python scripts/create_admin.py
"""
import os
import sys
import secrets
import string

# Add parent directory to path so we can import the app
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from alkitu import create_app
from alkitu.errors import ApiError
from alkitu.models.db_models import AdminRole, DBAdminUser
from alkitu.services.profile_service import profile_service
from alkitu.services.user_service import user_service
from alkitu.utils import generate_slug


def generate_password(length=16):
    """Generate a secure random password"""
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def create_admin_user():
    app = create_app()

    with app.app_context():
        existing = DBAdminUser.query.first()
        if existing:
            print(f"\n⚠ An admin user already exists: {existing.email}")
            if not os.environ.get('ADMIN_EMAIL'):
                response = input("Create another admin? (y/N): ")
                if response.lower() != 'y':
                    print("Aborted.")
                    return 1

        email = os.environ.get('ADMIN_EMAIL')
        password = os.environ.get('ADMIN_PASSWORD')
        role = os.environ.get('ADMIN_ROLE', AdminRole.SUPER_ADMIN if not existing else AdminRole.ADMIN)
        full_name = os.environ.get('ADMIN_NAME')

        if not email:
            print("\n" + "=" * 50)
            print("  ALKITU - Admin User Setup")
            print("=" * 50 + "\n")
            email = input("Admin email: ").strip()
            full_name = full_name or input("Full name (optional): ").strip() or None

        if not email or '@' not in email:
            print("Error: Valid email required")
            return 1

        if not password:
            password = generate_password()
            print(f"\n🔐 Generated password: {password}")
            print("   (Save this somewhere safe!)\n")

        if len(password) < 8:
            print("Error: Password must be at least 8 characters")
            return 1

        try:
            admin = user_service.create_admin(email, password, full_name=full_name, role=role)
            username = generate_slug(email.split('@')[0]).replace('-', '_')[:30] or 'admin'
            profile = profile_service.create_profile(admin, username, display_name=full_name)
        except ApiError as e:
            print(f"Error: {e.message}")
            return 1

        print("\n" + "=" * 50)
        print("  ✅ ADMIN USER CREATED SUCCESSFULLY")
        print("=" * 50)
        print(f"\n  Email:    {admin.email}")
        print(f"  Role:     {admin.role}")
        print(f"  Profile:  /es/profile/{profile.username}")
        print("=" * 50 + "\n")
        return 0


if __name__ == '__main__':
    sys.exit(create_admin_user())
