"""
Alkitu Site - Model Tests
"""
from alkitu.database import check_connection, db
from alkitu.models.db_models import (
    AdminRole, DBAdminUser, DBAuthUser, DBCategory, DBProject, DBProjectCategory,
    DBUserProfile, new_token, utcnow
)


class TestAuthUserModel:
    """Test DBAuthUser"""

    def test_email_is_normalized(self, app):
        user = DBAuthUser(email='  Ana@Alkitu.COM ', password='password123')

        assert user.email == 'ana@alkitu.com'
        assert user.is_active == True

    def test_password_verification(self, app):
        user = DBAuthUser(email='ana@alkitu.com', password='password123')

        assert user.verify_password('password123') == True
        assert user.verify_password('wrongpassword') == False

    def test_to_dict_hides_password(self, app):
        data = DBAuthUser(email='ana@alkitu.com', password='password123').to_dict()

        assert data['email'] == 'ana@alkitu.com'
        assert 'password_hash' not in data


class TestAdminUserModel:

    def test_super_admin_flag(self, app):
        assert DBAdminUser(id='x', email='a@b.com', role=AdminRole.SUPER_ADMIN).is_super_admin == True
        assert DBAdminUser(id='y', email='c@d.com', role=AdminRole.ADMIN).is_super_admin == False


class TestProfileModel:

    def test_public_dict_respects_flags(self, app):
        profile = DBUserProfile(
            username='ana',
            bio='Visible',
            bio_is_public=True,
            location='Madrid',
            location_is_public=False,
            urls=[
                {'urlName': 'Site', 'url': 'https://ana.dev', 'display_order': 0, 'is_public': True},
                {'urlName': 'Private', 'url': 'https://x.dev', 'display_order': 1, 'is_public': False},
            ]
        )
        data = profile.to_public_dict()

        assert data['bio'] == 'Visible'
        assert data['location'] is None
        assert [u['urlName'] for u in data['urls']] == ['Site']
        assert data['profile_color'] == '#00BB31'
        assert data['emails'] == []


class TestProjectModel:

    def test_categories_and_localized_fields(self, app):
        category = DBCategory(name_en='Branding', name_es='Marca', slug='branding')
        project = DBProject(
            slug='logo', title_en='Logo', title_es='Logotipo',
            description_en='A logo', description_es='Un logotipo',
            image='https://cdn.alkitu.com/logo.png'
        )
        project.category_links = [DBProjectCategory(category=category)]
        db.session.add(project)
        db.session.commit()

        data = project.to_dict()

        assert project.localized('es', 'title') == 'Logotipo'
        assert project.localized('en', 'title') == 'Logo'
        assert data['categories'] == [category.to_summary()]
        assert data['gallery'] == []
        assert category.to_dict(include_count=True)['project_count'] == 1


class TestHelpers:

    def test_new_token_length(self):
        token = new_token()

        assert len(token) == 64
        assert token != new_token()

    def test_utcnow_is_naive(self):
        assert utcnow().tzinfo is None


class TestDatabase:

    def test_check_connection(self, app):
        assert check_connection() == (True, 'connected')
