"""
Alkitu Site - Auth and Admin User Tests
"""
from alkitu.database import db
from alkitu.models.db_models import DBAdminUser, DBAuthUser

from tests.conftest import auth_header

SOME_ID = '0b0c5a7e-1111-4c4c-9a9a-000000000000'


class TestLogin:

    def test_login_returns_token(self, client, admin):
        resp = client.post('/api/auth/login', json={'email': 'ADMIN@alkitu.com', 'password': 'secret123'})
        body = resp.get_json()

        assert resp.status_code == 200
        assert body['success'] == True
        assert body['data']['is_admin'] == True
        assert body['data']['token']

    def test_login_rejects_bad_password(self, client, admin):
        resp = client.post('/api/auth/login', json={'email': 'admin@alkitu.com', 'password': 'nope'})

        assert resp.status_code == 401
        assert resp.get_json()['error']['code'] == 'INVALID_CREDENTIALS'

    def test_login_requires_fields(self, client):
        resp = client.post('/api/auth/login', json={})

        assert resp.status_code == 400
        assert resp.get_json()['error']['code'] == 'VALIDATION_ERROR'

    def test_me(self, client, admin, admin_headers):
        resp = client.get('/api/auth/me', headers=admin_headers)
        data = resp.get_json()['data']

        assert resp.status_code == 200
        assert data['user']['email'] == 'admin@alkitu.com'
        assert data['profile']['username'] == 'admin_user'


class TestAdminGate:
    """Every /api/admin route needs a token and an admin_users row"""

    ADMIN_ROUTES = [
        ('get', '/api/admin/projects'),
        ('get', '/api/admin/categories'),
        ('get', '/api/admin/contact-submissions'),
        ('get', '/api/admin/email-settings'),
        ('get', '/api/admin/newsletter-subscribers'),
        ('get', '/api/admin/profiles'),
        ('get', '/api/admin/users'),
        ('get', '/api/admin/analytics/summary'),
    ]

    MUTATING_ROUTES = [
        ('post', '/api/admin/update-last-login'),
        ('post', '/api/admin/projects'),
        ('put', '/api/admin/email-settings'),
        ('patch', f'/api/admin/categories/{SOME_ID}'),
        ('delete', f'/api/admin/categories/{SOME_ID}'),
        ('delete', f'/api/admin/newsletter-subscribers/{SOME_ID}'),
        ('patch', f'/api/admin/users/{SOME_ID}'),
        ('delete', '/api/admin/profiles/delete-photo'),
    ]

    def test_missing_token_is_401(self, client):
        for method, path in self.ADMIN_ROUTES + self.MUTATING_ROUTES:
            resp = getattr(client, method)(path, json={})
            assert resp.status_code == 401, (method, path)
            assert resp.get_json()['error']['code'] == 'UNAUTHORIZED'

    def test_invalid_token_is_401(self, client):
        resp = client.get('/api/admin/projects', headers={'Authorization': 'Bearer not-a-jwt'})

        assert resp.status_code == 401
        assert resp.get_json()['error']['message'] == 'Invalid token'

    def test_non_admin_is_403(self, client, plain_user_headers):
        for method, path in self.ADMIN_ROUTES + self.MUTATING_ROUTES:
            resp = getattr(client, method)(path, headers=plain_user_headers, json={})
            assert resp.status_code == 403, (method, path)
            assert resp.get_json()['error']['code'] == 'FORBIDDEN'

    def test_admin_is_allowed(self, client, admin_headers):
        for method, path in self.ADMIN_ROUTES:
            resp = getattr(client, method)(path, headers=admin_headers)
            assert resp.status_code == 200, path

    def test_deactivated_user_is_401(self, client, admin, admin_headers):
        db.session.get(DBAuthUser, admin.id).is_active = False
        db.session.commit()

        resp = client.get('/api/admin/users', headers=admin_headers)

        assert resp.status_code == 401


class TestAdminUsers:

    def test_list_users(self, client, admin, super_admin, admin_headers):
        resp = client.get('/api/admin/users?perPage=1&sortOrder=asc', headers=admin_headers)
        data = resp.get_json()['data']

        assert resp.status_code == 200
        assert resp.get_json()['message'] == 'Users fetched successfully'
        assert data['total'] == 2
        assert data['perPage'] == 1
        assert len(data['users']) == 1

    def test_filter_by_email(self, client, admin, super_admin, admin_headers):
        resp = client.get('/api/admin/users?email=boss', headers=admin_headers)

        assert [u['email'] for u in resp.get_json()['data']['users']] == ['boss@alkitu.com']

    def test_get_missing_user(self, client, admin_headers):
        resp = client.get('/api/admin/users/00000000-0000-0000-0000-000000000000', headers=admin_headers)

        assert resp.status_code == 404
        assert resp.get_json()['error']['message'] == 'User not found'

    def test_update_own_password(self, client, admin, admin_headers):
        resp = client.patch(f'/api/admin/users/{admin.id}', headers=admin_headers,
                            json={'full_name': 'New Name', 'password': 'another1'})

        assert resp.status_code == 200
        assert resp.get_json()['data']['user']['full_name'] == 'New Name'
        assert db.session.get(DBAuthUser, admin.id).verify_password('another1') == True

    def test_cannot_change_other_password(self, client, admin, super_admin, admin_headers):
        resp = client.patch(f'/api/admin/users/{super_admin.id}', headers=admin_headers,
                            json={'password': 'another1'})

        assert resp.status_code == 400
        assert resp.get_json()['error']['message'] == 'You can only change your own password'

    def test_short_password_rejected(self, client, admin, admin_headers):
        resp = client.patch(f'/api/admin/users/{admin.id}', headers=admin_headers, json={'password': '123'})

        assert resp.status_code == 400

    def test_update_last_login(self, client, admin, admin_headers):
        resp = client.post('/api/admin/update-last-login', headers=admin_headers)

        assert resp.status_code == 200
        assert resp.get_json()['data'] == {'updated': True}
        assert db.session.get(DBAdminUser, admin.id).last_login_at is not None
