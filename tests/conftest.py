"""
Alkitu Site - Test Fixtures
"""
import pytest

from alkitu import create_app
from alkitu.database import db
from alkitu.models.db_models import AdminRole, DBAuthUser, DBCategory
from alkitu.services.email_service import EmailDeliveryError, email_service
from alkitu.services.profile_service import profile_service
from alkitu.services.user_service import user_service


class Outbox:
    """Records outgoing emails instead of sending them"""

    def __init__(self):
        self.messages = []
        self.fail = False
        self.configured = True

    def send_email(self, to, subject, html, cc=None, bcc=None, reply_to=None, from_email=None):
        if self.fail:
            raise EmailDeliveryError('SendGrid error 500')
        if not self.configured:
            return False
        self.messages.append({
            'to': list(to), 'subject': subject, 'html': html,
            'cc': list(cc or []), 'bcc': list(bcc or []),
            'reply_to': reply_to, 'from_email': from_email
        })
        return True

    def to(self, address):
        return [m for m in self.messages if address in m['to']]


@pytest.fixture
def app(tmp_path):
    app = create_app('testing')
    app.config['UPLOAD_DIR'] = str(tmp_path / 'uploads')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def outbox(monkeypatch):
    box = Outbox()
    monkeypatch.setattr(email_service, 'send_email', box.send_email)
    return box


def make_admin(email='admin@alkitu.com', password='secret123', role=AdminRole.ADMIN,
               username=None, full_name='Admin User'):
    admin = user_service.create_admin(email, password, full_name=full_name, role=role)
    if username:
        profile_service.create_profile(admin, username, display_name=full_name)
    return admin


def auth_header(user_id):
    user = db.session.get(DBAuthUser, user_id)
    return {'Authorization': f'Bearer {user_service.generate_token(user)}'}


@pytest.fixture
def admin(app):
    return make_admin(username='admin_user')


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin.id)


@pytest.fixture
def super_admin(app):
    return make_admin('boss@alkitu.com', role=AdminRole.SUPER_ADMIN, username='boss', full_name='Boss')


@pytest.fixture
def super_headers(super_admin):
    return auth_header(super_admin.id)


@pytest.fixture
def plain_user_headers(app):
    """Valid login identity without an admin_users row"""
    user = DBAuthUser(email='visitor@alkitu.com', password='secret123')
    db.session.add(user)
    db.session.commit()
    return auth_header(user.id)


@pytest.fixture
def category(app):
    category = DBCategory(name_en='Web Design', name_es='Diseño Web', slug='web-design')
    db.session.add(category)
    db.session.commit()
    return category
