"""
Alkitu Site - Contact Form Tests
"""
import pytest

from alkitu.database import db
from alkitu.models.db_models import DBContactSubmission, DBEmailSettings
from alkitu.services.contact_service import contact_service

VALID_FORM = {
    'name': 'Ana Pérez',
    'email': 'ana@cliente.com',
    'subject': 'Nuevo sitio web',
    'message': 'Quisiera una cotización para un sitio web.',
    'locale': 'es'
}


@pytest.fixture
def email_settings(app):
    settings = DBEmailSettings(
        from_email='noreply@alkitu.com',
        to_emails=['team@alkitu.com'],
        cc_emails=['sales@alkitu.com'],
        bcc_emails=[]
    )
    db.session.add(settings)
    db.session.commit()
    return settings


class TestContactSubmit:

    def test_submission_stored_and_notified(self, client, outbox, email_settings):
        resp = client.post('/api/contact/submit', json=VALID_FORM, headers={'Referer': 'http://testserver/es/contact'})
        body = resp.get_json()

        assert resp.status_code == 201
        assert body['message'] == 'Formulario enviado exitosamente. Te contactaremos pronto.'
        assert body['data']['status'] == 'pending'
        assert body['data']['notifications'] == {'admin': 'sent', 'confirmation': 'sent'}
        assert resp.headers['X-RateLimit-Limit'] == '3'
        assert resp.headers['X-RateLimit-Remaining'] == '2'

        submission = DBContactSubmission.query.one()
        assert submission.form_url == 'http://testserver/es/contact'

        team_mail = outbox.to('team@alkitu.com')[0]
        assert team_mail['cc'] == ['sales@alkitu.com']
        assert team_mail['reply_to'] == 'ana@cliente.com'
        assert team_mail['subject'] == 'Nuevo mensaje de contacto: Nuevo sitio web'
        assert len(outbox.to('ana@cliente.com')) == 1

    def test_english_message(self, client, outbox):
        resp = client.post('/api/contact/submit', json=dict(VALID_FORM, locale='en'))

        assert resp.get_json()['message'] == 'Form submitted successfully. We will contact you soon.'

    def test_without_settings_notifies_sender_address(self, client, outbox, app):
        client.post('/api/contact/submit', json=VALID_FORM)

        assert len(outbox.to(app.config['EMAIL_FROM'])) == 1

    def test_validation_errors(self, client, outbox):
        resp = client.post('/api/contact/submit', json=dict(VALID_FORM, name='A', message='short'))
        error = resp.get_json()['error']

        assert resp.status_code == 400
        assert error['message'] == 'Datos inválidos / Invalid data'
        assert sorted(d['field'] for d in error['details']) == ['message', 'name']
        assert DBContactSubmission.query.count() == 0
        assert outbox.messages == []

    def test_bad_email(self, client, outbox):
        resp = client.post('/api/contact/submit', json=dict(VALID_FORM, email='not-an-email'))

        assert resp.status_code == 400

    def test_email_failure_still_stores(self, client, outbox):
        outbox.fail = True

        resp = client.post('/api/contact/submit', json=VALID_FORM)

        assert resp.status_code == 201
        assert resp.get_json()['data']['notifications'] == {'admin': 'failed', 'confirmation': 'failed'}
        assert DBContactSubmission.query.count() == 1

    def test_unconfigured_transport_is_skipped(self, client, outbox):
        outbox.configured = False

        resp = client.post('/api/contact/submit', json=VALID_FORM)

        assert resp.get_json()['data']['notifications']['admin'] == 'skipped'

    def test_fourth_request_is_rate_limited(self, client, outbox):
        for _ in range(3):
            assert client.post('/api/contact/submit', json=VALID_FORM).status_code == 201

        resp = client.post('/api/contact/submit', json=VALID_FORM)
        error = resp.get_json()['error']

        assert resp.status_code == 429
        assert error['code'] == 'RATE_LIMIT_EXCEEDED'
        assert error['details']['retryAfter'] > 0
        assert 'Retry-After' in resp.headers
        assert resp.headers['X-RateLimit-Remaining'] == '0'
        assert DBContactSubmission.query.count() == 3

    def test_limit_is_per_client(self, client, outbox):
        for _ in range(3):
            client.post('/api/contact/submit', json=VALID_FORM)

        resp = client.post('/api/contact/submit', json=VALID_FORM, headers={'X-Forwarded-For': '203.0.113.9'})

        assert resp.status_code == 201


class TestContactAdmin:

    @pytest.fixture
    def submission(self, client, outbox):
        client.post('/api/contact/submit', json=VALID_FORM)
        return DBContactSubmission.query.one()

    def test_list_and_filter(self, client, admin_headers, submission):
        resp = client.get('/api/admin/contact-submissions?status=pending&search=ana', headers=admin_headers)
        data = resp.get_json()['data']

        assert resp.status_code == 200
        assert data['pagination']['total'] == 1
        assert data['submissions'][0]['email'] == 'ana@cliente.com'

    def test_invalid_status_filter(self, client, admin_headers):
        resp = client.get('/api/admin/contact-submissions?status=bogus', headers=admin_headers)

        assert resp.status_code == 400

    def test_update_status(self, client, admin_headers, submission):
        resp = client.patch(f'/api/admin/contact-submissions/{submission.id}', headers=admin_headers,
                            json={'status': 'replied'})

        assert resp.status_code == 200
        assert resp.get_json()['data']['submission']['status'] == 'replied'

    def test_update_rejects_unknown_status(self, client, admin_headers, submission):
        resp = client.patch(f'/api/admin/contact-submissions/{submission.id}', headers=admin_headers,
                            json={'status': 'spam'})

        assert resp.status_code == 400

    def test_delete(self, client, admin_headers, submission):
        resp = client.delete(f'/api/admin/contact-submissions/{submission.id}', headers=admin_headers)

        assert resp.status_code == 200
        assert DBContactSubmission.query.count() == 0
        assert client.delete(f'/api/admin/contact-submissions/{submission.id}',
                             headers=admin_headers).status_code == 404


class TestEmailSettings:

    def test_empty_settings(self, client, admin_headers):
        resp = client.get('/api/admin/email-settings', headers=admin_headers)

        assert resp.get_json()['data'] == {'settings': None}

    def test_put_then_get(self, client, admin_headers):
        payload = {'from_email': 'noreply@alkitu.com', 'to_emails': ['team@alkitu.com']}

        assert client.put('/api/admin/email-settings', headers=admin_headers, json=payload).status_code == 200
        settings = client.get('/api/admin/email-settings', headers=admin_headers).get_json()['data']['settings']

        assert settings['to_emails'] == ['team@alkitu.com']
        assert settings['cc_emails'] == []
        assert DBEmailSettings.query.count() == 1

    def test_requires_a_recipient(self, client, admin_headers):
        resp = client.put('/api/admin/email-settings', headers=admin_headers,
                          json={'from_email': 'noreply@alkitu.com', 'to_emails': []})

        assert resp.status_code == 400


class TestFindTestSubmissions:

    def test_matches_patterns(self, client, outbox):
        client.post('/api/contact/submit', json=VALID_FORM)
        client.post('/api/contact/submit', json=dict(VALID_FORM, email='qa@example.com', subject='Prueba de envío'))

        matches = contact_service.find_test_submissions(['prueba', '@example.'])

        assert [s.email for s in matches] == ['qa@example.com']
        assert contact_service.find_test_submissions([]) == []
