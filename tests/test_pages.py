"""
Alkitu Site - Public Page Tests
"""
from alkitu.models.db_models import DBNewsletterSubscriber, SubscriberStatus


def set_cookies(resp):
    return {header.split('=', 1)[0]: header for header in resp.headers.getlist('Set-Cookie')}


class TestLocaleRouting:

    def test_root_defaults_to_spanish(self, client):
        resp = client.get('/')

        assert resp.status_code == 302
        assert resp.headers['Location'].endswith('/es/')

    def test_root_uses_accept_language(self, client):
        resp = client.get('/', headers={'Accept-Language': 'en-US,en;q=0.9'})

        assert resp.headers['Location'].endswith('/en/')

    def test_cookie_beats_accept_language(self, client):
        client.set_cookie('locale', 'es')

        resp = client.get('/', headers={'Accept-Language': 'en'})

        assert resp.headers['Location'].endswith('/es/')

    def test_home_renders_in_locale(self, client):
        es = client.get('/es/')
        en = client.get('/en/')

        assert es.status_code == 200
        assert '<html lang="es"' in es.get_data(as_text=True)
        assert 'Alkitu | Estudio digital' in es.get_data(as_text=True)
        assert 'Alkitu | Digital studio' in en.get_data(as_text=True)

    def test_locale_cookie_is_remembered(self, client):
        resp = client.get('/en/projects')
        cookie = set_cookies(resp)['locale']

        assert 'locale=en' in cookie
        assert 'SameSite=Lax' in cookie

    def test_unsupported_locale_is_404_page(self, client):
        resp = client.get('/fr/')
        text = resp.get_data(as_text=True)

        assert resp.status_code == 404
        assert resp.mimetype == 'text/html'
        assert 'Página no encontrada' in text
        assert 'locale' not in set_cookies(resp)

    def test_unknown_api_path_is_json(self, client):
        resp = client.get('/api/nothing-here')

        assert resp.status_code == 404
        assert resp.get_json()['error']['code'] == 'NOT_FOUND'


class TestVisitorCookies:

    def test_new_visitor_gets_fingerprint(self, client):
        cookie = set_cookies(client.get('/es/'))['session_fingerprint']

        assert 'HttpOnly' in cookie
        assert 'SameSite=Strict' in cookie
        assert 'Max-Age=3600' in cookie

    def test_fingerprint_is_not_reissued(self, client):
        client.set_cookie('session_fingerprint', 'abc123')

        resp = client.get('/es/')

        assert 'session_fingerprint' not in set_cookies(resp)

    def test_theme_switch(self, client):
        resp = client.post('/en/theme', data={'theme': 'dark'},
                           headers={'Referer': 'http://localhost/en/projects'})

        assert resp.status_code == 303
        assert resp.headers['Location'] == 'http://localhost/en/projects'
        assert 'theme=dark' in set_cookies(resp)['theme']

        page = client.get('/en/').get_data(as_text=True)
        assert 'data-theme="dark"' in page

    def test_theme_ignores_foreign_referrer(self, client):
        resp = client.post('/es/theme', json={'theme': 'light'}, headers={'Referer': 'https://evil.example/'})

        assert resp.headers['Location'].endswith('/es/')

    def test_invalid_theme_is_400(self, client):
        resp = client.post('/es/theme', data={'theme': 'neon'})

        assert resp.status_code == 400


class TestContentPages:

    def test_project_pages(self, client, admin_headers, category):
        client.post('/api/admin/projects', headers=admin_headers, json={
            'slug': 'tienda-online',
            'title_en': 'Online Store', 'title_es': 'Tienda Online',
            'description_en': 'Shop', 'description_es': 'Tienda',
            'image': 'https://cdn.alkitu.com/store.png',
            'category_ids': [category.id]
        })

        assert 'Tienda Online' in client.get('/es/projects').get_data(as_text=True)
        assert 'Online Store' in client.get('/en/projects/tienda-online').get_data(as_text=True)
        assert client.get('/en/projects/missing').status_code == 404

    def test_profile_page(self, client, admin):
        assert client.get('/es/profile/admin_user').status_code == 200
        assert client.get('/es/profile/nobody').status_code == 404

    def test_contact_page(self, client):
        assert client.get('/en/contact').status_code == 200


class TestNewsletterPages:

    def test_verify_link(self, client, outbox):
        client.post('/api/newsletter/subscribe', json={'email': 'lector@correo.com', 'locale': 'es'})
        token = DBNewsletterSubscriber.query.one().verification_token

        resp = client.get(f'/es/newsletter/verify?token={token}')

        assert resp.status_code == 200
        assert 'Suscripción confirmada' in resp.get_data(as_text=True)
        assert DBNewsletterSubscriber.query.one().status == SubscriberStatus.ACTIVE

    def test_verify_bad_link(self, client):
        resp = client.get('/en/newsletter/verify?token=nope')

        assert resp.status_code == 400
        assert 'We could not confirm your subscription' in resp.get_data(as_text=True)

    def test_unsubscribe_confirm_then_post(self, client, outbox):
        client.post('/api/newsletter/subscribe', json={'email': 'reader@mail.com', 'locale': 'en'})
        token = DBNewsletterSubscriber.query.one().unsubscribe_token

        confirm = client.get(f'/en/newsletter/unsubscribe?token={token}')
        assert confirm.status_code == 200
        assert DBNewsletterSubscriber.query.one().status == SubscriberStatus.PENDING

        done = client.post('/en/newsletter/unsubscribe', data={'token': token})
        assert 'Sorry to see you go' in done.get_data(as_text=True)

        again = client.post('/en/newsletter/unsubscribe', data={'token': token})
        assert again.status_code == 404
        assert 'You have already unsubscribed' in again.get_data(as_text=True)


class TestTranslationsApi:

    def test_dictionary(self, client):
        resp = client.get('/api/translations?lang=en')

        assert resp.status_code == 200
        assert resp.get_json()['data']['translations']['nav']['projects'] == 'Projects'

    def test_invalid_lang(self, client):
        resp = client.get('/api/translations?lang=fr')

        assert resp.status_code == 400
        assert resp.get_json()['error']['message'] == 'Invalid language parameter. Must be one of: en, es'


class TestServiceEndpoints:

    def test_health(self, client):
        data = client.get('/health').get_json()

        assert data['status'] == 'healthy'
        assert data['database'] == 'connected'

    def test_api_info(self, client):
        data = client.get('/api').get_json()

        assert data['name'] == 'Alkitu API'
        assert data['locales'] == ['es', 'en']
