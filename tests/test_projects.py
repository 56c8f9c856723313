"""
Alkitu Site - Project and Category Tests
"""
import pytest

from alkitu.database import db
from alkitu.models.db_models import DBCategory, DBProject, DBProjectCategory


def project_payload(category_ids, **overrides):
    payload = {
        'slug': 'tienda-online',
        'title_en': 'Online Store',
        'title_es': 'Tienda Online',
        'description_en': 'An e-commerce site',
        'description_es': 'Un sitio de comercio electrónico',
        'image': 'https://cdn.alkitu.com/store.png',
        'gallery': ['https://cdn.alkitu.com/store-1.png'],
        'tags': ['Flask', 'Stripe'],
        'urls': [{'name': 'Website', 'url': 'https://store.example.com'}],
        'display_order': 1,
        'category_ids': category_ids,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def branding(app):
    category = DBCategory(name_en='Branding', name_es='Marca', slug='branding')
    db.session.add(category)
    db.session.commit()
    return category


class TestAdminProjects:

    def test_create_project(self, client, admin_headers, category):
        resp = client.post('/api/admin/projects', headers=admin_headers, json=project_payload([category.id]))
        body = resp.get_json()

        assert resp.status_code == 201
        assert body['message'] == 'Project created successfully'
        assert body['data']['project']['slug'] == 'tienda-online'
        assert [c['slug'] for c in body['data']['project']['categories']] == ['web-design']

    def test_create_requires_a_category(self, client, admin_headers):
        resp = client.post('/api/admin/projects', headers=admin_headers, json=project_payload([]))

        assert resp.status_code == 400
        assert resp.get_json()['error']['details'][0]['field'] == 'category_ids'

    def test_create_with_unknown_category(self, client, admin_headers):
        resp = client.post('/api/admin/projects', headers=admin_headers,
                           json=project_payload(['0b0c5a7e-1111-4c4c-9a9a-000000000000']))

        assert resp.status_code == 400
        assert resp.get_json()['error']['code'] == 'INVALID_CATEGORY'
        assert DBProject.query.count() == 0

    def test_duplicate_slug_is_409(self, client, admin_headers, category):
        client.post('/api/admin/projects', headers=admin_headers, json=project_payload([category.id]))
        resp = client.post('/api/admin/projects', headers=admin_headers, json=project_payload([category.id]))

        assert resp.status_code == 409
        assert resp.get_json()['error']['code'] == 'DUPLICATE_SLUG'

    def test_invalid_url_rejected(self, client, admin_headers, category):
        resp = client.post('/api/admin/projects', headers=admin_headers,
                           json=project_payload([category.id], image='not-a-url'))

        assert resp.status_code == 400

    def test_non_uuid_id_is_400(self, client, admin_headers):
        resp = client.get('/api/admin/projects/abc', headers=admin_headers)

        assert resp.status_code == 400
        assert resp.get_json()['error']['code'] == 'INVALID_ID'

    def test_missing_project_is_404(self, client, admin_headers):
        resp = client.get('/api/admin/projects/0b0c5a7e-1111-4c4c-9a9a-000000000000', headers=admin_headers)

        assert resp.status_code == 404

    def test_patch_replaces_categories(self, client, admin_headers, category, branding):
        created = client.post('/api/admin/projects', headers=admin_headers,
                              json=project_payload([category.id])).get_json()['data']['project']

        resp = client.patch(f"/api/admin/projects/{created['id']}", headers=admin_headers,
                            json={'title_en': 'Shop', 'category_ids': [branding.id]})
        project = resp.get_json()['data']['project']

        assert resp.status_code == 200
        assert project['title_en'] == 'Shop'
        assert project['title_es'] == 'Tienda Online'
        assert [c['slug'] for c in project['categories']] == ['branding']
        assert DBProjectCategory.query.count() == 1

    def test_delete_project(self, client, admin_headers, category):
        created = client.post('/api/admin/projects', headers=admin_headers,
                              json=project_payload([category.id])).get_json()['data']['project']

        resp = client.delete(f"/api/admin/projects/{created['id']}", headers=admin_headers)

        assert resp.status_code == 200
        assert resp.get_json()['data'] == {'id': created['id'], 'slug': 'tienda-online'}
        assert DBProject.query.count() == 0
        assert DBProjectCategory.query.count() == 0

    def test_list_filters_and_sorts(self, client, admin_headers, category):
        client.post('/api/admin/projects', headers=admin_headers, json=project_payload([category.id]))
        client.post('/api/admin/projects', headers=admin_headers,
                    json=project_payload([category.id], slug='blog', title_en='Blog', is_active=False))

        resp = client.get('/api/admin/projects?is_active=false', headers=admin_headers)
        assert [p['slug'] for p in resp.get_json()['data']['projects']] == ['blog']

        resp = client.get('/api/admin/projects?sort_by=title_en&sort_order=asc', headers=admin_headers)
        assert [p['slug'] for p in resp.get_json()['data']['projects']] == ['blog', 'tienda-online']

    def test_limit_capped(self, client, admin_headers):
        resp = client.get('/api/admin/projects?limit=500', headers=admin_headers)

        assert resp.status_code == 400


class TestPublicProjects:

    @pytest.fixture(autouse=True)
    def projects(self, client, admin_headers, category, branding):
        client.post('/api/admin/projects', headers=admin_headers,
                    json=project_payload([category.id], display_order=2))
        client.post('/api/admin/projects', headers=admin_headers,
                    json=project_payload([branding.id], slug='logo', title_en='Logo', display_order=1))
        client.post('/api/admin/projects', headers=admin_headers,
                    json=project_payload([branding.id], slug='hidden', is_active=False))

    def test_only_active_in_display_order(self, client):
        resp = client.get('/api/projects')
        data = resp.get_json()['data']

        assert [p['slug'] for p in data['projects']] == ['logo', 'tienda-online']
        assert data['pagination'] == {'total': 2, 'page': 1, 'limit': 20, 'total_pages': 1}

    def test_category_filter(self, client):
        resp = client.get('/api/projects?category_slug=branding')

        assert [p['slug'] for p in resp.get_json()['data']['projects']] == ['logo']

    def test_unknown_category_slug_applies_no_filter(self, client):
        resp = client.get('/api/projects?category_slug=nope')

        assert resp.get_json()['data']['pagination']['total'] == 2

    def test_search(self, client):
        resp = client.get('/api/projects?search=tienda')

        assert [p['slug'] for p in resp.get_json()['data']['projects']] == ['tienda-online']

    def test_inactive_project_is_404(self, client):
        assert client.get('/api/projects/hidden').status_code == 404
        assert client.get('/api/projects/logo').status_code == 200


class TestCategories:

    def test_create_generates_slug(self, client, admin_headers):
        resp = client.post('/api/admin/categories', headers=admin_headers,
                           json={'name_en': 'Mobile Apps & UX', 'name_es': 'Apps Móviles'})

        assert resp.status_code == 201
        assert resp.get_json()['data']['category']['slug'] == 'mobile-apps-ux'

    def test_duplicate_name_names_field(self, client, admin_headers, category):
        resp = client.post('/api/admin/categories', headers=admin_headers,
                           json={'name_en': 'Other', 'name_es': 'Diseño Web'})

        assert resp.status_code == 409
        assert resp.get_json()['error']['code'] == 'DUPLICATE_CATEGORY'
        assert resp.get_json()['error']['details'] == {'field': 'name_es'}

    def test_patch_regenerates_slug(self, client, admin_headers, category):
        resp = client.patch(f'/api/admin/categories/{category.id}', headers=admin_headers,
                            json={'name_en': 'Web Development'})

        assert resp.get_json()['data']['category']['slug'] == 'web-development'

    def test_patch_empty_body_is_400(self, client, admin_headers, category):
        resp = client.patch(f'/api/admin/categories/{category.id}', headers=admin_headers, json={})

        assert resp.status_code == 400
        assert resp.get_json()['error']['message'] == 'No valid fields to update'

    def test_delete_in_use_is_refused(self, client, admin_headers, category):
        client.post('/api/admin/projects', headers=admin_headers, json=project_payload([category.id]))

        resp = client.delete(f'/api/admin/categories/{category.id}', headers=admin_headers)

        assert resp.status_code == 400
        assert resp.get_json()['error']['message'] == 'Cannot delete category. It is used by 1 project(s).'
        assert DBCategory.query.count() == 1

    def test_delete_unused(self, client, admin_headers, category):
        resp = client.delete(f'/api/admin/categories/{category.id}', headers=admin_headers)

        assert resp.status_code == 200
        assert resp.get_json()['data'] == {'id': category.id}

    def test_list_with_counts(self, client, admin_headers, category):
        client.post('/api/admin/projects', headers=admin_headers, json=project_payload([category.id]))

        admin_list = client.get('/api/admin/categories', headers=admin_headers).get_json()['data']['categories']
        public_list = client.get('/api/categories').get_json()['data']['categories']

        assert admin_list[0]['project_count'] == 1
        assert 'project_count' not in public_list[0]
