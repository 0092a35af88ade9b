"""
Tests for site content, committee and gallery
"""
import routers.content as content_router
from routers.content import patch_section


class TestSiteContent:
    """Test section patching and replacing"""

    def test_missing_section_is_empty(self, client):
        response = client.get('/api/content/site/home')
        assert response.status_code == 200
        assert response.json() == {}

    def test_put_merges_into_existing_section(self, client, admin_headers):
        client.put('/api/content/site/home', headers=admin_headers, json={'hero_title': 'Welcome', 'tagline': 'Hi'})
        response = client.put('/api/content/site/home', headers=admin_headers, json={'tagline': 'Hello'})
        assert response.json() == {'hero_title': 'Welcome', 'tagline': 'Hello'}
        assert client.get('/api/content/site/home').json() == {'hero_title': 'Welcome', 'tagline': 'Hello'}

    def test_replace_drops_missing_keys(self, client, admin_headers):
        client.put('/api/content/site/about', headers=admin_headers, json={'mission': 'Help', 'vision': 'Grow'})
        client.put('/api/content/site/about/replace', headers=admin_headers, json={'mission': 'Serve'})
        assert client.get('/api/content/site/about').json() == {'mission': 'Serve'}

    def test_sections_are_independent(self, client, admin_headers, db):
        client.put('/api/content/site/home', headers=admin_headers, json={'a': 1})
        client.put('/api/content/site/about', headers=admin_headers, json={'b': 2})
        assert db['sitecontent'].count_documents({}) == 2
        assert client.get('/api/content/site/home').json() == {'a': 1}

    def test_member_cannot_edit(self, client, auth_headers):
        response = client.put('/api/content/site/home', headers=auth_headers, json={'a': 1})
        assert response.status_code == 403


class TestCommittee:
    """Test committee member management"""

    def test_listed_by_order(self, client, admin_headers):
        client.post('/api/content/committee', headers=admin_headers,
                    json={'name': 'Rahim Uddin', 'role_key': 'secretary', 'order': 2})
        client.post('/api/content/committee', headers=admin_headers,
                    json={'name': 'Abdullah Al Mamun', 'role_key': 'president', 'order': 1})
        names = [m['name'] for m in client.get('/api/content/committee').json()]
        assert names == ['Abdullah Al Mamun', 'Rahim Uddin']

    def test_update_and_delete(self, client, admin_headers):
        member = client.post('/api/content/committee', headers=admin_headers,
                             json={'name': 'Rahim', 'role_key': 'member'}).json()
        updated = client.put(f"/api/content/committee/{member['id']}", headers=admin_headers,
                             json={'role_key': 'treasurer'}).json()
        assert updated['role_key'] == 'treasurer'
        assert updated['name'] == 'Rahim'

        assert client.delete(f"/api/content/committee/{member['id']}", headers=admin_headers).status_code == 200
        response = client.delete(f"/api/content/committee/{member['id']}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {'message': 'Member not found'}


class TestGallery:
    """Test gallery items"""

    def test_newest_first(self, client, admin_headers):
        client.post('/api/content/gallery', headers=admin_headers, json={
            'title': 'Old', 'image_url': '/uploads/a.jpg', 'date': '2023-01-01T00:00:00'})
        client.post('/api/content/gallery', headers=admin_headers, json={
            'title': 'New', 'image_url': '/uploads/b.jpg', 'date': '2024-06-01T00:00:00'})
        assert [g['title'] for g in client.get('/api/content/gallery').json()] == ['New', 'Old']

    def test_delete_unknown_item(self, client, admin_headers):
        response = client.delete('/api/content/gallery/' + 'a' * 24, headers=admin_headers)
        assert response.status_code == 404


class TestSectionPatch:
    """Test that patches touch only the keys they name"""

    def test_patch_keeps_keys_written_meanwhile(self, db):
        patch_section(db, 'home', {'hero_title': 'Welcome'})
        # another writer adds a key between this caller's read and write
        db['sitecontent'].update_one({'section': 'home'}, {'$set': {'data.tagline': 'Together'}})

        result = patch_section(db, 'home', {'hero_title': 'Salaam'})
        assert result == {'hero_title': 'Salaam', 'tagline': 'Together'}

    def test_patch_does_not_read_before_writing(self, db, monkeypatch):
        patch_section(db, 'home', {'a': 1})
        monkeypatch.setattr(content_router, 'get_section', lambda database, section: {})
        patch_section(db, 'home', {'b': 2})
        assert db['sitecontent'].find_one({'section': 'home'})['data'] == {'a': 1, 'b': 2}

    def test_dotted_key_rejected(self, client, admin_headers):
        response = client.put('/api/content/site/home', headers=admin_headers, json={'a.b': 1})
        assert response.status_code == 400
