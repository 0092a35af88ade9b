"""
Tests for member notifications
"""
from notifications import notify


class TestNotify:
    """Test notification creation"""

    def test_guest_is_skipped(self, db):
        assert notify(db, None, 'hello') is None
        assert notify(db, 'not-an-id', 'hello') is None
        assert db['notification'].count_documents({}) == 0

    def test_member_gets_unread_notification(self, db, member_user):
        notify(db, member_user['id'], 'hello', 'warning')
        note = db['notification'].find_one({'user_id': member_user['id']})
        assert note['is_read'] is False
        assert note['type'] == 'warning'


class TestNotificationRoutes:
    """Test listing and marking notifications read"""

    def test_list_own_only(self, client, db, auth_headers, member_user, admin_user):
        notify(db, member_user['id'], 'mine')
        notify(db, admin_user['id'], 'not mine')
        notes = client.get('/api/notifications', headers=auth_headers).json()
        assert [n['message'] for n in notes] == ['mine']

    def test_mark_read(self, client, db, auth_headers, member_user):
        note_id = notify(db, member_user['id'], 'hello')
        response = client.put(f'/api/notifications/{note_id}/read', headers=auth_headers)
        assert response.status_code == 200
        assert response.json()['is_read'] is True

    def test_other_users_notification_is_forbidden(self, client, db, admin_user, auth_headers):
        note_id = notify(db, admin_user['id'], 'private')
        response = client.put(f'/api/notifications/{note_id}/read', headers=auth_headers)
        assert response.status_code == 403
        assert db['notification'].find_one({'message': 'private'})['is_read'] is False

    def test_mark_all_read(self, client, db, auth_headers, member_user):
        for message in ('one', 'two'):
            notify(db, member_user['id'], message)
        response = client.put('/api/notifications/read-all', headers=auth_headers)
        assert response.json() == {'updated': 2}
        assert db['notification'].count_documents({'is_read': False}) == 0

    def test_requires_login(self, client):
        assert client.get('/api/notifications').status_code == 401
