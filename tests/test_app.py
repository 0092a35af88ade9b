"""
Tests for app-level behaviour: health, error mapping and request ids
"""
import logging
import os

from fastapi.testclient import TestClient
from starlette.routing import Mount

import database
from config import settings
from main import app


class TestHealth:
    """Test root and health endpoints"""

    def test_root(self, client):
        assert client.get('/').json()['status'] == 'ok'

    def test_health_reports_database(self, client, db):
        db['event'].insert_one({'title': 'x'})
        data = client.get('/api/health').json()
        assert data['backend'] == 'running'
        assert data['database'] == 'connected'
        assert 'event' in data['collections']

    def test_missing_database_answers_503(self, monkeypatch):
        monkeypatch.setattr(database, 'db', None)
        response = TestClient(app).get('/api/events')
        assert response.status_code == 503
        assert response.json() == {'message': 'Database connection is not available'}


class TestRequestIds:
    """Test the request logging middleware headers"""

    def test_request_id_generated(self, client):
        response = client.get('/api/events')
        assert response.headers['X-Request-ID']
        assert response.headers['X-Response-Time'].endswith('ms')

    def test_request_id_propagated(self, client):
        response = client.get('/api/events', headers={'X-Request-ID': 'abc123'})
        assert response.headers['X-Request-ID'] == 'abc123'


class TestErrorBodies:
    """Test that errors share the {message} shape"""

    def test_validation_error_names_field(self, client):
        response = client.post('/api/auth/login', json={'phone': '017'})
        assert response.status_code == 400
        assert 'password' in response.json()['message']

    def test_bad_object_id(self, client, admin_headers):
        response = client.put('/api/events/123/status', headers=admin_headers, json={'status': 'completed'})
        assert response.status_code == 400
        assert response.json() == {'message': 'Invalid ID'}


class TestRequestLogging:
    """Test what the request log records"""

    def _request_record(self, caplog, path):
        return next(r for r in caplog.records if getattr(r, 'http_path', None) == path)

    def test_authenticated_request_logs_user_id(self, client, caplog, member_user, auth_headers):
        with caplog.at_level(logging.INFO, logger='portal'):
            client.get('/api/auth/me', headers=auth_headers)
        assert self._request_record(caplog, '/api/auth/me').user_id == member_user['id']

    def test_guest_request_has_no_user_id(self, client, caplog):
        with caplog.at_level(logging.INFO, logger='portal'):
            client.get('/api/events/upcoming')
        assert self._request_record(caplog, '/api/events/upcoming').user_id in (None, '-')


class TestUploadMount:
    """Test the static upload mount"""

    def test_upload_dir_exists_at_mount(self):
        mount = next(r for r in app.routes if isinstance(r, Mount) and r.name == 'uploads')
        assert mount.app.directory == settings.UPLOAD_DIR
        assert os.path.isdir(settings.UPLOAD_DIR)
