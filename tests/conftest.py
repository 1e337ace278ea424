"""
Shared fixtures: a fresh app, stores and storage folders per test
"""
import json
import os
from io import BytesIO

import pytest

from verivault import create_app
from verivault.stores import Stores


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    application = create_app('testing', stores=Stores())
    application.config.update(
        UPLOAD_FOLDER=str(tmp_path / 'uploads'),
        REPORTS_PATH=str(tmp_path / 'reports'),
    )
    yield application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def stores(app):
    return app.extensions['verivault.stores']


@pytest.fixture
def upload_dir(app):
    return app.config['UPLOAD_FOLDER']


@pytest.fixture
def reports_dir(app):
    return app.config['REPORTS_PATH']


def login(client, username, password):
    response = client.post('/api/auth/login', json={'username': username, 'password': password})
    assert response.status_code == 200
    return response.get_json()['token']


@pytest.fixture
def admin_headers(client):
    return {'Authorization': f"Bearer {login(client, 'admin', 'password')}"}


@pytest.fixture
def officer_headers(client):
    return {'Authorization': f"Bearer {login(client, 'officer', 'officer123')}"}


def verify(client, user_id=1, pin='1234'):
    """Fresh single-use verificationData from /verify-pin"""
    response = client.post('/api/auth/verify-pin', json={'userId': user_id, 'pin': pin})
    assert response.status_code == 200
    return response.get_json()['verificationData']


@pytest.fixture
def verification(client):
    """verificationData issued to the seeded admin by /verify-pin"""
    return verify(client)


def file_part(content=b'hello', filename='note.txt', mimetype='text/plain'):
    return (BytesIO(content), filename, mimetype)


def multipart(form_data=None, verification_data=None, files=None, **extra):
    """Multipart body the way the web client sends submissions"""
    data = dict(extra)
    if form_data is not None:
        data['formData'] = form_data if isinstance(form_data, str) else json.dumps(form_data)
    if verification_data is not None:
        data['verificationData'] = (
            verification_data if isinstance(verification_data, str) else json.dumps(verification_data)
        )
    if files:
        data['attachments'] = files
    return data


def listdir(path):
    try:
        return os.listdir(path)
    except FileNotFoundError:
        return []
