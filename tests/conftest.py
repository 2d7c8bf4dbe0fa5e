import pytest

from app import create_app
from fakes import TEST_CONFIG
from models import db


@pytest.fixture()
def app():
    """
    App wired to an in-memory SQLite database with background jobs off.

    No application context is held open here: each test client request gets
    its own, so Flask-Login state does not leak between clients.
    """
    app = create_app(dict(TEST_CONFIG))
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture()
def store(app):
    return app.extensions['task_store']


def _register(client, username, password='secret-pass'):
    resp = client.post('/api/register', json={'username': username, 'password': password})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture()
def client(app):
    """Test client logged in as 'alice'."""
    c = app.test_client()
    c.user = _register(c, 'alice')
    return c


@pytest.fixture()
def other_client(app):
    """Second, independent user ('bob')."""
    c = app.test_client()
    c.user = _register(c, 'bob')
    return c
