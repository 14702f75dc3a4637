import json

import pytest

from app import create_app
from database import db
from workflow_client import WorkflowClient

BASE_URL = 'http://engine.test'


def webhook(path):
    return f"{BASE_URL}/webhook{path}"


class FakeResponse:
    def __init__(self, status_code=200, body=''):
        self.status_code = status_code
        self.text = body if isinstance(body, str) else json.dumps(body)

    @property
    def ok(self):
        return self.status_code < 400


class FakeSession:
    """Stands in for requests.Session; replies are looked up by exact URL.

    A reply may be a FakeResponse, an exception to raise, or a callable
    taking (url, payload) and returning either.
    """

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.default = FakeResponse(200, {'success': True})

    def respond(self, url, response):
        self.responses[url] = response

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append((url, json))
        response = self.responses.get(url, self.default)
        if callable(response) and not isinstance(response, FakeResponse):
            response = response(url, json)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def urls(self):
        return [url for url, _ in self.calls]

    def payloads_for(self, url):
        return [payload for called, payload in self.calls if called == url]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def workflow(session):
    return WorkflowClient(base_url=BASE_URL, timeout=5, session=session)


@pytest.fixture
def app(workflow):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SQLALCHEMY_ENGINE_OPTIONS': {},
        'ADMIN_USERNAME': 'admin',
        'ADMIN_PASSWORD': 'secret',
        'WORKFLOW_CLIENT': workflow,
    })
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    response = client.post('/login', json={'username': 'admin', 'password': 'secret'})
    assert response.status_code == 200
    return client
