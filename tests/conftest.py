from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from coopvote.main import create_app
from fakes import FakeDatabase, FakeMailer, add_admin, make_container


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 15, 9, 30)


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def container(db, mailer):
    return make_container(db, mailer)


@pytest.fixture
def app(container):
    app = create_app(container=container, settings_module="coopvote.settings.testing")
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(db):
    return add_admin(db, "admin", generate_password_hash("Admin123!"))


@pytest.fixture
def admin_client(client, admin):
    with client.session_transaction() as sess:
        sess["admin_id"] = admin.admin_id
        sess["username"] = admin.username
        sess["name"] = admin.name
        sess["role"] = admin.role.value
    return client
