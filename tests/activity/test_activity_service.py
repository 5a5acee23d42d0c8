from __future__ import annotations

from datetime import datetime

import mysql.connector
import pytest
from werkzeug.security import generate_password_hash

from coopvote.core.exceptions import ValidationError
from fakes import add_admin


def _log(container, action, **kwargs):
    return container.activity_service.record(admin_id=kwargs.pop("admin_id", None), action=action, **kwargs)


def test_record_serializes_details(container, db):
    admin = add_admin(db, "admin", generate_password_hash("x"))
    _log(container, "update_config", admin_id=admin.admin_id, entity="config", entity_id="ASSEMBLY_NAME",
         details={"nuevo": "Asamblea 2025", "at": datetime(2025, 3, 15, 10, 0)})

    log = db.logs[0].to_dict()
    assert log["details"] == {"nuevo": "Asamblea 2025", "at": "2025-03-15 10:00:00"}
    assert log["admin"] == {"name": "Admin", "username": "admin"}
    assert log["timestamp"] == "2025-03-15T10:00:00"


def test_record_swallows_database_errors(container, monkeypatch):
    def broken(**_):
        raise mysql.connector.errors.DatabaseError("gone")

    monkeypatch.setattr(container.activity_repo, "create_log", broken)
    assert _log(container, "login_failed") is None


def test_list_logs_filters_and_paginates(container):
    for action in ("login_success", "export_attendance", "login_success"):
        _log(container, action, entity="admin")

    data = container.activity_service.list_logs(action="login_success", limit="1", offset="1")

    assert data["total"] == 2
    assert len(data["logs"]) == 1
    assert data["limit"] == 1
    assert data["offset"] == 1
    assert data["filters"] == {"actions": ["export_attendance", "login_success"], "entities": ["admin"]}


def test_list_logs_caps_limit(container):
    assert container.activity_service.list_logs(limit=10_000)["limit"] == 500
    assert container.activity_service.list_logs(limit=0)["limit"] == 1
    with pytest.raises(ValidationError):
        container.activity_service.list_logs(offset=-1)


def test_list_logs_date_to_covers_whole_day(container, db):
    _log(container, "login_success")
    container.activity_repo.now = datetime(2025, 3, 16, 9, 0)
    _log(container, "logout")

    data = container.activity_service.list_logs(date_from="2025-03-15", date_to="2025-03-15")
    assert [log["action"] for log in data["logs"]] == ["login_success"]
