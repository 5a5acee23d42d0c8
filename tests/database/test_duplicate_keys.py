from __future__ import annotations

from datetime import datetime

import mysql.connector
import pytest

from coopvote.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from coopvote.core.exceptions import ConflictError
from coopvote.database.mysql_base import is_duplicate_key
from coopvote.voting.mysql_vote_repository import MySQLVoteRepository
from fakes import FakeConnectionFactory, duplicate_key_error

NOW = datetime(2025, 3, 15, 10, 0)


def test_is_duplicate_key():
    assert is_duplicate_key(duplicate_key_error("uq_votes_member_position")) is True
    assert is_duplicate_key(mysql.connector.IntegrityError(msg="fk", errno=1452)) is False


def test_attendance_insert_duplicate_becomes_conflict():
    factory = FakeConnectionFactory(error=duplicate_key_error("uq_attendance_member"))
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(ConflictError) as exc:
        repo.create_attendance(member_id=1, code="CODE1234", confirmed_at=NOW)

    assert str(exc.value) == "Este miembro ya confirmó su asistencia"
    assert factory.rolled_back is True
    assert factory.committed is False


def test_attendance_insert_other_integrity_errors_propagate():
    repo = MySQLAttendanceRepository(FakeConnectionFactory(error=mysql.connector.IntegrityError(msg="fk", errno=1452)))
    with pytest.raises(mysql.connector.IntegrityError):
        repo.create_attendance(member_id=99, code="CODE1234", confirmed_at=NOW)


def test_vote_insert_duplicate_becomes_conflict():
    factory = FakeConnectionFactory(error=duplicate_key_error("uq_votes_member_position"))
    repo = MySQLVoteRepository(factory)

    with pytest.raises(ConflictError):
        repo.create_votes(member_id=1, selections=[(10, 1), (20, 2)], voted_at=NOW)
    assert factory.rolled_back is True
