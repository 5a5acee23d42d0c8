"""In-memory repositories backing service and HTTP tests.

Every fake reads and writes a shared ``FakeDatabase`` so joins (has_voted,
vote counts, current holders) behave like the MySQL implementations.
"""
from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

import mysql.connector

from coopvote.activity.model import ActivityLog, LogFilter
from coopvote.admins.model import Admin
from coopvote.app_config.model import ConfigEntry
from coopvote.attendance.model import AttendanceRecord, AttendanceView
from coopvote.candidates.model import Candidate, CandidateView
from coopvote.container import assemble_container
from coopvote.core.enums import AttendanceStatus, CandidateStatus, Council, MemberStatus, Role
from coopvote.core.exceptions import ConflictError
from coopvote.members.model import Member, MemberOverview
from coopvote.notifications.mailer import ConnectionCheck, DeliveryResult
from coopvote.positions.model import Assignment, AssignmentView, Position
from coopvote.voting.model import Vote


class FakeDatabase:
    def __init__(self):
        self.members: Dict[int, Member] = {}
        self.attendance: Dict[int, AttendanceRecord] = {}
        self.positions: Dict[int, Position] = {}
        self.assignments: Dict[int, Assignment] = {}
        self.candidates: Dict[int, Candidate] = {}
        self.votes: Dict[int, Vote] = {}
        self.admins: Dict[int, Admin] = {}
        self.config: Dict[str, ConfigEntry] = {}
        self.logs: List[ActivityLog] = []
        self._counters: Dict[str, itertools.count] = {}

    def next_id(self, table: str) -> int:
        return next(self._counters.setdefault(table, itertools.count(1)))


class InMemoryMembers:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def _overview(self, m: Member) -> MemberOverview:
        return MemberOverview(
            member=m,
            has_attendance=any(a.member_id == m.member_id for a in self._db.attendance.values()),
            has_voted=any(v.member_id == m.member_id for v in self._db.votes.values()),
        )

    def get_by_id(self, member_id: int) -> Optional[Member]:
        return self._db.members.get(int(member_id))

    def find_conflict(self, *, email, cedula, exclude_id=None):
        for m in self._db.members.values():
            if exclude_id is not None and m.member_id == int(exclude_id):
                continue
            if m.email == email or m.cedula == cedula:
                return m
        return None

    def search(self, query: str, *, limit: int):
        q = query.lower()
        rows = [m for m in self._db.members.values() if q in m.name.lower() or query in m.cedula]
        rows.sort(key=lambda m: m.name)
        return [self._overview(m) for m in rows[:limit]]

    def list_overview(self):
        return [self._overview(m) for m in self.list_all()]

    def list_all(self):
        return sorted(self._db.members.values(), key=lambda m: m.name)

    def count_all(self) -> int:
        return len(self._db.members)

    def count_active(self) -> int:
        return sum(1 for m in self._db.members.values() if m.is_active)

    def create_member(self, *, name, email, cedula, phone, status) -> int:
        member_id = self._db.next_id("members")
        self._db.members[member_id] = Member(member_id, name, email, cedula, phone, status)
        return member_id

    def update_member(self, member_id, *, name, email, cedula, phone, status) -> bool:
        m = self._db.members.get(int(member_id))
        if not m:
            return False
        self._db.members[m.member_id] = replace(m, name=name, email=email, cedula=cedula, phone=phone, status=status)
        return True

    def delete_by_id(self, member_id) -> bool:
        return self._db.members.pop(int(member_id), None) is not None


class InMemoryAttendance:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def _find(self, predicate) -> Optional[AttendanceRecord]:
        return next((a for a in self._db.attendance.values() if predicate(a)), None)

    def get_by_id(self, attendance_id):
        return self._db.attendance.get(int(attendance_id))

    def get_by_member(self, member_id):
        return self._find(lambda a: a.member_id == int(member_id))

    def get_by_code(self, code):
        return self._find(lambda a: a.code == code)

    def create_attendance(self, *, member_id, code, confirmed_at) -> int:
        # uq_attendance_member
        if self._find(lambda a: a.member_id == int(member_id)):
            raise ConflictError("Este miembro ya confirmó su asistencia")
        attendance_id = self._db.next_id("attendance")
        self._db.attendance[attendance_id] = AttendanceRecord(
            attendance_id=attendance_id,
            member_id=int(member_id),
            code=code,
            confirmed_at=confirmed_at,
            email_sent=False,
            email_sent_at=None,
            status=AttendanceStatus.ACTIVE,
        )
        return attendance_id

    def _update(self, attendance_id, **changes) -> bool:
        rec = self._db.attendance.get(int(attendance_id))
        if not rec:
            return False
        self._db.attendance[rec.attendance_id] = replace(rec, **changes)
        return True

    def mark_email_sent(self, attendance_id, *, sent_at) -> bool:
        return self._update(attendance_id, email_sent=True, email_sent_at=sent_at)

    def replace_code(self, attendance_id, *, code, status, regenerated_count) -> bool:
        return self._update(attendance_id, code=code, status=status, regenerated_count=regenerated_count)

    def set_status(self, attendance_id, *, status) -> bool:
        return self._update(attendance_id, status=status)

    def delete_for_member(self, member_id) -> bool:
        rec = self.get_by_member(member_id)
        if not rec:
            return False
        del self._db.attendance[rec.attendance_id]
        return True

    def list_with_members(self, *, newest_first: bool = True):
        rows = sorted(self._db.attendance.values(), key=lambda a: (a.confirmed_at, a.attendance_id), reverse=newest_first)
        return [AttendanceView(record=a, member=self._db.members[a.member_id]) for a in rows]

    def count_all(self) -> int:
        return len(self._db.attendance)

    def count_active(self) -> int:
        return sum(1 for a in self._db.attendance.values() if a.is_active)


class InMemoryPositions:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def list_positions(self, *, council=None):
        rows = [p for p in self._db.positions.values() if council is None or p.council == council]
        return sorted(rows, key=lambda p: (p.council.value, p.sort_order, p.position_id))

    def get_by_id(self, position_id):
        return self._db.positions.get(int(position_id))

    def get_by_name_and_council(self, name, council):
        return next((p for p in self._db.positions.values() if p.name == name and p.council == council), None)

    def create_position(self, *, name, council, sort_order) -> int:
        position_id = self._db.next_id("positions")
        self._db.positions[position_id] = Position(position_id, name, council, int(sort_order))
        return position_id

    def update_position(self, position_id, *, name, council, sort_order) -> bool:
        p = self._db.positions.get(int(position_id))
        if not p:
            return False
        self._db.positions[p.position_id] = replace(p, name=name, council=council, sort_order=int(sort_order))
        return True

    def delete_by_id(self, position_id) -> bool:
        return self._db.positions.pop(int(position_id), None) is not None


class InMemoryAssignments:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def _view(self, a: Assignment) -> AssignmentView:
        position = self._db.positions[a.position_id]
        member = self._db.members[a.member_id]
        return AssignmentView(
            assignment=a,
            position_name=position.name,
            council=position.council,
            member_name=member.name,
            member_cedula=member.cedula,
        )

    def list_assignments(self, *, council=None, current_on: Optional[date] = None):
        rows = []
        for a in self._db.assignments.values():
            view = self._view(a)
            if council is not None and view.council != council:
                continue
            if current_on is not None and a.term_end_date < current_on:
                continue
            rows.append(view)
        return rows

    def get_by_id(self, assignment_id):
        a = self._db.assignments.get(int(assignment_id))
        return self._view(a) if a else None

    def count_by_position(self):
        counts: Dict[int, int] = {}
        for a in self._db.assignments.values():
            counts[a.position_id] = counts.get(a.position_id, 0) + 1
        return counts

    def create_assignment(self, *, position_id, member_id, term_start_date, term_end_date) -> int:
        assignment_id = self._db.next_id("assignments")
        self._db.assignments[assignment_id] = Assignment(
            assignment_id, int(position_id), int(member_id), term_start_date, term_end_date
        )
        return assignment_id

    def update_terms(self, assignment_id, *, term_start_date, term_end_date) -> bool:
        a = self._db.assignments.get(int(assignment_id))
        if not a:
            return False
        self._db.assignments[a.assignment_id] = replace(a, term_start_date=term_start_date, term_end_date=term_end_date)
        return True

    def delete_by_id(self, assignment_id) -> bool:
        return self._db.assignments.pop(int(assignment_id), None) is not None


class InMemoryCandidates:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def _view(self, c: Candidate) -> CandidateView:
        position = self._db.positions[c.position_id]
        return CandidateView(
            candidate=c,
            member_name=self._db.members[c.member_id].name,
            position_name=position.name,
            position_order=position.sort_order,
            council=position.council,
            vote_count=sum(1 for v in self._db.votes.values() if v.candidate_id == c.candidate_id),
        )

    def list_candidates(self, *, council=None, status=None):
        rows = []
        for c in self._db.candidates.values():
            view = self._view(c)
            if council is not None and view.council != council:
                continue
            if status is not None and c.status != status:
                continue
            rows.append(view)
        rows.sort(key=lambda v: (v.council.value, v.position_order, v.candidate.display_order, v.member_name))
        return rows

    def get_by_id(self, candidate_id):
        c = self._db.candidates.get(int(candidate_id))
        return self._view(c) if c else None

    def get_many(self, candidate_ids):
        return [self._view(self._db.candidates[i]) for i in candidate_ids if i in self._db.candidates]

    def exists_for(self, *, member_id, position_id) -> bool:
        return any(
            c.member_id == int(member_id) and c.position_id == int(position_id) for c in self._db.candidates.values()
        )

    def count_for_member(self, member_id) -> int:
        return sum(1 for c in self._db.candidates.values() if c.member_id == int(member_id))

    def count_for_position(self, position_id) -> int:
        return sum(1 for c in self._db.candidates.values() if c.position_id == int(position_id))

    def count_active_by_council(self):
        counts: Dict[Council, int] = {}
        for view in self.list_candidates(status=CandidateStatus.ACTIVE):
            counts[view.council] = counts.get(view.council, 0) + 1
        return counts

    def create_candidate(self, *, member_id, position_id, bio, photo_url, display_order) -> int:
        candidate_id = self._db.next_id("candidates")
        self._db.candidates[candidate_id] = Candidate(
            candidate_id, int(member_id), int(position_id), bio, photo_url, CandidateStatus.ACTIVE, int(display_order)
        )
        return candidate_id

    def update_candidate(self, candidate_id, *, bio, photo_url, status, display_order) -> bool:
        c = self._db.candidates.get(int(candidate_id))
        if not c:
            return False
        self._db.candidates[c.candidate_id] = replace(
            c, bio=bio, photo_url=photo_url, status=status, display_order=int(display_order)
        )
        return True

    def delete_by_id(self, candidate_id) -> bool:
        return self._db.candidates.pop(int(candidate_id), None) is not None


class InMemoryVotes:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def list_for_member(self, member_id):
        return [v for v in self._db.votes.values() if v.member_id == int(member_id)]

    def has_voted(self, member_id) -> bool:
        return bool(self.list_for_member(member_id))

    def create_votes(self, *, member_id, selections, voted_at) -> int:
        # uq_votes_member_position
        taken = {v.position_id for v in self._db.votes.values() if v.member_id == int(member_id)}
        if any(position_id in taken for _, position_id in selections):
            raise ConflictError("Ya has votado en una o más de estas posiciones")
        for candidate_id, position_id in selections:
            vote_id = self._db.next_id("votes")
            self._db.votes[vote_id] = Vote(vote_id, int(member_id), int(candidate_id), int(position_id), voted_at)
        return len(selections)

    def count_all(self) -> int:
        return len(self._db.votes)

    def count_unique_voters(self) -> int:
        return len({v.member_id for v in self._db.votes.values()})

    def count_by_position(self):
        counts: Dict[int, int] = {}
        for v in self._db.votes.values():
            counts[v.position_id] = counts.get(v.position_id, 0) + 1
        return counts

    def list_vote_times(self):
        return sorted(v.voted_at for v in self._db.votes.values())


class InMemoryAdmins:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def get_by_id(self, admin_id):
        return self._db.admins.get(int(admin_id))

    def get_by_username(self, username):
        return next((a for a in self._db.admins.values() if a.username == username), None)

    def create_admin(self, *, username, password_hash, name, email, role) -> int:
        admin_id = self._db.next_id("admins")
        self._db.admins[admin_id] = Admin(admin_id, username, password_hash, name, email, role)
        return admin_id

    def touch_last_login(self, admin_id, *, at) -> bool:
        a = self._db.admins.get(int(admin_id))
        if not a:
            return False
        self._db.admins[a.admin_id] = replace(a, last_login=at)
        return True


class InMemoryConfig:
    def __init__(self, db: FakeDatabase):
        self._db = db
        self.down = False

    def get(self, key):
        return self._db.config.get(key)

    def list_all(self):
        return sorted(self._db.config.values(), key=lambda c: (c.category, c.key))

    def upsert(self, key, value, *, updated_by) -> None:
        current = self._db.config.get(key)
        if current:
            self._db.config[key] = replace(current, value=value, updated_by=updated_by)
        else:
            self._db.config[key] = ConfigEntry(key=key, value=value, updated_by=updated_by)

    def ping(self) -> None:
        if self.down:
            raise mysql.connector.errors.DatabaseError("Can't connect to MySQL server")


class InMemoryActivity:
    def __init__(self, db: FakeDatabase):
        self._db = db
        self.now = datetime(2025, 3, 15, 10, 0)

    def create_log(self, *, admin_id, action, entity, entity_id, details, ip_address, user_agent) -> int:
        log_id = self._db.next_id("logs")
        admin = self._db.admins.get(admin_id) if admin_id else None
        self._db.logs.append(
            ActivityLog(
                log_id=log_id,
                admin_id=admin_id,
                action=action,
                entity=entity,
                entity_id=entity_id,
                details=details,
                ip_address=ip_address,
                user_agent=user_agent,
                created_at=self.now,
                admin_name=admin.name if admin else None,
                admin_username=admin.username if admin else None,
            )
        )
        return log_id

    def _matching(self, f: LogFilter):
        rows = []
        for log in self._db.logs:
            if f.action and log.action != f.action:
                continue
            if f.entity and log.entity != f.entity:
                continue
            if f.admin_id is not None and log.admin_id != f.admin_id:
                continue
            if f.date_from and log.created_at < f.date_from:
                continue
            if f.date_to and log.created_at > f.date_to:
                continue
            rows.append(log)
        return sorted(rows, key=lambda l: (l.created_at, l.log_id), reverse=True)

    def list_logs(self, filters, *, limit, offset):
        return self._matching(filters)[offset:offset + limit]

    def count_logs(self, filters) -> int:
        return len(self._matching(filters))

    def distinct_actions(self):
        return sorted({log.action for log in self._db.logs})

    def distinct_entities(self):
        return sorted({log.entity for log in self._db.logs if log.entity})


class FakeMailer:
    def __init__(self, *, fail: bool = False, configured: bool = True):
        self.fail = fail
        self.configured = configured
        self.sent: List[dict] = []

    def send_voting_code(self, *, to, name, code) -> DeliveryResult:
        if not self.configured:
            return DeliveryResult(sent=False, error="Configuración de email incompleta")
        if self.fail:
            return DeliveryResult(sent=False, error="SMTP down")
        self.sent.append({"to": to, "name": name, "code": code})
        return DeliveryResult(sent=True)

    def verify_connection(self) -> ConnectionCheck:
        if not self.configured:
            return ConnectionCheck(ok=False, error="Configuración de email incompleta")
        if self.fail:
            return ConnectionCheck(ok=False, error="SMTP down")
        return ConnectionCheck(ok=True, message="Conexión exitosa al servidor SMTP.")


def make_container(db: FakeDatabase, mailer: FakeMailer):
    return assemble_container(
        conn=None,
        mailer=mailer,
        members_repo=InMemoryMembers(db),
        attendance_repo=InMemoryAttendance(db),
        positions_repo=InMemoryPositions(db),
        assignments_repo=InMemoryAssignments(db),
        candidates_repo=InMemoryCandidates(db),
        votes_repo=InMemoryVotes(db),
        admins_repo=InMemoryAdmins(db),
        config_repo=InMemoryConfig(db),
        activity_repo=InMemoryActivity(db),
    )


# ---- seed helpers ----

def add_member(db: FakeDatabase, name: str, *, cedula: Optional[str] = None, status=MemberStatus.ACTIVE) -> Member:
    member_id = db.next_id("members")
    member = Member(
        member_id=member_id,
        name=name,
        email=f"{name.split()[0].lower()}{member_id}@coop.do",
        cedula=cedula or f"001-{member_id:07d}-1",
        phone=None,
        status=status,
    )
    db.members[member_id] = member
    return member


def add_position(db: FakeDatabase, name: str, council: Council = Council.ADMINISTRACION, order: int = 1) -> Position:
    position_id = db.next_id("positions")
    position = Position(position_id, name, council, order)
    db.positions[position_id] = position
    return position


def add_candidate(db: FakeDatabase, member: Member, position: Position, *, status=CandidateStatus.ACTIVE, order: int = 0) -> Candidate:
    candidate_id = db.next_id("candidates")
    candidate = Candidate(candidate_id, member.member_id, position.position_id, None, None, status, order)
    db.candidates[candidate_id] = candidate
    return candidate


def add_assignment(db: FakeDatabase, position: Position, member: Member, *, start: date, end: date) -> Assignment:
    assignment_id = db.next_id("assignments")
    assignment = Assignment(assignment_id, position.position_id, member.member_id, start, end)
    db.assignments[assignment_id] = assignment
    return assignment


def add_attendance(
    db: FakeDatabase,
    member: Member,
    code: str,
    *,
    confirmed_at: datetime = datetime(2025, 3, 15, 8, 0),
    status=AttendanceStatus.ACTIVE,
) -> AttendanceRecord:
    attendance_id = db.next_id("attendance")
    record = AttendanceRecord(attendance_id, member.member_id, code, confirmed_at, False, None, status)
    db.attendance[attendance_id] = record
    return record


def add_vote(db: FakeDatabase, member: Member, candidate: Candidate, *, voted_at: datetime = datetime(2025, 3, 15, 10, 5)) -> Vote:
    vote_id = db.next_id("votes")
    vote = Vote(vote_id, member.member_id, candidate.candidate_id, candidate.position_id, voted_at)
    db.votes[vote_id] = vote
    return vote


def add_admin(db: FakeDatabase, username: str, password_hash: str, *, role=Role.ADMIN) -> Admin:
    admin_id = db.next_id("admins")
    admin = Admin(admin_id, username, password_hash, username.title(), f"{username}@coop.do", role)
    db.admins[admin_id] = admin
    return admin


def set_config(db: FakeDatabase, key: str, value: str) -> None:
    db.config[key] = ConfigEntry(key=key, value=value, category="attendance")


# ---- MySQL driver stand-ins for the repository layer ----

class _FakeCursor:
    def __init__(self, factory: "FakeConnectionFactory"):
        self._factory = factory
        self.lastrowid = 1

    def execute(self, sql, params=None):
        self._factory.executed.append((" ".join(sql.split()), params))
        if self._factory.error is not None:
            raise self._factory.error

    def fetchone(self):
        return self._factory.rows[0] if self._factory.rows else None

    def fetchall(self):
        return list(self._factory.rows)

    def close(self) -> None:
        pass


class _FakeConnection:
    def __init__(self, factory: "FakeConnectionFactory"):
        self._factory = factory

    def cursor(self, dictionary: bool = True):
        return _FakeCursor(self._factory)

    def commit(self) -> None:
        self._factory.committed = True

    def rollback(self) -> None:
        self._factory.rolled_back = True

    def close(self) -> None:
        pass


class FakeConnectionFactory:
    """Stands in for ``ConnectionFactory`` under the MySQL repositories.

    Every statement is recorded in ``executed``; when ``error`` is set each one raises it.
    """

    def __init__(self, *, error: Optional[Exception] = None, rows: Sequence[dict] = ()):
        self.error = error
        self.rows = list(rows)
        self.executed: List[tuple] = []
        self.committed = False
        self.rolled_back = False

    def connect(self):
        return _FakeConnection(self)


def duplicate_key_error(key: str) -> mysql.connector.IntegrityError:
    return mysql.connector.IntegrityError(msg=f"Duplicate entry for key '{key}'", errno=1062)
