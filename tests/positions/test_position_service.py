from __future__ import annotations

from datetime import date

import pytest

from coopvote.core.enums import Council
from coopvote.core.exceptions import NotFoundError, ValidationError
from fakes import add_assignment, add_candidate, add_member, add_position

TODAY = date(2025, 3, 15)


def test_create_position_validates_input(container):
    svc = container.position_service
    with pytest.raises(ValidationError):
        svc.create_position(name="", council="vigilancia", sort_order=1)
    with pytest.raises(ValidationError):
        svc.create_position(name="Secretario", council="finanzas", sort_order=1)

    position = svc.create_position(name="Secretario", council="Vigilancia", sort_order="2")
    assert position.council == Council.VIGILANCIA
    assert position.sort_order == 2


def test_position_name_is_unique_per_council(container, db):
    add_position(db, "Presidente", Council.ADMINISTRACION)
    svc = container.position_service

    with pytest.raises(ValidationError):
        svc.create_position(name="Presidente", council="administracion", sort_order=1)
    # Same name in another council is fine.
    assert svc.create_position(name="Presidente", council="credito", sort_order=1).council == Council.CREDITO


def test_update_position_reports_changes(container, db):
    position = add_position(db, "Vocal", Council.CREDITO, order=3)

    updated, changes = container.position_service.update_position(position.position_id, name="Vocal 1", sort_order=4)

    assert updated.name == "Vocal 1"
    assert changes == {"name": {"old": "Vocal", "new": "Vocal 1"}, "order": {"old": 3, "new": 4}}


def test_delete_position_blocked_by_assignments_or_candidates(container, db):
    held = add_position(db, "Presidente")
    contested = add_position(db, "Tesorero", order=2)
    free = add_position(db, "Vocal", order=3)
    ana = add_member(db, "Ana Pérez")
    add_assignment(db, held, ana, start=date(2023, 1, 1), end=date(2024, 1, 1))
    add_candidate(db, ana, contested)

    with pytest.raises(ValidationError):
        container.position_service.delete_position(held.position_id)
    with pytest.raises(ValidationError):
        container.position_service.delete_position(contested.position_id)

    container.position_service.delete_position(free.position_id)
    assert free.position_id not in db.positions


def test_occupancy_uses_term_end_date(container, db):
    current = add_position(db, "Presidente")
    expired = add_position(db, "Tesorero", order=2)
    ana = add_member(db, "Ana Pérez")
    add_assignment(db, current, ana, start=date(2024, 3, 15), end=TODAY)
    add_assignment(db, expired, ana, start=date(2023, 1, 1), end=date(2025, 3, 14))

    assert container.position_service.occupied_position_ids(TODAY) == {current.position_id}

    available = container.position_service.list_positions(available_only=True, today=TODAY)
    assert [o.position.position_id for o in available] == [expired.position_id]

    overview = container.position_service.list_positions(today=TODAY)[0]
    assert overview.to_dict()["current_holder"] == "Ana Pérez"


def test_create_assignment_defaults_start_to_today(container, db):
    position = add_position(db, "Presidente")
    ana = add_member(db, "Ana Pérez")

    view = container.position_service.create_assignment(
        position_id=position.position_id, member_id=ana.member_id, term_end_date="2027-03-15", today=TODAY
    )
    assert view.assignment.term_start_date == TODAY
    assert view.to_dict(TODAY)["is_active"] is True


def test_create_assignment_rejects_bad_range_and_occupied_position(container, db):
    position = add_position(db, "Presidente")
    ana = add_member(db, "Ana Pérez")
    luis = add_member(db, "Luis Gómez")
    svc = container.position_service

    with pytest.raises(ValidationError):
        svc.create_assignment(
            position_id=position.position_id,
            member_id=ana.member_id,
            term_start_date="2025-03-15",
            term_end_date="2025-03-15",
            today=TODAY,
        )

    svc.create_assignment(position_id=position.position_id, member_id=ana.member_id, term_end_date="2026-01-01", today=TODAY)
    with pytest.raises(ValidationError) as exc:
        svc.create_assignment(
            position_id=position.position_id, member_id=luis.member_id, term_end_date="2027-01-01", today=TODAY
        )
    assert "Ana Pérez hasta 01/01/2026" in str(exc.value)


def test_create_assignment_requires_fields_and_existing_member(container, db):
    position = add_position(db, "Presidente")
    with pytest.raises(ValidationError):
        container.position_service.create_assignment(position_id=position.position_id, member_id=None, term_end_date=None)
    with pytest.raises(NotFoundError):
        container.position_service.create_assignment(
            position_id=position.position_id, member_id=77, term_end_date="2027-01-01", today=TODAY
        )


def test_update_and_delete_assignment(container, db):
    position = add_position(db, "Presidente")
    ana = add_member(db, "Ana Pérez")
    assignment = add_assignment(db, position, ana, start=date(2024, 1, 1), end=date(2026, 1, 1))
    svc = container.position_service

    with pytest.raises(ValidationError):
        svc.update_assignment(assignment.assignment_id, term_end_date="2023-12-31")

    view = svc.update_assignment(assignment.assignment_id, term_end_date="2027-01-01")
    assert view.assignment.term_end_date == date(2027, 1, 1)

    svc.delete_assignment(assignment.assignment_id)
    with pytest.raises(NotFoundError):
        svc.get_assignment(assignment.assignment_id)


def test_list_assignments_filters_council_and_active(container, db):
    admin_pos = add_position(db, "Presidente", Council.ADMINISTRACION)
    credit_pos = add_position(db, "Presidente", Council.CREDITO)
    ana = add_member(db, "Ana Pérez")
    add_assignment(db, admin_pos, ana, start=date(2024, 1, 1), end=date(2026, 1, 1))
    add_assignment(db, credit_pos, ana, start=date(2020, 1, 1), end=date(2021, 1, 1))

    svc = container.position_service
    assert len(svc.list_assignments()) == 2
    assert len(svc.list_assignments(council="credito")) == 1
    assert len(svc.list_assignments(active_only=True, today=TODAY)) == 1
