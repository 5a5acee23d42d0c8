from __future__ import annotations

import pytest

from coopvote.core.enums import CandidateStatus, Council, MemberStatus
from coopvote.core.exceptions import NotFoundError, ValidationError
from fakes import add_candidate, add_member, add_position, add_vote


def test_create_candidate_checks_member_and_position(container, db):
    inactive = add_member(db, "Pedro", status=MemberStatus.INACTIVE)
    ana = add_member(db, "Ana Pérez")
    position = add_position(db, "Presidente")
    svc = container.candidate_service

    with pytest.raises(ValidationError):
        svc.create_candidate(member_id=None, position_id=position.position_id)
    with pytest.raises(ValidationError):
        svc.create_candidate(member_id=inactive.member_id, position_id=position.position_id)
    with pytest.raises(NotFoundError):
        svc.create_candidate(member_id=ana.member_id, position_id=99)

    view = svc.create_candidate(member_id=ana.member_id, position_id=position.position_id, bio="  Contadora ")
    assert view.member_name == "Ana Pérez"
    assert view.candidate.bio == "Contadora"
    assert view.candidate.status == CandidateStatus.ACTIVE


def test_member_cannot_run_twice_for_same_position(container, db):
    ana = add_member(db, "Ana Pérez")
    position = add_position(db, "Presidente")
    add_candidate(db, ana, position)

    with pytest.raises(ValidationError):
        container.candidate_service.create_candidate(member_id=ana.member_id, position_id=position.position_id)


def test_update_candidate_none_keeps_and_empty_clears(container, db):
    ana = add_member(db, "Ana Pérez")
    position = add_position(db, "Presidente")
    candidate = add_candidate(db, ana, position)
    svc = container.candidate_service
    svc.update_candidate(candidate.candidate_id, bio="Bio", photo_url="https://img/ana.png")

    view = svc.update_candidate(candidate.candidate_id, photo_url="", status="inactive")

    assert view.candidate.bio == "Bio"
    assert view.candidate.photo_url is None
    assert view.candidate.status == CandidateStatus.INACTIVE


def test_update_candidate_rejects_unknown_status(container, db):
    candidate = add_candidate(db, add_member(db, "Ana"), add_position(db, "Presidente"))
    with pytest.raises(ValidationError):
        container.candidate_service.update_candidate(candidate.candidate_id, status="withdrawn")


def test_delete_candidate_with_votes_is_refused(container, db):
    ana = add_member(db, "Ana Pérez")
    voter = add_member(db, "Luis Gómez")
    position = add_position(db, "Presidente")
    candidate = add_candidate(db, ana, position)
    add_vote(db, voter, candidate)

    with pytest.raises(ValidationError):
        container.candidate_service.delete_candidate(candidate.candidate_id)


def test_list_public_groups_active_candidates(container, db):
    president = add_position(db, "Presidente", Council.ADMINISTRACION, order=1)
    vocal = add_position(db, "Vocal", Council.VIGILANCIA, order=1)
    add_candidate(db, add_member(db, "Ana"), president)
    add_candidate(db, add_member(db, "Luis"), vocal)
    add_candidate(db, add_member(db, "Rosa"), vocal, status=CandidateStatus.INACTIVE)

    grouped = container.candidate_service.list_public()

    assert list(grouped) == ["administracion", "vigilancia"]
    assert [v.member_name for v in grouped["vigilancia"]["Vocal"]] == ["Luis"]


def test_list_admin_filters(container, db):
    president = add_position(db, "Presidente", Council.ADMINISTRACION)
    vocal = add_position(db, "Vocal", Council.VIGILANCIA)
    add_candidate(db, add_member(db, "Ana"), president)
    add_candidate(db, add_member(db, "Rosa"), vocal, status=CandidateStatus.INACTIVE)
    svc = container.candidate_service

    assert len(svc.list_admin()) == 2
    assert [v.member_name for v in svc.list_admin(council="vigilancia")] == ["Rosa"]
    assert [v.member_name for v in svc.list_admin(status="active")] == ["Ana"]
    with pytest.raises(ValidationError):
        svc.list_admin(council="otro")
