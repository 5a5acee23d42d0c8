from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .activity.mysql_activity_repository import MySQLActivityRepository
from .activity.repository import ActivityRepository
from .activity.service import ActivityService
from .admins.mysql_admin_repository import MySQLAdminRepository
from .admins.repository import AdminRepository
from .admins.service import AuthService
from .app_config.mysql_config_repository import MySQLConfigRepository
from .app_config.repository import ConfigRepository
from .app_config.service import ConfigService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .candidates.mysql_candidate_repository import MySQLCandidateRepository
from .candidates.repository import CandidateRepository
from .candidates.service import CandidateService
from .database.connection import ConnectionFactory, DBConfig
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .members.service import MemberService
from .notifications.mailer import ConfirmationMailer
from .positions.mysql_assignment_repository import MySQLAssignmentRepository
from .positions.mysql_position_repository import MySQLPositionRepository
from .positions.repository import AssignmentRepository, PositionRepository
from .positions.service import PositionService
from .reports.service import DashboardService, ResultsService
from .voting.mysql_vote_repository import MySQLVoteRepository
from .voting.repository import VoteRepository
from .voting.service import VotingService


@dataclass(frozen=True)
class Container:
    conn: Optional[ConnectionFactory]
    mailer: Optional[ConfirmationMailer]

    members_repo: MemberRepository
    attendance_repo: AttendanceRepository
    positions_repo: PositionRepository
    assignments_repo: AssignmentRepository
    candidates_repo: CandidateRepository
    votes_repo: VoteRepository
    admins_repo: AdminRepository
    config_repo: ConfigRepository
    activity_repo: ActivityRepository

    member_service: MemberService
    attendance_service: AttendanceService
    position_service: PositionService
    candidate_service: CandidateService
    voting_service: VotingService
    results_service: ResultsService
    dashboard_service: DashboardService
    auth_service: AuthService
    config_service: ConfigService
    activity_service: ActivityService


def assemble_container(
    *,
    conn: Optional[ConnectionFactory],
    mailer,
    members_repo: MemberRepository,
    attendance_repo: AttendanceRepository,
    positions_repo: PositionRepository,
    assignments_repo: AssignmentRepository,
    candidates_repo: CandidateRepository,
    votes_repo: VoteRepository,
    admins_repo: AdminRepository,
    config_repo: ConfigRepository,
    activity_repo: ActivityRepository,
) -> Container:
    """Wire services over the given repositories (MySQL in production, fakes in tests)."""
    position_service = PositionService(positions_repo, assignments_repo, members_repo, candidates_repo)

    return Container(
        conn=conn,
        mailer=mailer,
        members_repo=members_repo,
        attendance_repo=attendance_repo,
        positions_repo=positions_repo,
        assignments_repo=assignments_repo,
        candidates_repo=candidates_repo,
        votes_repo=votes_repo,
        admins_repo=admins_repo,
        config_repo=config_repo,
        activity_repo=activity_repo,
        member_service=MemberService(members_repo, attendance_repo, votes_repo, candidates_repo),
        attendance_service=AttendanceService(attendance_repo, members_repo, config_repo, mailer),
        position_service=position_service,
        candidate_service=CandidateService(candidates_repo, members_repo, positions_repo),
        voting_service=VotingService(attendance_repo, members_repo, position_service, candidates_repo, votes_repo),
        results_service=ResultsService(candidates_repo, votes_repo, attendance_repo),
        dashboard_service=DashboardService(members_repo, attendance_repo, votes_repo, candidates_repo),
        auth_service=AuthService(admins_repo),
        config_service=ConfigService(config_repo, members_repo, mailer),
        activity_service=ActivityService(activity_repo),
    )


def build_container(*, db_config: Mapping[str, Any], mailer: Optional[ConfirmationMailer] = None) -> Container:
    conn = ConnectionFactory(DBConfig.from_mapping(db_config))

    return assemble_container(
        conn=conn,
        mailer=mailer,
        members_repo=MySQLMemberRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        positions_repo=MySQLPositionRepository(conn),
        assignments_repo=MySQLAssignmentRepository(conn),
        candidates_repo=MySQLCandidateRepository(conn),
        votes_repo=MySQLVoteRepository(conn),
        admins_repo=MySQLAdminRepository(conn),
        config_repo=MySQLConfigRepository(conn),
        activity_repo=MySQLActivityRepository(conn),
    )
