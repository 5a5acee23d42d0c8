from __future__ import annotations

from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..candidates.model import CandidateView
from ..candidates.repository import CandidateRepository
from ..common.datetime_utils import now_local
from ..common.numbers import percentage
from ..core.constants import COUNCIL_LABELS, COUNCIL_ORDER
from ..core.enums import CandidateStatus, Council
from ..members.repository import MemberRepository
from ..voting.repository import VoteRepository


def _tabulate(candidates: Sequence[CandidateView], position_totals: Dict[int, int], *, with_details: bool) -> List[dict]:
    """Group candidates by council (display order) and position, votes descending."""
    results = []
    for council in COUNCIL_ORDER:
        in_council = [c for c in candidates if c.council == council]
        if not in_council:
            continue

        positions: "OrderedDict[int, dict]" = OrderedDict()
        for view in sorted(in_council, key=lambda c: (c.position_order, c.position_id)):
            entry = positions.get(view.position_id)
            if entry is None:
                entry = {
                    "position_id": view.position_id,
                    "position_name": view.position_name,
                    "total_votes": position_totals.get(view.position_id, 0),
                    "candidates": [],
                }
                positions[view.position_id] = entry

            row = {
                "candidate_id": view.candidate_id,
                "candidate_name": view.member_name,
                "display_order": view.candidate.display_order,
                "vote_count": view.vote_count,
                "percentage": percentage(view.vote_count, entry["total_votes"]),
            }
            if with_details:
                row.update(
                    {
                        "bio": view.candidate.bio,
                        "photo_url": view.candidate.photo_url,
                        "status": view.candidate.status.value,
                    }
                )
            entry["candidates"].append(row)

        for entry in positions.values():
            entry["candidates"].sort(key=lambda r: (-r["vote_count"], r["display_order"], r["candidate_name"]))

        results.append(
            {
                "council": council.value,
                "council_label": COUNCIL_LABELS[council],
                "total_votes": sum(e["total_votes"] for e in positions.values()),
                "positions": list(positions.values()),
            }
        )
    return results


def votes_by_hour(times: Sequence[datetime]) -> Dict[str, int]:
    buckets: Dict[str, int] = OrderedDict()
    for voted_at in sorted(t for t in times if t is not None):
        key = voted_at.strftime("%Y-%m-%dT%H:00")
        buckets[key] = buckets.get(key, 0) + 1
    return buckets


class ResultsService:
    """Vote tabulation for the public results page and the admin panel."""

    def __init__(self, candidates: CandidateRepository, votes: VoteRepository, attendance: AttendanceRepository):
        self._candidates = candidates
        self._votes = votes
        self._attendance = attendance

    def public_results(self) -> dict:
        candidates = self._candidates.list_candidates(status=CandidateStatus.ACTIVE)
        total_attendees = self._attendance.count_active()
        total_voters = self._votes.count_unique_voters()
        return {
            "results": _tabulate(candidates, self._votes.count_by_position(), with_details=False),
            "summary": {
                "total_attendees": total_attendees,
                "total_voters": total_voters,
                "participation_rate": percentage(total_voters, total_attendees),
            },
        }

    def admin_results(self, now: Optional[datetime] = None) -> dict:
        candidates = self._candidates.list_candidates()
        unique_voters = self._votes.count_unique_voters()
        confirmed = self._attendance.count_active()
        return {
            "results": _tabulate(candidates, self._votes.count_by_position(), with_details=True),
            "stats": {
                "total_votes": self._votes.count_all(),
                "unique_voters": unique_voters,
                "confirmed_attendance": confirmed,
                "participation_rate": percentage(unique_voters, confirmed),
                "votes_by_hour": votes_by_hour(self._votes.list_vote_times()),
                "last_updated": (now or now_local()).isoformat(),
            },
        }


class DashboardService:
    def __init__(
        self,
        members: MemberRepository,
        attendance: AttendanceRepository,
        votes: VoteRepository,
        candidates: CandidateRepository,
    ):
        self._members = members
        self._attendance = attendance
        self._votes = votes
        self._candidates = candidates

    def dashboard_stats(self) -> dict:
        total = self._members.count_all()
        active = self._members.count_active()
        confirmed = self._attendance.count_all()
        voters = self._votes.count_unique_voters()

        by_council = {council.value: 0 for council in Council}
        for council, count in self._candidates.count_active_by_council().items():
            by_council[council.value] = count

        return {
            "members": {"total": total, "active": active, "inactive": total - active},
            "attendance": {
                "confirmed": confirmed,
                "pending": max(total - confirmed, 0),
                "percentage": percentage(confirmed, total),
            },
            "votes": {"total": voters, "percentage": percentage(voters, confirmed)},
            "candidates": {"total": sum(by_council.values()), "by_council": by_council},
        }
