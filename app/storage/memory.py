"""
In-Memory Store Module

A thread-safe, process-local ReviewStore. A single re-entrant lock makes
every method atomic, and all models cross the boundary as deep copies so
callers can never mutate stored state by accident.
"""

import threading
from typing import Dict, List, Optional

from app.logging_config import get_logger
from app.models import PullRequest, Team, TeamMember, User
from app.storage.base import RecordAlreadyExists, RecordNotFound, UserAlreadyExists

logger = get_logger(__name__)


class InMemoryReviewStore:
    """
    Dict-backed store for users, teams and pull requests.

    Users and pull requests are kept in insertion order, which is the
    natural order returned by the listing methods.

    Usage:
        store = InMemoryReviewStore()
        store.create_team(team)
        users = store.find_users_by_team("backend")
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._teams: Dict[str, List[str]] = {}
        self._prs: Dict[str, PullRequest] = {}

    # =========================================================================
    # Users
    # =========================================================================
    def find_user_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user else None

    def find_users_by_team(self, team_name: str) -> List[User]:
        with self._lock:
            return [
                self._users[user_id].model_copy(deep=True)
                for user_id in self._teams.get(team_name, [])
            ]

    def set_user_active(self, user_id: str, is_active: bool) -> None:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise RecordNotFound(f"user {user_id} not found")
            user.is_active = is_active

    # =========================================================================
    # Teams
    # =========================================================================
    def team_exists(self, team_name: str) -> bool:
        with self._lock:
            return team_name in self._teams

    def create_team(self, team: Team) -> None:
        """Insert the team and all its members, or nothing."""
        with self._lock:
            if team.team_name in self._teams:
                raise RecordAlreadyExists(f"team {team.team_name} already exists")

            users = team.member_users()
            seen = set()
            for user in users:
                if user.user_id in self._users or user.user_id in seen:
                    raise UserAlreadyExists(user.user_id)
                seen.add(user.user_id)

            for user in users:
                self._users[user.user_id] = user
            self._teams[team.team_name] = [user.user_id for user in users]

            logger.debug(
                "Team stored",
                team_name=team.team_name,
                members_count=len(users)
            )

    def find_team_by_name(self, team_name: str) -> Optional[Team]:
        with self._lock:
            member_ids = self._teams.get(team_name)
            if member_ids is None:
                return None

            members = [
                TeamMember(
                    user_id=self._users[user_id].user_id,
                    username=self._users[user_id].username,
                    is_active=self._users[user_id].is_active,
                )
                for user_id in member_ids
            ]
            return Team(team_name=team_name, members=members)

    # =========================================================================
    # Pull Requests
    # =========================================================================
    def create_pr(self, pr: PullRequest) -> None:
        with self._lock:
            if pr.pull_request_id in self._prs:
                raise RecordAlreadyExists(
                    f"pull request {pr.pull_request_id} already exists"
                )
            self._prs[pr.pull_request_id] = pr.model_copy(deep=True)

    def find_pr_by_id(self, pr_id: str) -> Optional[PullRequest]:
        with self._lock:
            pr = self._prs.get(pr_id)
            return pr.model_copy(deep=True) if pr else None

    def update_pr(self, pr: PullRequest) -> None:
        """Replace the stored pull request, reviewers included."""
        with self._lock:
            if pr.pull_request_id not in self._prs:
                raise RecordNotFound(f"pull request {pr.pull_request_id} not found")
            self._prs[pr.pull_request_id] = pr.model_copy(deep=True)

    def find_prs_by_reviewer(self, user_id: str) -> List[PullRequest]:
        with self._lock:
            return [
                pr.model_copy(deep=True)
                for pr in self._prs.values()
                if user_id in pr.assigned_reviewers
            ]
