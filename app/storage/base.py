"""
Storage Contract Module

The assignment service depends only on the ReviewStore protocol below.
Any store (in-memory, relational, document) that provides these methods
can back the service.

Guarantees a store must provide:
- create_team, create_pr and update_pr are all-or-nothing
- a read issued right after a write in the same operation sees that write
- returned models are not shared with the store's internal state
"""

from typing import List, Optional, Protocol, runtime_checkable

from app.models import PullRequest, Team, User


class StoreError(Exception):
    """Base class for errors raised by a store."""
    pass


class RecordNotFound(StoreError):
    """The record addressed by a write does not exist."""
    pass


class RecordAlreadyExists(StoreError):
    """A record with the same key is already stored."""
    pass


class UserAlreadyExists(RecordAlreadyExists):
    """A team member's user id is already stored."""

    def __init__(self, user_id: str):
        super().__init__(f"user {user_id} already exists")
        self.user_id = user_id


@runtime_checkable
class ReviewStore(Protocol):
    """Persistence capabilities used by the assignment service."""

    # Users
    def find_user_by_id(self, user_id: str) -> Optional[User]: ...

    def find_users_by_team(self, team_name: str) -> List[User]: ...

    def set_user_active(self, user_id: str, is_active: bool) -> None: ...

    # Teams
    def team_exists(self, team_name: str) -> bool: ...

    def create_team(self, team: Team) -> None: ...

    def find_team_by_name(self, team_name: str) -> Optional[Team]: ...

    # Pull requests
    def create_pr(self, pr: PullRequest) -> None: ...

    def find_pr_by_id(self, pr_id: str) -> Optional[PullRequest]: ...

    def update_pr(self, pr: PullRequest) -> None: ...

    def find_prs_by_reviewer(self, user_id: str) -> List[PullRequest]: ...
