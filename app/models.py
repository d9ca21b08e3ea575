"""
Data Models Module

This module defines all Pydantic models used throughout the application.
Strong typing ensures data integrity and provides clear contracts between components.

Design Decisions:
- Use Pydantic models for domain entities and HTTP request bodies alike
- Field names match the JSON the HTTP layer exchanges (snake_case)
- Structural checks (empty names, empty ids) live in the validation
  service so the assignment service controls when they run
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class PullRequestStatus(str, Enum):
    """Lifecycle states of a pull request. MERGED is terminal."""
    OPEN = "OPEN"
    MERGED = "MERGED"


# =============================================================================
# Domain Models
# =============================================================================

class User(BaseModel):
    """
    A user known to the service.

    Attributes:
        user_id: Globally unique identifier
        username: Display name
        team_name: The one team this user belongs to
        is_active: Inactive users are never picked as reviewers
    """
    user_id: str
    username: str
    team_name: str
    is_active: bool = True


class TeamMember(BaseModel):
    """A member as listed inside a team payload."""
    user_id: str
    username: str
    is_active: bool = True


class Team(BaseModel):
    """
    A team and its members, in stored order.

    The team name is the unique key.
    """
    team_name: str
    members: List[TeamMember] = Field(default_factory=list)

    def member_users(self) -> List[User]:
        """Expand members into full User records belonging to this team."""
        return [
            User(
                user_id=member.user_id,
                username=member.username,
                team_name=self.team_name,
                is_active=member.is_active,
            )
            for member in self.members
        ]


class PullRequest(BaseModel):
    """
    A pull request and its assigned reviewers.

    Invariants:
        - author_id is never in assigned_reviewers
        - assigned_reviewers holds no duplicates
        - once MERGED, reviewers never change and merged_at is set once
    """
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus = PullRequestStatus.OPEN
    assigned_reviewers: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None

    @property
    def is_merged(self) -> bool:
        """Check whether the pull request reached its terminal state."""
        return self.status == PullRequestStatus.MERGED

    def to_short(self) -> "PullRequestShort":
        """Get the listing view of this pull request."""
        return PullRequestShort(
            pull_request_id=self.pull_request_id,
            pull_request_name=self.pull_request_name,
            author_id=self.author_id,
            status=self.status,
        )


class PullRequestShort(BaseModel):
    """Pull request without reviewers or timestamps, used in listings."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus


# =============================================================================
# HTTP Request Models
# =============================================================================

class SetUserActiveRequest(BaseModel):
    """Body of POST /users/setIsActive."""
    user_id: str
    is_active: bool


class CreatePullRequestRequest(BaseModel):
    """Body of POST /pullRequest/create."""
    pull_request_id: str
    pull_request_name: str
    author_id: str


class MergePullRequestRequest(BaseModel):
    """Body of POST /pullRequest/merge."""
    pull_request_id: str


class ReassignReviewerRequest(BaseModel):
    """Body of POST /pullRequest/reassign."""
    pull_request_id: str
    old_reviewer_id: str
