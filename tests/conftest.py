"""
Test Configuration

Pytest configuration and fixtures for the test suite.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Generator, List, Sequence

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.models import PullRequest, Team, TeamMember
from app.services.assignment import ReviewAssignmentService
from app.services.picker import ReviewerPicker
from app.storage import InMemoryReviewStore


class FixedSource:
    """Random source that always returns the given indices, in order."""

    def __init__(self, indices: Sequence[int]):
        self.indices = list(indices)
        self.calls: List[tuple] = []

    def sample(self, population, k):
        self.calls.append((list(population), k))
        return self.indices[:k]


class CountingStore(InMemoryReviewStore):
    """In-memory store that records every mutating call."""

    def __init__(self):
        super().__init__()
        self.calls = {
            "create_team": 0,
            "set_user_active": 0,
            "create_pr": 0,
            "update_pr": 0,
        }

    def create_team(self, team: Team) -> None:
        self.calls["create_team"] += 1
        super().create_team(team)

    def set_user_active(self, user_id: str, is_active: bool) -> None:
        self.calls["set_user_active"] += 1
        super().set_user_active(user_id, is_active)

    def create_pr(self, pr: PullRequest) -> None:
        self.calls["create_pr"] += 1
        super().create_pr(pr)

    def update_pr(self, pr: PullRequest) -> None:
        self.calls["update_pr"] += 1
        super().update_pr(pr)


class Clock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self):
        self.current = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(minutes=1)
        return now


def make_team(name: str, *members: tuple) -> Team:
    """Build a team from (user_id, is_active) pairs."""
    return Team(
        team_name=name,
        members=[
            TeamMember(user_id=user_id, username=f"User {user_id}", is_active=active)
            for user_id, active in members
        ],
    )


@pytest.fixture
def store() -> CountingStore:
    """Empty counting store."""
    return CountingStore()


@pytest.fixture
def clock() -> Clock:
    """Deterministic clock."""
    return Clock()


@pytest.fixture
def service(store: CountingStore, clock: Clock) -> ReviewAssignmentService:
    """Assignment service with a seeded picker."""
    return ReviewAssignmentService(store, picker=ReviewerPicker(seed=7), clock=clock)


@pytest.fixture
def backend_team() -> Team:
    """Team with one inactive member."""
    return make_team(
        "backend",
        ("author1", True),
        ("r1", True),
        ("r2", True),
        ("r3", False),
    )


@pytest.fixture
def team_factory() -> Callable[..., Team]:
    """Factory for ad-hoc teams."""
    return make_team


@pytest.fixture
def fixed_source() -> Callable[[Sequence[int]], FixedSource]:
    """Factory for random sources returning fixed indices."""
    return FixedSource


@pytest.fixture
def client(service: ReviewAssignmentService) -> Generator[TestClient, None, None]:
    """Create a test client serving a fresh service."""
    with TestClient(create_app(service)) as test_client:
        yield test_client
