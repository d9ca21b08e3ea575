"""
Tests for the In-Memory Store

Exercises the store directly, without the service's pre-checks.
"""

import pytest

from app.models import PullRequest
from app.storage import (
    InMemoryReviewStore,
    RecordAlreadyExists,
    RecordNotFound,
    UserAlreadyExists,
)


@pytest.fixture
def memory_store(backend_team) -> InMemoryReviewStore:
    """Store holding the backend team."""
    store = InMemoryReviewStore()
    store.create_team(backend_team)
    return store


class TestInMemoryReviewStore:
    """Test suite for InMemoryReviewStore."""

    def test_create_team_is_all_or_nothing(self, memory_store, team_factory):
        """Test that a colliding member leaves no team and no partial users."""
        with pytest.raises(UserAlreadyExists) as exc_info:
            memory_store.create_team(
                team_factory("frontend", ("f1", True), ("r2", True), ("f3", True))
            )

        assert exc_info.value.user_id == "r2"
        assert not memory_store.team_exists("frontend")
        assert memory_store.find_user_by_id("f1") is None
        assert memory_store.find_user_by_id("f3") is None
        assert memory_store.find_user_by_id("r2").team_name == "backend"

    def test_duplicate_member_in_payload(self, team_factory):
        """Test that one payload cannot list the same id twice."""
        store = InMemoryReviewStore()

        with pytest.raises(UserAlreadyExists):
            store.create_team(team_factory("qa", ("q1", True), ("q1", False)))

        assert not store.team_exists("qa")
        assert store.find_user_by_id("q1") is None

    def test_create_existing_team(self, memory_store, team_factory):
        """Test that a team name collision is not reported as a user collision."""
        with pytest.raises(RecordAlreadyExists) as exc_info:
            memory_store.create_team(team_factory("backend", ("x1", True)))

        assert not isinstance(exc_info.value, UserAlreadyExists)
        assert memory_store.find_user_by_id("x1") is None

    def test_users_by_team_in_insertion_order(self, memory_store):
        """Test the natural order of team members."""
        users = memory_store.find_users_by_team("backend")

        assert [u.user_id for u in users] == ["author1", "r1", "r2", "r3"]
        assert memory_store.find_users_by_team("ghosts") == []

    def test_set_user_active_unknown(self, memory_store):
        """Test that activating an unknown user raises RecordNotFound."""
        with pytest.raises(RecordNotFound):
            memory_store.set_user_active("ghost", True)

    def test_set_user_active_visible_in_team(self, memory_store):
        """Test that an activation change shows up in the team view."""
        memory_store.set_user_active("r3", True)

        team = memory_store.find_team_by_name("backend")

        assert [m.is_active for m in team.members] == [True, True, True, True]

    def test_update_unknown_pr(self, memory_store):
        """Test that updating a missing PR raises RecordNotFound."""
        pr = PullRequest(pull_request_id="pr-404", pull_request_name="T", author_id="author1")

        with pytest.raises(RecordNotFound):
            memory_store.update_pr(pr)

        assert memory_store.find_pr_by_id("pr-404") is None

    def test_create_duplicate_pr(self, memory_store):
        """Test that a PR id can only be stored once."""
        pr = PullRequest(pull_request_id="pr-1", pull_request_name="T", author_id="author1")
        memory_store.create_pr(pr)

        with pytest.raises(RecordAlreadyExists):
            memory_store.create_pr(pr)

    def test_returned_pr_is_a_copy(self, memory_store):
        """Test that changing a returned PR does not change stored state."""
        memory_store.create_pr(PullRequest(
            pull_request_id="pr-1",
            pull_request_name="T",
            author_id="author1",
            assigned_reviewers=["r1", "r2"],
        ))

        pr = memory_store.find_pr_by_id("pr-1")
        pr.assigned_reviewers[0] = "r3"
        pr.pull_request_name = "Changed"
        listed = memory_store.find_prs_by_reviewer("r2")
        listed[0].assigned_reviewers.clear()

        stored = memory_store.find_pr_by_id("pr-1")
        assert stored.assigned_reviewers == ["r1", "r2"]
        assert stored.pull_request_name == "T"

    def test_stored_pr_is_a_copy(self, memory_store):
        """Test that changing the caller's PR after a write does not leak in."""
        pr = PullRequest(
            pull_request_id="pr-1",
            pull_request_name="T",
            author_id="author1",
            assigned_reviewers=["r1"],
        )
        memory_store.create_pr(pr)

        pr.assigned_reviewers.append("r2")

        assert memory_store.find_pr_by_id("pr-1").assigned_reviewers == ["r1"]

    def test_returned_user_is_a_copy(self, memory_store):
        """Test that changing a returned user does not change stored state."""
        user = memory_store.find_user_by_id("r1")
        user.is_active = False

        assert memory_store.find_user_by_id("r1").is_active is True

    def test_find_prs_by_reviewer(self, memory_store):
        """Test listing PRs by reviewer."""
        memory_store.create_pr(PullRequest(
            pull_request_id="pr-1", pull_request_name="One",
            author_id="author1", assigned_reviewers=["r1"],
        ))
        memory_store.create_pr(PullRequest(
            pull_request_id="pr-2", pull_request_name="Two",
            author_id="author1", assigned_reviewers=["r2"],
        ))

        assert [pr.pull_request_id for pr in memory_store.find_prs_by_reviewer("r2")] == ["pr-2"]
        assert memory_store.find_prs_by_reviewer("r3") == []
