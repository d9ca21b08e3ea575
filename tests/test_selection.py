"""
Tests for Candidate Selection and Reviewer Picking
"""

import random

import pytest

from app.models import User
from app.services.candidates import select_candidates
from app.services.picker import ReviewerPicker


def make_users(*specs):
    return [
        User(user_id=user_id, username=user_id, team_name="backend", is_active=active)
        for user_id, active in specs
    ]


class TestSelectCandidates:
    """Test suite for select_candidates."""

    def test_filters_inactive_and_excluded(self):
        """Test that only active, non-excluded members remain."""
        users = make_users(("a", True), ("b", False), ("c", True), ("d", True))

        candidates = select_candidates(users, exclude={"a"})

        assert [u.user_id for u in candidates] == ["c", "d"]

    def test_keeps_input_order(self):
        """Test that output order follows input order, not ids."""
        users = make_users(("z", True), ("a", True), ("m", True))

        candidates = select_candidates(users)

        assert [u.user_id for u in candidates] == ["z", "a", "m"]

    def test_empty_team(self):
        """Test that an empty team yields no candidates."""
        assert select_candidates([], exclude={"a"}) == []

    def test_all_excluded(self):
        """Test that excluding everyone yields no candidates."""
        users = make_users(("a", True), ("b", True))

        assert select_candidates(users, exclude={"a", "b"}) == []


class TestReviewerPicker:
    """Test suite for ReviewerPicker."""

    def test_small_pool_returned_whole_without_randomness(self, fixed_source):
        """Test that a pool no larger than k is returned in order."""
        source = fixed_source([0])
        picker = ReviewerPicker(rng=source)

        picked = picker.pick(make_users(("b", True), ("a", True)), 2)

        assert picked == ["b", "a"]
        assert source.calls == []

    def test_large_pool_uses_source(self, fixed_source):
        """Test that a larger pool is sampled through the injected source."""
        source = fixed_source([2, 0])
        picker = ReviewerPicker(rng=source)

        picked = picker.pick(make_users(("a", True), ("b", True), ("c", True)), 2)

        assert picked == ["c", "a"]
        assert source.calls == [([0, 1, 2], 2)]

    def test_same_seed_same_picks(self):
        """Test that seeded pickers are reproducible."""
        users = make_users(*[(f"u{i}", True) for i in range(10)])

        first = [ReviewerPicker(seed=123).pick(users, 2) for _ in range(3)]
        second = [ReviewerPicker(seed=123).pick(users, 2) for _ in range(3)]

        assert first == second

    def test_seed_matches_random_sample(self):
        """Test that a seed behaves exactly like random.Random(seed).sample."""
        users = make_users(*[(f"u{i}", True) for i in range(6)])
        expected = [
            users[i].user_id for i in random.Random(99).sample(range(6), 2)
        ]

        assert ReviewerPicker(seed=99).pick(users, 2) == expected

    def test_never_repeats(self):
        """Test that picks are distinct across many seeds."""
        users = make_users(*[(f"u{i}", True) for i in range(5)])

        for seed in range(50):
            picked = ReviewerPicker(seed=seed).pick(users, 3)
            assert len(picked) == 3
            assert len(set(picked)) == 3

    def test_zero_and_empty(self):
        """Test degenerate sizes."""
        picker = ReviewerPicker(seed=1)

        assert picker.pick([], 2) == []
        assert picker.pick(make_users(("a", True), ("b", True)), 0) == []

    def test_negative_count(self):
        """Test that a negative count is rejected."""
        with pytest.raises(ValueError):
            ReviewerPicker(seed=1).pick(make_users(("a", True)), -1)
