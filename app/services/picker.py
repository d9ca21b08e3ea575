"""
Reviewer Picker Module

Random selection of reviewers without replacement. The random source is
injected at construction time so a seeded generator makes every pick
reproducible in tests.

Design Decisions:
- Small pools (size <= k) are returned whole, in order, without
  consuming randomness
- Larger pools are sampled with the source's `sample`, which never
  repeats an index
"""

import random
from typing import List, Optional, Protocol, Sequence

from app.models import User


class RandomSource(Protocol):
    """Anything that can sample without replacement, like random.Random."""

    def sample(self, population: Sequence[int], k: int) -> List[int]: ...


class ReviewerPicker:
    """
    Picks up to k reviewer ids from a candidate pool.

    Usage:
        picker = ReviewerPicker(seed=42)
        reviewer_ids = picker.pick(candidates, 2)
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize the picker.

        Args:
            rng: Random source to use; takes precedence over seed
            seed: Seed for a private random.Random; None seeds from entropy
        """
        if rng is None:
            rng = random.Random(seed)
        self._rng = rng

    def pick(self, candidates: Sequence[User], k: int) -> List[str]:
        """
        Pick min(k, len(candidates)) distinct reviewer ids.

        Args:
            candidates: Eligible users in selection order
            k: Number of reviewers wanted

        Returns:
            Selected user ids

        Raises:
            ValueError: If k is negative
        """
        if k < 0:
            raise ValueError(f"Reviewer count must be non-negative, got {k}")

        if len(candidates) <= k:
            return [candidate.user_id for candidate in candidates]

        indices = self._rng.sample(range(len(candidates)), k)
        return [candidates[index].user_id for index in indices]
