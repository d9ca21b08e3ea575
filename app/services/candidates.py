"""
Candidate Selection Module

Computes the pool of users eligible to review: active team members
that are not excluded. The pool keeps the order the members were given
in; it is the population the picker samples from, not a ranking.
"""

from typing import AbstractSet, List, Sequence

from app.models import User


def select_candidates(
    team_members: Sequence[User],
    exclude: AbstractSet[str] = frozenset()
) -> List[User]:
    """
    Filter team members down to eligible reviewers.

    Args:
        team_members: Members in storage order
        exclude: User ids that must not be picked (author, current reviewers)

    Returns:
        Active, non-excluded members in input order; empty if none qualify
    """
    return [
        member
        for member in team_members
        if member.is_active and member.user_id not in exclude
    ]
