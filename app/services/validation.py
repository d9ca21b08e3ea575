"""
Input Validation Module

Pure structural checks applied before the assignment service reads or
writes anything. Each check raises InputValidationError on the first
problem found; a blank value (empty or whitespace only) counts as empty.
"""

from typing import Optional

from app.errors import ErrorKind, InputValidationError
from app.models import Team


def is_blank(value: Optional[str]) -> bool:
    """Check if a string is missing, empty or whitespace only."""
    return value is None or not value.strip()


def validate_team(team: Team, operation: str = "create_team") -> None:
    """
    Check that a team has a name and only well-formed members.

    Args:
        team: Team to check
        operation: Operation name attached to the error

    Raises:
        InputValidationError: EMPTY_TEAM_NAME, EMPTY_TEAM_MEMBERS,
            EMPTY_MEMBER_ID or EMPTY_MEMBER_NAME
    """
    if is_blank(team.team_name):
        raise InputValidationError(
            ErrorKind.EMPTY_TEAM_NAME, "empty team name", operation
        )

    if not team.members:
        raise InputValidationError(
            ErrorKind.EMPTY_TEAM_MEMBERS,
            "team has no members",
            operation,
            team_name=team.team_name,
        )

    for position, member in enumerate(team.members):
        if is_blank(member.user_id):
            raise InputValidationError(
                ErrorKind.EMPTY_MEMBER_ID,
                "empty team member user ID",
                operation,
                team_name=team.team_name,
                position=position,
            )
        if is_blank(member.username):
            raise InputValidationError(
                ErrorKind.EMPTY_MEMBER_NAME,
                "empty team member username",
                operation,
                team_name=team.team_name,
                user_id=member.user_id,
            )


def validate_pr_input(
    pr_id: str,
    name: str,
    author_id: str,
    operation: str = "create_pr"
) -> None:
    """
    Check the fields needed to open a pull request.

    Raises:
        InputValidationError: EMPTY_PR_ID, EMPTY_PR_NAME or EMPTY_AUTHOR_ID
    """
    if is_blank(pr_id):
        raise InputValidationError(
            ErrorKind.EMPTY_PR_ID, "empty pull request ID", operation
        )
    if is_blank(name):
        raise InputValidationError(
            ErrorKind.EMPTY_PR_NAME,
            "empty pull request name",
            operation,
            pr_id=pr_id,
        )
    if is_blank(author_id):
        raise InputValidationError(
            ErrorKind.EMPTY_AUTHOR_ID,
            "empty author ID of pull request",
            operation,
            pr_id=pr_id,
        )
