"""
Review Assignment Service Module

This module implements the operations of the reviewer assignment service:
team creation and lookup, user activation, pull request creation, merge,
and reviewer reassignment.

Design Decisions:
- Validate first; invalid input never reaches the store
- Every operation is a plain synchronous sequence: validate, read,
  decide, write
- Store failures are wrapped in StorageError with the operation name;
  nothing is retried here
- Merging a merged PR and setting a user's flag to its current value are
  no-ops that skip the store write

Concurrent merge/reassign calls on the same PR are not guarded: the last
update_pr wins.
"""

import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional, Tuple

from app.config import get_settings
from app.errors import (
    ConflictError,
    ErrorKind,
    InputValidationError,
    NotFoundError,
    ServiceError,
    StorageError,
)
from app.logging_config import get_logger
from app.models import PullRequest, PullRequestStatus, Team, User
from app.services.candidates import select_candidates
from app.services.picker import ReviewerPicker
from app.services.validation import is_blank, validate_pr_input, validate_team
from app.storage import (
    InMemoryReviewStore,
    RecordAlreadyExists,
    RecordNotFound,
    ReviewStore,
    UserAlreadyExists,
)

logger = get_logger(__name__)

MAX_REVIEWERS = 2
DEFAULT_REVIEWER_COUNT = 2
REPLACEMENT_REVIEWER_COUNT = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class ReviewAssignmentService:
    """
    Assigns reviewers to pull requests and keeps assignments valid.

    Usage:
        service = ReviewAssignmentService(InMemoryReviewStore(), ReviewerPicker(seed=1))
        service.create_team(team)
        pr = service.create_pr("pr-1", "Add search", "u1")
    """

    def __init__(
        self,
        store: ReviewStore,
        picker: Optional[ReviewerPicker] = None,
        reviewer_count: int = DEFAULT_REVIEWER_COUNT,
        replacement_count: int = REPLACEMENT_REVIEWER_COUNT,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the service.

        Args:
            store: Persistence collaborator
            picker: Reviewer picker; an entropy-seeded one if omitted
            reviewer_count: Reviewers assigned when a PR is created
            replacement_count: Reviewers drawn when one is reassigned
            clock: Returns the current time; UTC now if omitted

        Raises:
            ValueError: If reviewer_count is outside 0..MAX_REVIEWERS or
                replacement_count is not 1
        """
        if not 0 <= reviewer_count <= MAX_REVIEWERS:
            raise ValueError(
                f"reviewer_count must be between 0 and {MAX_REVIEWERS}, got {reviewer_count}"
            )
        if replacement_count != REPLACEMENT_REVIEWER_COUNT:
            raise ValueError(
                f"replacement_count must be {REPLACEMENT_REVIEWER_COUNT}, got {replacement_count}"
            )

        self.store = store
        self.picker = picker or ReviewerPicker()
        self.reviewer_count = reviewer_count
        self.replacement_count = replacement_count
        self._clock = clock or _utcnow

    @contextmanager
    def _store_call(self, operation: str, **context) -> Iterator[None]:
        """Wrap unexpected store exceptions in StorageError."""
        try:
            yield
        except ServiceError:
            raise
        except Exception as e:
            logger.error(
                "Storage call failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                **context
            )
            raise StorageError(
                f"{operation}: storage failure: {e}", operation, **context
            ) from e

    def _reject(self, error: ServiceError, start: float) -> ServiceError:
        """Log a rejected request and hand the error back for raising."""
        logger.warning(
            "Request rejected",
            operation=error.operation,
            code=error.kind.value,
            error=error.message,
            duration_ms=_elapsed_ms(start),
            **error.context
        )
        return error

    # =========================================================================
    # Teams
    # =========================================================================
    def create_team(self, team: Team) -> Team:
        """
        Create a team together with its members.

        Raises:
            InputValidationError: Malformed team
            ConflictError: TEAM_EXISTS, or USER_EXISTS for a member id
                that is already stored
            StorageError: Store failure
        """
        operation = "create_team"
        start = time.perf_counter()

        try:
            validate_team(team, operation)
        except InputValidationError as e:
            raise self._reject(e, start)

        logger.debug(
            "Starting team creation",
            operation=operation,
            team_name=team.team_name,
            members_count=len(team.members)
        )

        with self._store_call(operation, team_name=team.team_name):
            if self.store.team_exists(team.team_name):
                raise self._reject(ConflictError(
                    ErrorKind.TEAM_EXISTS,
                    f"team {team.team_name} already exists",
                    operation,
                    team_name=team.team_name,
                ), start)

            seen = set()
            for member in team.members:
                if member.user_id in seen or self.store.find_user_by_id(member.user_id):
                    raise self._reject(ConflictError(
                        ErrorKind.USER_EXISTS,
                        f"user {member.user_id} already exists",
                        operation,
                        team_name=team.team_name,
                        user_id=member.user_id,
                    ), start)
                seen.add(member.user_id)

            try:
                self.store.create_team(team)
            except UserAlreadyExists as e:
                raise self._reject(ConflictError(
                    ErrorKind.USER_EXISTS,
                    str(e),
                    operation,
                    team_name=team.team_name,
                    user_id=e.user_id,
                ), start) from e
            except RecordAlreadyExists as e:
                raise self._reject(ConflictError(
                    ErrorKind.TEAM_EXISTS, str(e), operation, team_name=team.team_name
                ), start) from e

        logger.info(
            "Team created successfully",
            operation=operation,
            team_name=team.team_name,
            members_count=len(team.members),
            duration_ms=_elapsed_ms(start)
        )
        return team

    def get_team(self, team_name: str) -> Team:
        """
        Get a team with its members in stored order.

        Raises:
            InputValidationError: EMPTY_TEAM_NAME
            NotFoundError: TEAM_NOT_FOUND
        """
        operation = "get_team"
        start = time.perf_counter()

        if is_blank(team_name):
            raise self._reject(InputValidationError(
                ErrorKind.EMPTY_TEAM_NAME, "empty team name", operation
            ), start)

        with self._store_call(operation, team_name=team_name):
            team = self.store.find_team_by_name(team_name)

        if team is None:
            raise self._reject(NotFoundError(
                ErrorKind.TEAM_NOT_FOUND,
                f"team {team_name} not found",
                operation,
                team_name=team_name,
            ), start)

        logger.info(
            "Team retrieved successfully",
            operation=operation,
            team_name=team_name,
            members_count=len(team.members),
            duration_ms=_elapsed_ms(start)
        )
        return team

    # =========================================================================
    # Users
    # =========================================================================
    def _require_user(self, user_id: str, operation: str, start: float) -> User:
        with self._store_call(operation, user_id=user_id):
            user = self.store.find_user_by_id(user_id)
        if user is None:
            raise self._reject(NotFoundError(
                ErrorKind.USER_NOT_FOUND,
                f"user {user_id} not found",
                operation,
                user_id=user_id,
            ), start)
        return user

    def set_user_active(self, user_id: str, is_active: bool) -> User:
        """
        Set a user's active flag.

        Setting the flag to its current value returns the user untouched
        and does not write to the store.

        Raises:
            InputValidationError: EMPTY_USER_ID
            NotFoundError: USER_NOT_FOUND
        """
        operation = "set_user_active"
        start = time.perf_counter()

        if is_blank(user_id):
            raise self._reject(InputValidationError(
                ErrorKind.EMPTY_USER_ID, "empty user ID", operation
            ), start)

        user = self._require_user(user_id, operation, start)

        if user.is_active == is_active:
            logger.debug(
                "User already has desired active status",
                operation=operation,
                user_id=user_id,
                is_active=is_active,
                duration_ms=_elapsed_ms(start)
            )
            return user

        with self._store_call(operation, user_id=user_id):
            try:
                self.store.set_user_active(user_id, is_active)
            except RecordNotFound as e:
                raise self._reject(NotFoundError(
                    ErrorKind.USER_NOT_FOUND, str(e), operation, user_id=user_id
                ), start) from e

        user.is_active = is_active

        logger.info(
            "User active status updated",
            operation=operation,
            user_id=user_id,
            is_active=is_active,
            team_name=user.team_name,
            duration_ms=_elapsed_ms(start)
        )
        return user

    def get_user_reviews(self, user_id: str) -> List[PullRequest]:
        """
        Get the pull requests a user is currently assigned to review.

        Raises:
            InputValidationError: EMPTY_USER_ID
            NotFoundError: USER_NOT_FOUND
        """
        operation = "get_user_reviews"
        start = time.perf_counter()

        if is_blank(user_id):
            raise self._reject(InputValidationError(
                ErrorKind.EMPTY_USER_ID, "empty user ID", operation
            ), start)

        self._require_user(user_id, operation, start)

        with self._store_call(operation, user_id=user_id):
            prs = self.store.find_prs_by_reviewer(user_id)

        logger.info(
            "User reviews retrieved",
            operation=operation,
            user_id=user_id,
            reviews_count=len(prs),
            duration_ms=_elapsed_ms(start)
        )
        return prs

    # =========================================================================
    # Pull Requests
    # =========================================================================
    def _require_pr(self, pr_id: str, operation: str, start: float) -> PullRequest:
        with self._store_call(operation, pr_id=pr_id):
            pr = self.store.find_pr_by_id(pr_id)
        if pr is None:
            raise self._reject(NotFoundError(
                ErrorKind.PR_NOT_FOUND,
                f"pull request {pr_id} not found",
                operation,
                pr_id=pr_id,
            ), start)
        return pr

    def create_pr(self, pr_id: str, name: str, author_id: str) -> PullRequest:
        """
        Open a pull request and assign reviewers from the author's team.

        Up to `reviewer_count` active teammates other than the author are
        assigned; a small team yields fewer (possibly zero) reviewers.

        Raises:
            InputValidationError: EMPTY_PR_ID, EMPTY_PR_NAME, EMPTY_AUTHOR_ID
            NotFoundError: USER_NOT_FOUND for an unknown author
            ConflictError: PR_EXISTS
        """
        operation = "create_pr"
        start = time.perf_counter()

        try:
            validate_pr_input(pr_id, name, author_id, operation)
        except InputValidationError as e:
            raise self._reject(e, start)

        logger.debug(
            "Starting PR creation",
            operation=operation,
            pr_id=pr_id,
            pr_name=name,
            author_id=author_id
        )

        with self._store_call(operation, pr_id=pr_id, author_id=author_id):
            author = self.store.find_user_by_id(author_id)
            if author is None:
                raise self._reject(NotFoundError(
                    ErrorKind.USER_NOT_FOUND,
                    f"author not found: user {author_id} not found",
                    operation,
                    pr_id=pr_id,
                    author_id=author_id,
                ), start)

            if self.store.find_pr_by_id(pr_id) is not None:
                raise self._reject(ConflictError(
                    ErrorKind.PR_EXISTS,
                    f"pull request {pr_id} already exists",
                    operation,
                    pr_id=pr_id,
                ), start)

            candidates = select_candidates(
                self.store.find_users_by_team(author.team_name),
                exclude={author_id},
            )
            reviewers = self.picker.pick(candidates, self.reviewer_count)

            logger.debug(
                "Reviewers selected",
                operation=operation,
                pr_id=pr_id,
                candidates_count=len(candidates),
                reviewers=reviewers
            )

            pr = PullRequest(
                pull_request_id=pr_id,
                pull_request_name=name,
                author_id=author_id,
                status=PullRequestStatus.OPEN,
                assigned_reviewers=reviewers,
                created_at=self._clock(),
            )

            try:
                self.store.create_pr(pr)
            except RecordAlreadyExists as e:
                raise self._reject(ConflictError(
                    ErrorKind.PR_EXISTS, str(e), operation, pr_id=pr_id
                ), start) from e

        logger.info(
            "PR created successfully",
            operation=operation,
            pr_id=pr_id,
            author_id=author_id,
            team_name=author.team_name,
            reviewers_count=len(reviewers),
            duration_ms=_elapsed_ms(start)
        )
        return pr

    def merge_pr(self, pr_id: str) -> PullRequest:
        """
        Mark a pull request as merged.

        Merging an already merged pull request returns it unchanged.

        Raises:
            InputValidationError: EMPTY_PR_ID
            NotFoundError: PR_NOT_FOUND
        """
        operation = "merge_pr"
        start = time.perf_counter()

        if is_blank(pr_id):
            raise self._reject(InputValidationError(
                ErrorKind.EMPTY_PR_ID, "empty pull request ID", operation
            ), start)

        pr = self._require_pr(pr_id, operation, start)

        if pr.is_merged:
            logger.debug(
                "PR already merged",
                operation=operation,
                pr_id=pr_id,
                duration_ms=_elapsed_ms(start)
            )
            return pr

        pr.status = PullRequestStatus.MERGED
        pr.merged_at = self._clock()

        with self._store_call(operation, pr_id=pr_id):
            try:
                self.store.update_pr(pr)
            except RecordNotFound as e:
                raise self._reject(NotFoundError(
                    ErrorKind.PR_NOT_FOUND, str(e), operation, pr_id=pr_id
                ), start) from e

        logger.info(
            "PR merged successfully",
            operation=operation,
            pr_id=pr_id,
            reviewers_count=len(pr.assigned_reviewers),
            duration_ms=_elapsed_ms(start)
        )
        return pr

    def reassign_reviewer(
        self,
        pr_id: str,
        old_reviewer_id: str
    ) -> Tuple[PullRequest, str]:
        """
        Replace one reviewer of an open pull request.

        The replacement is an active member of the old reviewer's team who
        is neither the author nor already reviewing this pull request.

        Returns:
            Tuple of (updated pull request, new reviewer id)

        Raises:
            InputValidationError: EMPTY_PR_ID, EMPTY_USER_ID
            NotFoundError: PR_NOT_FOUND, USER_NOT_FOUND
            ConflictError: PR_MERGED, NOT_ASSIGNED, NO_CANDIDATE
        """
        operation = "reassign_reviewer"
        start = time.perf_counter()

        if is_blank(pr_id):
            raise self._reject(InputValidationError(
                ErrorKind.EMPTY_PR_ID, "empty pull request ID", operation
            ), start)
        if is_blank(old_reviewer_id):
            raise self._reject(InputValidationError(
                ErrorKind.EMPTY_USER_ID, "empty user ID", operation, pr_id=pr_id
            ), start)

        logger.debug(
            "Starting reviewer reassignment",
            operation=operation,
            pr_id=pr_id,
            old_user_id=old_reviewer_id
        )

        pr = self._require_pr(pr_id, operation, start)

        if pr.is_merged:
            raise self._reject(ConflictError(
                ErrorKind.PR_MERGED,
                "cannot reassign on merged PR",
                operation,
                pr_id=pr_id,
            ), start)

        old_reviewer = self._require_user(old_reviewer_id, operation, start)

        if old_reviewer_id not in pr.assigned_reviewers:
            raise self._reject(ConflictError(
                ErrorKind.NOT_ASSIGNED,
                f"reviewer {old_reviewer_id} not assigned to this PR",
                operation,
                pr_id=pr_id,
                old_user_id=old_reviewer_id,
            ), start)

        exclude = {pr.author_id, *pr.assigned_reviewers}

        with self._store_call(operation, pr_id=pr_id, team_name=old_reviewer.team_name):
            candidates = select_candidates(
                self.store.find_users_by_team(old_reviewer.team_name),
                exclude=exclude,
            )

        picked = self.picker.pick(candidates, self.replacement_count)
        if not picked:
            raise self._reject(ConflictError(
                ErrorKind.NO_CANDIDATE,
                "no active replacement candidate in team",
                operation,
                pr_id=pr_id,
                team_name=old_reviewer.team_name,
            ), start)

        new_reviewer_id = picked[0]
        position = pr.assigned_reviewers.index(old_reviewer_id)
        pr.assigned_reviewers[position] = new_reviewer_id

        with self._store_call(operation, pr_id=pr_id):
            try:
                self.store.update_pr(pr)
            except RecordNotFound as e:
                raise self._reject(NotFoundError(
                    ErrorKind.PR_NOT_FOUND, str(e), operation, pr_id=pr_id
                ), start) from e

        logger.info(
            "Reviewer reassigned successfully",
            operation=operation,
            pr_id=pr_id,
            old_user_id=old_reviewer_id,
            new_user_id=new_reviewer_id,
            team_name=old_reviewer.team_name,
            duration_ms=_elapsed_ms(start)
        )
        return pr, new_reviewer_id


# Singleton instance
_service_instance: Optional[ReviewAssignmentService] = None


def get_assignment_service() -> ReviewAssignmentService:
    """Get the singleton ReviewAssignmentService backed by the in-memory store."""
    global _service_instance
    if _service_instance is None:
        settings = get_settings()
        _service_instance = ReviewAssignmentService(
            InMemoryReviewStore(),
            picker=ReviewerPicker(seed=settings.reviewer_seed),
            reviewer_count=settings.reviewer_count,
        )
    return _service_instance
