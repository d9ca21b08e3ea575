"""
API Handler Module

This module defines the FastAPI endpoints of the reviewer assignment service.
Handlers only translate between JSON and service calls; errors raised by the
service are turned into responses by the exception handler in app.main.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, Request, status

from app.logging_config import get_logger
from app.models import (
    CreatePullRequestRequest,
    MergePullRequestRequest,
    ReassignReviewerRequest,
    SetUserActiveRequest,
    Team,
)
from app.services.assignment import ReviewAssignmentService

logger = get_logger(__name__)

router = APIRouter()


def get_service(request: Request) -> ReviewAssignmentService:
    """Get the assignment service attached to the running application."""
    return request.app.state.assignment_service


# =============================================================================
# Teams
# =============================================================================

@router.post("/team/add", status_code=status.HTTP_201_CREATED, tags=["teams"])
async def create_team(
    team: Team,
    service: ReviewAssignmentService = Depends(get_service)
) -> Dict[str, Any]:
    """Create a team with its members."""
    created = service.create_team(team)
    return {"team": created.model_dump(mode="json")}


@router.get("/team/get", tags=["teams"])
async def get_team(
    team_name: str = Query(default=""),
    service: ReviewAssignmentService = Depends(get_service)
) -> Dict[str, Any]:
    """Get a team and its members."""
    return service.get_team(team_name).model_dump(mode="json")


# =============================================================================
# Users
# =============================================================================

@router.post("/users/setIsActive", tags=["users"])
async def set_user_active(
    body: SetUserActiveRequest,
    service: ReviewAssignmentService = Depends(get_service)
) -> Dict[str, Any]:
    """Activate or deactivate a user."""
    user = service.set_user_active(body.user_id, body.is_active)
    return {"user": user.model_dump(mode="json")}


@router.get("/users/getReview", tags=["users"])
async def get_user_reviews(
    user_id: str = Query(default=""),
    service: ReviewAssignmentService = Depends(get_service)
) -> Dict[str, Any]:
    """List the pull requests a user is reviewing."""
    prs = service.get_user_reviews(user_id)
    return {
        "user_id": user_id,
        "pull_requests": [pr.to_short().model_dump(mode="json") for pr in prs],
    }


# =============================================================================
# Pull Requests
# =============================================================================

@router.post(
    "/pullRequest/create",
    status_code=status.HTTP_201_CREATED,
    tags=["pull requests"]
)
async def create_pull_request(
    body: CreatePullRequestRequest,
    service: ReviewAssignmentService = Depends(get_service)
) -> Dict[str, Any]:
    """Open a pull request and assign reviewers."""
    pr = service.create_pr(body.pull_request_id, body.pull_request_name, body.author_id)
    return {"pr": pr.model_dump(mode="json")}


@router.post("/pullRequest/merge", tags=["pull requests"])
async def merge_pull_request(
    body: MergePullRequestRequest,
    service: ReviewAssignmentService = Depends(get_service)
) -> Dict[str, Any]:
    """Merge a pull request. Merging twice is not an error."""
    pr = service.merge_pr(body.pull_request_id)
    return {"pr": pr.model_dump(mode="json")}


@router.post("/pullRequest/reassign", tags=["pull requests"])
async def reassign_reviewer(
    body: ReassignReviewerRequest,
    service: ReviewAssignmentService = Depends(get_service)
) -> Dict[str, Any]:
    """Replace one reviewer of an open pull request."""
    pr, new_reviewer_id = service.reassign_reviewer(
        body.pull_request_id, body.old_reviewer_id
    )
    return {
        "pr": pr.model_dump(mode="json"),
        "replaced_by": new_reviewer_id,
    }
