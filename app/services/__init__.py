"""
Services Package

This package contains the reviewer assignment core:
- validation: structural checks on incoming teams and pull requests
- candidates: eligible reviewer pool computation
- picker: seedable random reviewer selection
- assignment: the review assignment service operations
"""

from app.services.assignment import (
    DEFAULT_REVIEWER_COUNT,
    REPLACEMENT_REVIEWER_COUNT,
    ReviewAssignmentService,
    get_assignment_service,
)
from app.services.candidates import select_candidates
from app.services.picker import RandomSource, ReviewerPicker
from app.services.validation import validate_pr_input, validate_team

__all__ = [
    "ReviewAssignmentService",
    "get_assignment_service",
    "DEFAULT_REVIEWER_COUNT",
    "REPLACEMENT_REVIEWER_COUNT",
    "select_candidates",
    "RandomSource",
    "ReviewerPicker",
    "validate_pr_input",
    "validate_team",
]
