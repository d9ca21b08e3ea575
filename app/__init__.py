"""
Pull Request Reviewer Assignment Service

Assigns and reassigns code reviewers for pull requests within a team,
keeping authors off their own reviews and merged pull requests frozen.
"""

__version__ = "1.0.0"
__author__ = "PR Reviewer Assignment Team"
