"""
Storage Package

This package contains the persistence contract and its implementations:
- base: ReviewStore protocol and store exceptions
- memory: thread-safe in-memory store
"""

from app.storage.base import (
    RecordAlreadyExists,
    RecordNotFound,
    ReviewStore,
    StoreError,
    UserAlreadyExists,
)
from app.storage.memory import InMemoryReviewStore

__all__ = [
    "ReviewStore",
    "StoreError",
    "RecordNotFound",
    "RecordAlreadyExists",
    "UserAlreadyExists",
    "InMemoryReviewStore",
]
