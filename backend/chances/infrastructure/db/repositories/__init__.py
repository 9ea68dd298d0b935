"""
Repository Layer for the Chances Calculator

Exports all repository classes for dependency injection.
"""

from chances.infrastructure.db.repositories.base_repository import (
    BaseRepository,
    IReadRepository,
)
from chances.infrastructure.db.repositories.school_repository import (
    SchoolRepository,
    school_to_data,
)
from chances.infrastructure.db.repositories.submission_repository import (
    SubmissionRepository,
)


__all__ = [
    # Base
    "BaseRepository",
    "IReadRepository",
    # Repositories
    "SchoolRepository",
    "SubmissionRepository",
    "school_to_data",
]
