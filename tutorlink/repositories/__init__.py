"""
Repository layer for TutorLink.

Repositories wrap SQLAlchemy queries and raise RepositoryException on
database errors. They flush but never commit.
"""

from .base_repository import BaseRepository
from .factory import RepositoryFactory

__all__ = ["BaseRepository", "RepositoryFactory"]
