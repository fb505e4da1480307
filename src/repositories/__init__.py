# Data access layer - SQLAlchemy query collections
from src.repositories.collections import PaginatedResult, QueryCollection

__all__ = [
    "PaginatedResult",
    "QueryCollection",
]
