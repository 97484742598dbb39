"""
Infrastructure Layer Package

MongoDB implementations of the storage interfaces defined in the
domain layer.
"""

from farecast.infrastructure import database, repositories

__all__ = ["database", "repositories"]
