"""
Application Layer Package

This package contains the batch use cases. It orchestrates the flow of
observations from the repositories through the domain services and
back to storage.
"""

# Re-export submodules
from farecast.application import dtos, use_cases

__all__ = ["dtos", "use_cases"]
