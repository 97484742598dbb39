"""
Application DTOs - Packages
"""

from pydantic import BaseModel, Field


class PackageBuildResultDTO(BaseModel):
    """Outcome of a package assembly run."""

    created: int = Field(default=0, ge=0, description="Packages persisted")
    candidates: int = Field(
        default=0, ge=0, description="Compatible pairs before deduplication"
    )
    replaced: int = Field(
        default=0, ge=0, description="Packages from the previous run deleted"
    )
