"""Shared schema pieces: pagination envelope and the ORM-reading base model."""

from pydantic import BaseModel, ConfigDict


class ORMModel(BaseModel):
    """Response base: reads attributes straight off ORM rows."""
    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    limit: int
    offset: int
    total: int
