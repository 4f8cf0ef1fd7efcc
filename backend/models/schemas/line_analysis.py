"""Per-line inputs and classifier output."""

from pydantic import BaseModel, ConfigDict, Field


class TextLine(BaseModel):
    """A trimmed, non-empty line with its 0-based ordinal in the raw document.

    Blank lines are dropped before classification but still count towards
    ``index``, so a gap between consecutive indices marks a blank line.
    """
    model_config = ConfigDict(frozen=True)

    text: str
    index: int = Field(ge=0)


class ClassificationScore(BaseModel):
    """Signal strength of one line along each axis, each in [0, 1]."""
    model_config = ConfigDict(frozen=True)

    job_title: float = Field(default=0.0, ge=0.0, le=1.0)
    company: float = Field(default=0.0, ge=0.0, le=1.0)
    date: float = Field(default=0.0, ge=0.0, le=1.0)
    description: float = Field(default=0.0, ge=0.0, le=1.0)
