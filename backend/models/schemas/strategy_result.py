"""Output of one experience extraction strategy."""

from pydantic import BaseModel, ConfigDict

from models.schemas.resume_parsed import WorkExperience


class StrategyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy: str
    experiences: list[WorkExperience] = []
    score: int = 0
