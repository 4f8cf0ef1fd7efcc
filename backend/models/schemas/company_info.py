"""Website lookup result for a company or institution."""

from pydantic import BaseModel, ConfigDict


class CompanyInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    website: str | None = None
    domain: str | None = None
