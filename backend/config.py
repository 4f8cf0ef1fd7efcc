import os
from pydantic_settings import BaseSettings


def _parse_lookup_tlds() -> list[str] | None:
    """Parse LOOKUP_TLDS env var as comma-separated string or JSON list."""
    raw = os.environ.get("LOOKUP_TLDS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [t.strip().lstrip(".") for t in raw.split(",") if t.strip()]


class Settings(BaseSettings):
    # Website enrichment
    enrichment_enabled: bool = True
    lookup_timeout_seconds: float = 5.0  # per HTTP attempt
    lookup_tlds: list[str] = ["com", "net", "org"]
    search_url: str = "https://www.google.com/search"
    search_result_limit: int = 3  # search hits validated before giving up
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )

    # Technology ranking
    top_technologies: int = 8
    summary_technologies: int = 5

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_tlds_override = _parse_lookup_tlds()
settings = Settings(**{"lookup_tlds": _tlds_override} if _tlds_override else {})
