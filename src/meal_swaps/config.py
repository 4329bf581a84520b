"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_swaps.services.goals import GoalPolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_timeout_seconds: float = 15.0
    fdc_page_size: int = 25
    catalog_cache_ttl_seconds: int = 86400
    candidate_limit: int = 50
    max_suggestions: int = 4
    suggest_timeout_seconds: float | None = None
    high_intensity_percent: float = 30.0
    normal_intensity_percent: float = 20.0
    precise_percent_choices: str = "5,10,15,20,25,30,35,40,45,50"
    default_density_g_per_ml: float | None = 1.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("precise_percent_choices")
    @classmethod
    def validate_percent_choices(cls, value: str) -> str:
        """Reject malformed precise percentage lists at load time."""
        parse_percent_choices(value)
        return value

    def goal_policy(self) -> GoalPolicy:
        """Build the intensity tier policy from settings."""
        return GoalPolicy(
            high_percent=self.high_intensity_percent,
            normal_percent=self.normal_intensity_percent,
            precise_choices=parse_percent_choices(self.precise_percent_choices),
        )


def parse_percent_choices(raw: str | None) -> tuple[float, ...]:
    """Parse allowed precise percentages; empty or "*" allows any value.

    Raises ValueError on an entry that is not a percentage in (0, 100].
    """
    if raw is None:
        return ()
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ()
    choices: set[float] = set()
    for chunk in cleaned.split(","):
        value = chunk.strip().rstrip("%")
        if not value:
            continue
        try:
            percent = float(value)
        except ValueError as exc:
            raise ValueError(f"Invalid precise percentage {chunk.strip()!r}") from exc
        if not 0 < percent <= 100:  # noqa: PLR2004
            raise ValueError(f"Precise percentage {percent:g} is outside (0, 100]")
        choices.add(percent)
    return tuple(sorted(choices))
