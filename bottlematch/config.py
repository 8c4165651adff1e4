"""
Matching Configuration

Explicit configuration value for the Normalizer, Indexer and Matcher.
The HTTP service and the CLI build one of these from their own settings.
"""

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_MIN_MATCH_RATIO = 0.7
DEFAULT_MAX_KEYWORDS = 5
DEFAULT_PRODUCT_URL_BASE = "https://www.baxus.co/asset/"
NO_IMAGE = "default_image_url.jpg"


class MatchConfig(BaseModel):
    """Thresholds and presentation markers for one comparison run."""

    model_config = ConfigDict(frozen=True)

    min_match_ratio: float = Field(
        default=DEFAULT_MIN_MATCH_RATIO,
        gt=0.0,
        le=1.0,
        description="Fraction of query keywords a listing name must cover",
    )
    max_keywords: int = Field(
        default=DEFAULT_MAX_KEYWORDS,
        ge=1,
        description="Keywords kept from the start of the product name",
    )
    product_url_base: str = Field(
        default=DEFAULT_PRODUCT_URL_BASE,
        description="Prefix joined with a listing id to build its page URL",
    )
    no_image: str = Field(
        default=NO_IMAGE,
        description="Image marker used when a listing has no image",
    )
    strict_catalog: bool = Field(
        default=False,
        description="Fail the whole catalog on the first malformed record",
    )

    def with_overrides(self, **overrides) -> "MatchConfig":
        """Return a copy with the non-None overrides applied and re-validated."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return MatchConfig(**values)


DEFAULT_CONFIG = MatchConfig()
