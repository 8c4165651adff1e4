"""
Comparison Models

Pydantic models for the data that flows through one comparison run:
scraped product → normalized query → indexed catalog → annotated matches.
"""

import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


_PRICE_PATTERN = re.compile(r"\d[\d,]*\.?\d*")


def parse_price(value: Any) -> Optional[float]:
    """
    Read a price from scraped text.

    Takes the first digit run (thousands separators allowed), e.g.
    "$1,299.99" → 1299.99, "From 45 USD" → 45.0. Text without digits
    gives None.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    match = _PRICE_PATTERN.search(str(value))
    if not match:
        return None
    return float(match.group(0).replace(",", ""))


# =============================================================================
# Inputs
# =============================================================================


class RawProduct(BaseModel):
    """Product name and price as captured from the shop page."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Page heading, may be empty")
    price: Optional[float] = Field(default=None, description="Current price")

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_empty(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> Optional[float]:
        return parse_price(value)


class CatalogEntry(BaseModel):
    """One raw catalog listing as delivered by the pricing service."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    id: str = ""
    name: str
    price: float = Field(allow_inf_nan=False)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name is blank")
        return value

    @classmethod
    def from_record(cls, record: Any) -> "CatalogEntry":
        """
        Build an entry from either a flat record or a search hit.

        Search hits look like {"_id": "...", "_source": {"name", "price", "imageUrl"}}.
        """
        if isinstance(record, cls):
            return record
        if not isinstance(record, dict):
            raise ValueError(f"expected a mapping, got {type(record).__name__}")
        if isinstance(record.get("_source"), dict):
            flat = dict(record["_source"])
            if "_id" in record:
                flat.setdefault("id", record["_id"])
            return cls.model_validate(flat)
        return cls.model_validate(record)


# =============================================================================
# Derived Values
# =============================================================================


class NormalizedQuery(BaseModel):
    """Lowercase keywords taken from the start of a product name."""

    model_config = ConfigDict(frozen=True)

    keywords: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.keywords

    @property
    def text(self) -> str:
        return " ".join(self.keywords)

    def __len__(self) -> int:
        return len(self.keywords)


class IndexedEntry(BaseModel):
    """Catalog listing projected for matching: lowercase name, default image."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: float
    image: str

    @property
    def tokens(self) -> list[str]:
        return self.name.split()


class SavingsSign(str, Enum):
    CHEAPER = "cheaper"
    MORE_EXPENSIVE = "more_expensive"
    EQUAL = "equal"


class SavingsOutcome(BaseModel):
    """Signed difference between the scraped price and a listing price."""

    model_config = ConfigDict(frozen=True)

    delta: float
    percentage: float
    sign: SavingsSign

    def rounded(self, digits: int = 2) -> "SavingsOutcome":
        return SavingsOutcome(
            delta=round(self.delta, digits),
            percentage=round(self.percentage, digits),
            sign=self.sign,
        )


class MatchResult(BaseModel):
    """A matched listing, annotated with savings when a price was scraped."""

    model_config = ConfigDict(frozen=True)

    entry: IndexedEntry
    current_price: Optional[float] = None
    savings: Optional[SavingsOutcome] = None
    product_url: str = ""


class ComparisonStatus(str, Enum):
    OK = "ok"
    NO_MATCHES = "no_matches"
    EMPTY_QUERY = "empty_query"


class ComparisonResult(BaseModel):
    """Outcome of one comparison run."""

    product: RawProduct
    query: NormalizedQuery
    matches: list[MatchResult] = Field(default_factory=list)
    catalog_size: int = 0
    skipped_count: int = 0
    status: ComparisonStatus = ComparisonStatus.OK
    stage_ms: dict[str, int] = Field(default_factory=dict)
