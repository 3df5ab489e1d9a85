"""Pydantic models for detected intents, provider records and the context bundle."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class Category(str, Enum):
    CRYPTO = "crypto"
    WEATHER = "weather"
    NEWS = "news"


# Canonical ordering used whenever categories are listed
CATEGORY_ORDER = [Category.CRYPTO, Category.WEATHER, Category.NEWS]


def ordered(categories) -> list[Category]:
    return [c for c in CATEGORY_ORDER if c in set(categories)]


class Intent(BaseModel):
    categories: frozenset[Category] = frozenset()
    coin_id: str = "bitcoin"
    city: Optional[str] = None
    search_query: str = ""

    model_config = {"frozen": True}

    @property
    def needs_lookup(self) -> bool:
        return bool(self.categories)


class CryptoQuote(BaseModel):
    kind: Literal["crypto"] = "crypto"
    coin_id: str
    symbol: str
    name: str
    price_usd: float = Field(..., ge=0)
    change_24h_pct: float = 0.0


class WeatherReport(BaseModel):
    kind: Literal["weather"] = "weather"
    city: str
    temperature_c: float
    description: str
    feels_like_c: Optional[float] = None


class SearchHit(BaseModel):
    title: str
    snippet: str = ""
    url: str = ""


class SearchSummary(BaseModel):
    kind: Literal["news"] = "news"
    text: str = Field(..., min_length=1)
    results: list[SearchHit] = []


ContextRecord = Annotated[
    Union[CryptoQuote, WeatherReport, SearchSummary],
    Field(discriminator="kind"),
]


class ContextBundle(BaseModel):
    crypto_quote: Optional[CryptoQuote] = None
    weather: Optional[WeatherReport] = None
    search_summary: Optional[SearchSummary] = None
    cross_reference: Optional[list[Category]] = None
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def categories(self) -> list[Category]:
        present = []
        if self.crypto_quote is not None:
            present.append(Category.CRYPTO)
        if self.weather is not None:
            present.append(Category.WEATHER)
        if self.search_summary is not None:
            present.append(Category.NEWS)
        return present

    @property
    def is_empty(self) -> bool:
        return not self.categories

    @classmethod
    def from_records(cls, records: list) -> "ContextBundle":
        """Place validated records by kind and derive the cross-reference tag."""
        fields = {}
        for record in records:
            if isinstance(record, CryptoQuote):
                fields["crypto_quote"] = record
            elif isinstance(record, WeatherReport):
                fields["weather"] = record
            elif isinstance(record, SearchSummary):
                fields["search_summary"] = record
            else:
                raise TypeError(f"Unsupported context record: {type(record).__name__}")
        bundle = cls(**fields)
        present = bundle.categories
        if len(present) > 1:
            bundle.cross_reference = present
        return bundle


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of one provider call: a record, or the reason there is none."""

    category: Category
    record: Optional[object] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def success(cls, category: Category, record) -> "ProviderResult":
        return cls(category=category, record=record)

    @classmethod
    def failure(cls, category: Category, error: str) -> "ProviderResult":
        return cls(category=category, error=error)
