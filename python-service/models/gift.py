"""
Pydantic models for the gift curation pipeline.
Budget interpretation, product suggestions and affiliate partner reference data.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BudgetBand(str, Enum):
    """Budget size classification derived from the central budget value"""

    LOW = "low"
    MID = "mid"
    HIGH = "high"
    UNKNOWN = "unknown"


class BudgetRange(BaseModel):
    """Numeric budget range parsed from free-form budget text"""

    min: Optional[float] = Field(default=None, description="Lower bound, if stated")
    max: Optional[float] = Field(default=None, description="Upper bound, if stated")
    raw: Optional[str] = Field(default=None, description="Original budget text")

    class Config:
        """Pydantic configuration"""

        frozen = True


class GiftRequest(BaseModel):
    """Validated gift request, all fields trimmed and non-empty"""

    recipient: str = Field(..., min_length=1, description="Who the gift is for")
    occasion: str = Field(..., min_length=1, description="Occasion for the gift")
    budget_text: str = Field(..., min_length=1, description="Budget as typed by the user")

    class Config:
        """Pydantic configuration"""

        frozen = True
        json_schema_extra = {
            "example": {
                "recipient": "my dad",
                "occasion": "birthday",
                "budget_text": "under $100",
            }
        }


class LinkRef(BaseModel):
    """A single shopping link attached to a suggestion"""

    label: str = Field(..., description="Button label (30 characters max)")
    url: str = Field(..., description="https:// URL (400 characters max)")


class ProductSuggestion(BaseModel):
    """One sanitized product suggestion"""

    title: str = Field(default="", description="Product name (120 characters max)")
    why: str = Field(default="", description="Why it fits (300 characters max)")
    price_note: str = Field(default="", description="Approximate price (60 characters max)")
    links: list[LinkRef] = Field(default_factory=list, description="Shopping links")

    class Config:
        """Pydantic configuration"""

        json_schema_extra = {
            "example": {
                "title": "Will & Bear Explorer Hat",
                "why": "A sustainable wool felt hat for the dad who is always outdoors.",
                "price_note": "Approx $150-$190",
                "links": [
                    {
                        "label": "Will & Bear",
                        "url": "https://www.awin1.com/cread.php?awinmid=119813",
                    }
                ],
            }
        }


class CurationResult(BaseModel):
    """Response payload: ordered product suggestions (empty means no matches)"""

    products: list[ProductSuggestion] = Field(default_factory=list)


class AffiliatePartner(BaseModel):
    """Approved affiliate partner, loaded once at startup and never mutated"""

    brand_key: str
    brand: str
    homepage: str
    affiliate_url: str
    description: str = ""
    detection_keywords: tuple[str, ...] = Field(..., min_length=1)
    categories: tuple[str, ...] = ()
    vibes: tuple[str, ...] = ()

    @field_validator("detection_keywords")
    @classmethod
    def normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Lower-case keywords and drop blanks"""
        keywords = tuple(k.strip().lower() for k in v if k and k.strip())
        if not keywords:
            raise ValueError("detection_keywords must contain at least one keyword")
        return keywords

    @field_validator("affiliate_url")
    @classmethod
    def validate_affiliate_url(cls, v: str) -> str:
        if not v.startswith("https://"):
            raise ValueError("affiliate_url must start with https://")
        return v

    class Config:
        """Pydantic configuration"""

        frozen = True
