"""
Pydantic models for the /curate request and response types and pipeline settings.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from errors import MissingFieldsError
from models.gift import BudgetBand, BudgetRange, GiftRequest

STRICT_MAX_LINKS = 1
PERMISSIVE_MAX_LINKS = 4


class CurateRequest(BaseModel):
    """Request model for the /curate endpoint"""

    demographic: Optional[str] = Field(
        default=None, description="Who the gift is for (e.g., 'my dad')"
    )
    occasion: Optional[str] = Field(default=None, description="Occasion (e.g., 'birthday')")
    budget: Optional[str] = Field(default=None, description="Budget text (e.g., 'under $100')")

    def to_gift_request(self) -> GiftRequest:
        """
        Trim fields and convert to a GiftRequest.

        Raises:
            MissingFieldsError: If any field is missing or blank after trimming
        """
        demographic = (self.demographic or "").strip()
        occasion = (self.occasion or "").strip()
        budget = (self.budget or "").strip()
        if not demographic or not occasion or not budget:
            raise MissingFieldsError()
        return GiftRequest(recipient=demographic, occasion=occasion, budget_text=budget)

    class Config:
        """Pydantic configuration"""

        json_schema_extra = {
            "example": {
                "demographic": "my dad",
                "occasion": "birthday",
                "budget": "under $100",
            }
        }


class ErrorResponse(BaseModel):
    """Error body returned for 400 and 500 responses"""

    error: str


class CurationDirective(BaseModel):
    """Rendered instruction for the generation model plus the values it was built from"""

    budget: BudgetRange
    band: BudgetBand
    idea_count: int = Field(..., ge=1)
    text: str

    class Config:
        """Pydantic configuration"""

        frozen = True


class LinkMode(str, Enum):
    """How many retailer links a suggestion may keep"""

    STRICT = "strict"
    PERMISSIVE = "permissive"


class CurationSettings(BaseModel):
    """Pipeline settings resolved once at startup"""

    model_name: str = "gemini-2.5-flash"
    max_output_tokens: int = Field(default=900, ge=1)
    link_mode: LinkMode = LinkMode.STRICT
    affiliate_override: bool = True

    @property
    def max_links(self) -> int:
        if self.link_mode == LinkMode.PERMISSIVE:
            return PERMISSIVE_MAX_LINKS
        return STRICT_MAX_LINKS

    class Config:
        """Pydantic configuration"""

        frozen = True
        protected_namespaces = ()
