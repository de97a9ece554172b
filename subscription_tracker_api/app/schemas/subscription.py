"""
Pydantic models for subscription data.

``SubscriptionBase`` holds the mutable fields shared by requests and
stored records.  ``Subscription`` is the stored record, and
``SubscriptionRead`` adds the derived ``total_monthly_cost`` that is
computed on every read and never stored.
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, StrictBool, field_validator


class BillingCycle(str, Enum):
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUALLY = "Annually"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ExportScope(str, Enum):
    """Which records a CSV export contains.

    ``page`` is the window the list endpoint would return for the same
    query; ``all`` is every record matching the filters.
    """

    PAGE = "page"
    ALL = "all"


class SubscriptionBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["Netflix"])
    billing_cycle: BillingCycle = Field(..., examples=["Monthly"])
    is_active: StrictBool = Field(..., examples=[True])
    base_cost: float = Field(0.0, ge=0, allow_inf_nan=False, examples=[15.99])
    tax_rate: float = Field(0.0, allow_inf_nan=False, examples=[0.05])

    @field_validator("base_cost", "tax_rate", mode="before")
    @classmethod
    def _null_means_zero(cls, value):
        return 0.0 if value is None else value


class SubscriptionCreate(SubscriptionBase):
    """Body of ``POST /subscriptions`` and ``PUT /subscriptions/{id}``.

    An update replaces every mutable field, so both operations share
    the same schema.
    """


class Subscription(SubscriptionBase):
    """Stored subscription record."""

    id: str
    user_id: str
    created_at: datetime

    model_config = {"frozen": True}


class SubscriptionRead(Subscription):
    """Subscription as returned by the API."""

    total_monthly_cost: float


class SubscriptionPage(BaseModel):
    """One page of a filtered and sorted subscription listing."""

    items: List[SubscriptionRead]
    page: int
    limit: int
    total: int
    has_next_page: bool = Field(..., alias="hasNextPage")
    has_prev_page: bool = Field(..., alias="hasPrevPage")

    model_config = {"populate_by_name": True}
