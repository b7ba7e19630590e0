"""Listing models."""

from enum import Enum
from typing import Optional
from datetime import date
from pydantic import BaseModel, Field


class PropertyType(str, Enum):
    """Kind of housing a listing offers."""
    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    DORM = "DORM"
    CONDO = "CONDO"
    TOWNHOUSE = "TOWNHOUSE"
    STUDIO = "STUDIO"


class ListingType(str, Enum):
    """What the owner is open to."""
    BOTH = "BOTH"
    SWAP_ONLY = "SWAP_ONLY"
    RENT_ONLY = "RENT_ONLY"


class ListingStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    RENTED = "RENTED"
    SWAPPED = "SWAPPED"


class Listing(BaseModel):
    """Student housing listing."""
    listing_id: str = Field(..., description="Listing ID (text)")
    owner_id: str = Field(..., description="Owning user ID (text FK)")
    title: Optional[str] = Field(None, description="Listing title")
    listing_type: ListingType = Field(default=ListingType.BOTH, description="BOTH, SWAP_ONLY or RENT_ONLY")
    property_type: PropertyType = Field(..., description="Property type")
    bedrooms: int = Field(..., ge=0, description="Number of bedrooms")
    bathrooms: float = Field(..., ge=0, description="Number of bathrooms (half baths allowed)")
    near_university: str = Field(..., description="University the property is close to")
    amenities: dict[str, bool] = Field(default_factory=dict, description="Named amenity flags")
    available_from: date = Field(..., description="First available day")
    available_to: date = Field(..., description="Last available day")
    rent_price: Optional[float] = Field(None, ge=0, description="Monthly rent")
    status: ListingStatus = Field(default=ListingStatus.ACTIVE, description="Listing status")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def enabled_amenities(self) -> set[str]:
        """Names of amenity flags set to true."""
        return {name for name, enabled in self.amenities.items() if enabled is True}
