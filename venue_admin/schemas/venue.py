"""
Venue schemas for request/response models
"""

from typing import Optional, List, Dict, Any, Union
from datetime import datetime
from enum import Enum
from pydantic import Field, field_validator
import uuid

from venue_admin.models.provisioning import ProvisioningStepName, ProvisioningStepStatus
from venue_admin.models.venue import VenueStatus
from venue_admin.models.validators import check_country_code, check_currency_code
from venue_admin.schemas.base import BaseSchema, RequestSchema


class VenueListStatus(str, Enum):
    ALL = "all"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DELETED = "deleted"


class ImageReference(RequestSchema):
    """An uploaded image; ``storage_key`` is present for our own uploads"""
    url: str = Field(..., min_length=1)
    storage_key: Optional[str] = None


class VenueCreate(RequestSchema):
    owner_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    address: str = Field(..., min_length=1)
    country: str
    currency: str
    longitude: float = Field(..., ge=-180, le=180)
    latitude: float = Field(..., ge=-90, le=90)
    commission_percentage: float = Field(..., ge=0, le=100)
    sports_types: List[str] = []
    amenities: List[str] = []
    images: List[Union[str, ImageReference]] = []

    @field_validator("country")
    @classmethod
    def validate_country(cls, v):
        return check_country_code(v)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        return check_currency_code(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "ownerId": "0b5c8f53-3f4a-4c1d-9a55-1f2f0e8a7b10",
                "name": "Riverside Sports Centre",
                "description": "Indoor courts by the river",
                "address": "12 Bank Street, London",
                "country": "GB",
                "currency": "GBP",
                "longitude": -0.1276,
                "latitude": 51.5072,
                "commissionPercentage": 10,
                "sportsTypes": ["Padel", "Tennis"],
                "amenities": ["parking", "showers"],
                "images": [
                    {"url": "https://media.example.com/venues/temp/a1.jpg", "storageKey": "venues/temp/a1.jpg"}
                ]
            }
        }
    }


class VenueUpdate(RequestSchema):
    """Partial update; the owner cannot be changed"""
    status: Optional[VenueStatus] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    address: Optional[str] = Field(None, min_length=1)
    country: Optional[str] = None
    currency: Optional[str] = None
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    commission_percentage: Optional[float] = Field(None, ge=0, le=100)
    sports_types: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_enabled: Optional[bool] = None

    model_config = {"extra": "forbid"}

    @field_validator("country")
    @classmethod
    def validate_country(cls, v):
        return v if v is None else check_country_code(v)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        return v if v is None else check_currency_code(v)


class OwnerSummary(BaseSchema):
    id: uuid.UUID
    name: str
    email: Optional[str] = None


class ProvisioningStepResponse(BaseSchema):
    step: ProvisioningStepName
    status: ProvisioningStepStatus
    attempts: int
    last_error: Optional[str] = None
    completed_at: Optional[datetime] = None


class VenueResponse(BaseSchema):
    id: uuid.UUID
    owner_id: uuid.UUID
    owner: Optional[OwnerSummary] = None
    name: str
    description: str
    address: str
    country: str
    currency: str
    longitude: float
    latitude: float
    location: Dict[str, Any]
    amenities: List[str]
    sports_types: List[str]
    images: List[str]
    commission_percentage: float
    stripe_account_id: Optional[str] = None
    stripe_onboarding_complete: bool
    status: VenueStatus
    is_enabled: bool
    deleted_at: Optional[datetime] = None
    rating_average: float
    rating_count: int
    rating_distribution: Dict[str, int]
    provisioning_steps: List[ProvisioningStepResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None


class VenueListResponse(BaseSchema):
    venues: List[VenueResponse]
    total_count: int
    total_pages: int
    current_page: int


class VenueSearchResult(BaseSchema):
    id: uuid.UUID
    name: str


class CountryCount(BaseSchema):
    country: str
    count: int


class VenueStats(BaseSchema):
    total: int
    pending: int
    approved: int
    rejected: int
    deleted: int
    by_country: List[CountryCount]


class OnboardingLinkResponse(BaseSchema):
    url: str
    expires_at: Optional[datetime] = None
