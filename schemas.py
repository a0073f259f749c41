"""
Database Schemas for Eats Exchange

Each Pydantic model below describes a document accepted at the API boundary.
Listings live in the "foods" collection and pickup requests in "requests".
Field names match the documents the web client already stores.
"""

from typing import Annotated, Optional, Literal, Union
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt
from email_validator import EmailNotValidError, validate_email
from datetime import datetime

RequestStatus = Literal['pending', 'accepted', 'rejected']


def check_email(value: str) -> str:
    # Emails are matched byte for byte, so keep what the client sent
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"value is not a valid email address: {exc}")
    return value


IdentityEmail = Annotated[str, AfterValidator(check_email)]


# Listing models
class DonatorInfo(BaseModel):
    Image: Optional[str] = Field(None, description="Donator avatar URL")
    Name: str = Field(..., description="Donator display name")
    Email: IdentityEmail = Field(..., description="Owner key of the listing")


class FoodListing(BaseModel):
    model_config = ConfigDict(extra="allow")

    FoodName: str = Field(..., description="Food name, searched case-insensitively")
    FoodImage: str = Field(..., description="Image URL")
    FoodQuantity: Union[NonNegativeInt, NonNegativeFloat] = Field(..., description="Servings or units on offer")
    PickupLocation: str = Field(..., description="Where to collect the food")
    ExpiredDateTime: datetime = Field(..., description="When the food stops being safe")
    AdditionalNotes: Optional[str] = Field(None, description="Free-form notes")
    Donator: DonatorInfo

    def update_fields(self) -> dict:
        """The fixed field set a listing update may replace."""
        return self.model_dump(include=set(FoodListing.model_fields))


# Request models
class RequesterInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    Email: IdentityEmail = Field(..., description="Owner key of the request")
    Name: Optional[str] = None
    Image: Optional[str] = None


class PickupRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    FoodId: str = Field(..., description="Listing _id, stored by value")
    Requester: RequesterInfo
    Status: RequestStatus = Field('pending', description="Request status")


class RequestStatusUpdate(BaseModel):
    Status: RequestStatus


# Auth models
class TokenClaims(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: IdentityEmail
