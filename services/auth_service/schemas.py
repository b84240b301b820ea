from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AddressBase(BaseModel):
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    landmark: Optional[str] = None
    zip_code: str = Field(
        min_length=1,
        validation_alias=AliasChoices("zipCode", "zip_code"),
        serialization_alias="zipCode",
    )
    country: str = Field(min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class AddressCreate(AddressBase):
    pass


class AddressResponse(AddressBase):
    id: int

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    is_active: bool
    addresses: List[AddressResponse] = []

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Public view of a user: the buyer on checkout pages or a line item's merchant."""
    id: int
    email: str
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
