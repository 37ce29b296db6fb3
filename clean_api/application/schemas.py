"""
Pydantic models for request/response schemas.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from ..validators import validate_email_format


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting either casing."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _check_email(value: str) -> str:
    is_valid, message = validate_email_format(value)
    if not is_valid:
        raise ValueError(message)
    return value.strip()


def _check_matches(value: str, info: ValidationInfo, other: str) -> str:
    if other in info.data and value != info.data[other]:
        raise ValueError(f"'{to_camel(info.field_name)}' and '{to_camel(other)}' do not match.")
    return value


# Product Models


class ProductDto(CamelModel):
    """Product as returned by the API."""

    id: int
    name: str
    description: str = ""
    price: Decimal
    stock_quantity: int
    sku: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    date_created: Optional[datetime] = None
    created_by: Optional[str] = None
    date_modified: Optional[datetime] = None
    modified_by: Optional[str] = None

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)


class ProductPayload(CamelModel):
    """Client-controlled product fields shared by create and update."""

    name: str = ""
    description: str = ""
    price: Decimal = Decimal("0")
    stock_quantity: int = 0
    sku: Optional[str] = None
    is_active: bool = True


class CreateProductCommand(ProductPayload):
    """Create a product; the handler returns the new product's id."""


class UpdateProductCommand(ProductPayload):
    """Replace every client-controlled field of an existing product."""

    id: int


class DeleteProductCommand(CamelModel):
    """Hard-delete a product."""

    id: int


class GetProductByIdQuery(CamelModel):
    """Fetch one product."""

    id: int


class GetAllProductsQuery(CamelModel):
    """Fetch every product."""


class CreatedResponse(CamelModel):
    """Identifier of a newly created resource."""

    id: int


# Auth Request Models


class LoginRequest(CamelModel):
    """Model for user sign in."""

    email: str
    password: str = Field(..., min_length=1)
    remember_me: bool = False

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class RegisterRequest(CamelModel):
    """Model for user registration."""

    email: str
    password: str = Field(..., min_length=8)
    confirm_password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        return _check_matches(v, info, "password")


class ChangePasswordRequest(CamelModel):
    """Model for changing the current user's password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)
    confirm_new_password: str = Field(..., min_length=1)

    @field_validator("confirm_new_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        return _check_matches(v, info, "new_password")


class ForgotPasswordRequest(CamelModel):
    """Model for requesting a password reset token."""

    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class ResetPasswordRequest(CamelModel):
    """Model for resetting a password with a reset token."""

    email: str
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)
    confirm_new_password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("confirm_new_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        return _check_matches(v, info, "new_password")


# User Models


class UpdateUserRequest(CamelModel):
    """Model for updating a user's profile (administration)."""

    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_email(v)


class RoleAssignment(CamelModel):
    """Model naming a role to assign or remove."""

    role_name: str = Field(..., min_length=1, max_length=256)


# Response Models


class AuthResponse(CamelModel):
    """Model for a successful sign in."""

    token: str
    user_id: str
    email: str
    user_name: str
    full_name: str
    roles: List[str] = Field(default_factory=list)
    expires_on: datetime


class UserDto(CamelModel):
    """Model for user data in responses."""

    id: str
    email: str
    user_name: str
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    is_active: bool
    roles: List[str] = Field(default_factory=list)
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PasswordResetTokenResponse(CamelModel):
    """Acknowledgement of a reset request; the token is only echoed in debug mode."""

    message: str
    success: bool = True
    token: Optional[str] = None


class MessageResponse(CamelModel):
    """Generic message response."""

    message: str
    success: bool = True


class ErrorResponse(CamelModel):
    """Uniform error body."""

    timestamp: datetime
    path: str
    status: int
    error: str
    message: str
    validation_errors: Optional[dict] = None
