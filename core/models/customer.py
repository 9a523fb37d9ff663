"""Customer (client) domain models."""

from datetime import date, datetime

from pydantic import EmailStr, Field, field_validator

from core.models.base import StudioModel, require_text


class CustomerCreate(StudioModel):
    """Data required to create a customer. Name and phone are mandatory."""

    name: str = Field(..., max_length=255)
    phone: str = Field(..., max_length=50)
    email: EmailStr | None = None
    address: str = Field("", max_length=500)
    birthday: date | None = None
    anniversary: date | None = None
    credit_balance: int = Field(0, ge=0)
    total_spent: int = Field(0, ge=0)
    notes: str | None = Field(None, max_length=10000)

    @field_validator("name", "phone")
    @classmethod
    def reject_blank(cls, value: str, info) -> str:
        return require_text(value, info.field_name)

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_is_none(cls, value):
        # The dashboard form submits "" when the field is left empty
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CustomerUpdate(StudioModel):
    """Data that can be updated on a customer. All fields optional."""

    name: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    address: str | None = Field(None, max_length=500)
    birthday: date | None = None
    anniversary: date | None = None
    credit_balance: int | None = Field(None, ge=0)
    total_spent: int | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=10000)

    @field_validator("name", "phone")
    @classmethod
    def reject_blank(cls, value: str | None, info) -> str | None:
        return require_text(value, info.field_name)

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Customer(StudioModel):
    """Full customer entity as stored."""

    id: str
    name: str
    phone: str
    email: str | None = None
    address: str = ""
    birthday: date | None = None
    anniversary: date | None = None
    credit_balance: int = 0
    total_spent: int = 0
    event_history: list[str] = Field(default_factory=list)
    notes: str | None = None
    created_at: datetime

    @property
    def phone_digits(self) -> str:
        """Phone number with everything but digits stripped."""
        return "".join(ch for ch in self.phone if ch.isdigit())
