"""Shared pydantic configuration for studio models.

Python attributes are snake_case; the persisted aggregate uses the
dashboard's camelCase keys (customerId, balanceDue, whatsappCredits...).
Request payloads are accepted under either name.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StudioModel(BaseModel):
    """Base for every studio entity and request model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def require_text(value: str | None, field_name: str) -> str | None:
    """Strip a required text field and reject blanks. None passes through."""
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{field_name} must not be blank")
    return stripped
