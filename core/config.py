"""Studio configuration."""

import os

from pydantic import BaseModel, Field

# Environment variable -> StudioConfig field
_ENV_FIELDS = {
    "STUDIO_STORAGE_BACKEND": "storage_backend",
    "STUDIO_STORAGE_DIR": "storage_dir",
    "STUDIO_VALKEY_URL": "valkey_url",
    "STUDIO_STORAGE_KEY": "storage_key",
    "STUDIO_INITIAL_CREDITS": "initial_credits",
    "STUDIO_TIMEZONE": "timezone",
    "STUDIO_HIGH_VALUE_THRESHOLD": "high_value_threshold",
    "STUDIO_REMINDER_WINDOW_DAYS": "reminder_window_days",
    "STUDIO_RECENT_PAYMENT_DAYS": "recent_payment_days",
}


class StudioConfig(BaseModel):
    """
    Studio configuration.

    Defaults reproduce the stock dashboard: device-local storage under the
    "studioData" key, 500 starter message credits, Indian Standard Time.
    """

    # Storage
    storage_backend: str = Field(
        default="local",
        description="Where the studio aggregate lives",
        pattern="^(local|valkey)$",
    )
    storage_dir: str = Field(
        default="~/.studio-ledger",
        description="Directory for the local backend",
    )
    valkey_url: str = Field(
        default="redis://localhost:6379/0",
        description="Connection URL for the valkey backend",
    )
    storage_key: str = Field(
        default="studioData",
        description="Key the whole aggregate is stored under",
        pattern=r"^[A-Za-z0-9_.\-]+$",
    )

    # Ledger
    initial_credits: int = Field(
        default=500,
        description="WhatsApp credits a fresh studio starts with",
        ge=0,
    )
    timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA timezone used for 'today' and monthly revenue",
    )
    high_value_threshold: int = Field(
        default=30000,
        description="total_spent above which a customer counts as high value",
        ge=0,
    )
    reminder_window_days: int = Field(
        default=7,
        description="Look-ahead window for birthday and anniversary wishes",
        ge=1,
        le=60,
    )
    recent_payment_days: int = Field(
        default=7,
        description="Window for the 'recent' payments filter",
        ge=1,
        le=90,
    )


def load_config(environ: dict[str, str] | None = None) -> StudioConfig:
    """
    Build config from STUDIO_* environment variables.

    Unset variables keep their defaults. Invalid values raise
    pydantic.ValidationError at startup.
    """
    env = os.environ if environ is None else environ
    values = {
        field: env[var]
        for var, field in _ENV_FIELDS.items()
        if env.get(var)
    }
    return StudioConfig(**values)
