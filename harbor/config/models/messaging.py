"""Client messaging configuration."""

from pydantic import BaseModel, Field


class MessagingConfig(BaseModel):
    """Client window coordination settings."""

    settle_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Wait before messaging a freshly opened window",
    )
