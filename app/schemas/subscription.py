"""Subscription Schemas — create/update payloads and the public record.

Invariants:
    - url and cron required on create; every field optional on update
    - On update, blank url/cron (after stripping) is treated as not given
    - Cron syntax is checked by core/cron.py in the handler, not here, so the
      error reaches the client as "Invalid cron expression: <reason>"
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubscriptionCreate(BaseModel):
    url: str = Field(min_length=1, max_length=2048)
    cron: str = Field(min_length=1, max_length=100)
    auto_update: bool

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url cannot be empty or whitespace")
        return v


class SubscriptionUpdate(BaseModel):
    """Blank url or cron means "leave unchanged"."""
    url: str | None = Field(None, max_length=2048)
    cron: str | None = Field(None, max_length=100)
    auto_update: bool | None = None

    @field_validator("url", "cron", mode="before")
    @classmethod
    def blank_as_unset(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class SubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    last_check: datetime | None = None
    last_fetch: datetime | None = None
    created_at: datetime
    updated_at: datetime
    total_nodes: int
    alive_nodes: int
    cron: str
    auto_update: bool
